"""Centralized failure policy and error hierarchy.

Every error raised by symfeat derives from ``SymfeatError`` except
``ContractViolation``, which marks a programmer error rather than a
property of the input or configuration. ``FailurePolicy`` tells callers
how far a failure of each kind reaches.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """Scope of a failure.

    FAIL_FAST: abort the run before (or while) touching recordings
    SKIP_RECORDING: log, skip the current recording, continue the batch
    MARK_UNAVAILABLE: log, record the affected cell as UNAVAILABLE, continue
    """
    FAIL_FAST = "fail_fast"
    SKIP_RECORDING = "skip_recording"
    MARK_UNAVAILABLE = "mark_unavailable"

    @classmethod
    def for_error(cls, error: BaseException) -> "FailurePolicy":
        """Return the policy that applies to ``error``."""
        if isinstance(error, (ConfigurationError, ResourceExhaustionError, ContractViolation)):
            return cls.FAIL_FAST
        if isinstance(error, InputParseError):
            return cls.SKIP_RECORDING
        return cls.MARK_UNAVAILABLE


class ContractViolation(RuntimeError):
    """Raised when a stage contract is violated.

    This indicates a bug in extraction logic, not bad user input or a
    malformed recording. It means a stage did not produce the invariants
    it promised.

    Key distinction:
    - ConfigurationError: user/config error (raised before any recording)
    - InputParseError / ComputationError: recoverable, scoped failures
    - ContractViolation: programmer error
    """
    pass


class SymfeatError(Exception):
    """Base class for symfeat errors."""


class ConfigurationError(SymfeatError, ValueError):
    """Invalid run configuration or descriptor catalog. Fatal pre-run."""


class InputParseError(SymfeatError):
    """A recording could not be decoded. The recording is skipped."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


class ComputationError(SymfeatError):
    """A single descriptor failed on a single window."""

    def __init__(self, descriptor: str, window, message: str):
        self.descriptor = descriptor
        self.window = window
        super().__init__(f"'{descriptor}' failed on window {window}: {message}")


class ResourceExhaustionError(SymfeatError):
    """Memory or similar resources ran out. Aborts the whole run."""
