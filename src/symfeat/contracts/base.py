"""The single check used by every stage contract."""

from symfeat.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Raise ``ContractViolation`` with ``message`` unless ``condition`` holds.

    Stage boundaries (plan, windows, representation) call this on the
    structures the previous stage returned. A failure is a bug in symfeat,
    so nothing catches it below the worker thread.

    Examples
    --------
    >>> require(len(plan.entries) > 0, "Plan contract violated: plan is empty")
    >>> require(hist.ndim == 1, "Representation contract violated: histogram is not 1-D")
    """
    if not condition:
        raise ContractViolation(message)
