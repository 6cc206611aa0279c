"""Extraction contracts and the error hierarchy.

Contracts fail immediately and loudly when a stage does not produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Descriptors handle musical edge cases
"""

from symfeat.contracts.failure import (
    ComputationError,
    ConfigurationError,
    ContractViolation,
    FailurePolicy,
    InputParseError,
    ResourceExhaustionError,
    SymfeatError,
)
from symfeat.contracts.base import require
from symfeat.contracts.invariants import PIPELINE_INVARIANTS, STAGE_REQUIREMENTS
from symfeat.contracts.plan import assert_plan_ordered
from symfeat.contracts.windows import assert_windows
from symfeat.contracts.representation import assert_representation

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "SymfeatError",
    "ConfigurationError",
    "InputParseError",
    "ComputationError",
    "ResourceExhaustionError",
    "require",
    "assert_plan_ordered",
    "assert_windows",
    "assert_representation",
    "PIPELINE_INVARIANTS",
    "STAGE_REQUIREMENTS",
]
