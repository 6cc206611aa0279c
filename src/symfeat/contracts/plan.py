"""Plan stage contract.

Enforces the guarantee that an evaluation plan can be executed top to
bottom: every entry comes strictly after the entries it reads.
"""

from typing import TYPE_CHECKING

from symfeat.contracts.base import require

if TYPE_CHECKING:
    from symfeat.extraction.scheduler import EvaluationPlan


def assert_plan_ordered(plan: "EvaluationPlan") -> None:
    """Enforce plan contract.

    Called by the scheduler right before it returns a plan.

    Parameters
    ----------
    plan : EvaluationPlan
        Output of ``build_plan``

    Raises
    ------
    ContractViolation
        If an entry precedes one of its prerequisites, positions are not
        contiguous, or nothing is saved.
    """
    require(len(plan.entries) > 0, "Plan contract violated: plan is empty")
    require(
        any(entry.save for entry in plan.entries),
        "Plan contract violated: no entry is saved"
    )
    for position, entry in enumerate(plan.entries):
        require(
            entry.position == position,
            f"Plan contract violated: '{entry.name}' has position {entry.position}, "
            f"expected {position}"
        )
        require(
            len(entry.prerequisite_positions) == len(entry.offsets),
            f"Plan contract violated: '{entry.name}' offsets do not match prerequisites"
        )
        for prerequisite in entry.prerequisite_positions:
            require(
                prerequisite < position,
                f"Plan contract violated: '{entry.name}' at {position} reads "
                f"position {prerequisite}"
            )
