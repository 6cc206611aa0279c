"""Windowing stage contract."""

from typing import TYPE_CHECKING, Sequence

from symfeat.contracts.base import require

if TYPE_CHECKING:
    from symfeat.extraction.windower import Window


def assert_windows(windows: Sequence["Window"], total_seconds: float) -> None:
    """Enforce windowing contract.

    Windows are indexed ``0..n-1``, start times strictly increase, every
    window has ``start <= end`` and none ends after the recording.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(len(windows) > 0, "Window contract violated: no windows produced")
    previous_start = None
    for index, window in enumerate(windows):
        require(
            window.index == index,
            f"Window contract violated: window {index} has index {window.index}"
        )
        require(
            window.start_time <= window.end_time and window.start_tick <= window.end_tick,
            f"Window contract violated: window {index} ends before it starts"
        )
        require(
            window.end_time <= total_seconds + 1e-9,
            f"Window contract violated: window {index} ends at {window.end_time:.3f}s, "
            f"after the recording ({total_seconds:.3f}s)"
        )
        if previous_start is not None:
            require(
                window.start_time > previous_start,
                f"Window contract violated: window {index} does not start after window {index - 1}"
            )
        previous_start = window.start_time
