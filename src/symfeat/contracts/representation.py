"""Representation stage contract.

Enforces the guarantee that a built representation is safe to share with
every descriptor: normalized histograms and read-only arrays.
"""

from typing import TYPE_CHECKING

import numpy as np

from symfeat.contracts.base import require

if TYPE_CHECKING:
    from symfeat.extraction.representation import IntermediateRepresentation

_HISTOGRAMS = (
    "rhythmic_value_histogram",
    "basic_pitch_histogram",
    "pitch_class_histogram",
    "fifths_pitch_histogram",
    "melodic_interval_histogram",
    "beat_histogram",
    "beat_histogram_tempo_standardized",
)


def _is_normalized(values: np.ndarray) -> bool:
    total = float(values.sum())
    return total == 0.0 or abs(total - 1.0) < 1e-6


def assert_representation(rep: "IntermediateRepresentation") -> None:
    """Enforce representation contract.

    Called by ``RepresentationBuilder.build`` after every window.

    Parameters
    ----------
    rep : IntermediateRepresentation

    Raises
    ------
    ContractViolation
        If a histogram does not sum to 1 (or 0), motion fractions do not
        sum to 1 (or 0), tick maps disagree in length, or an array is
        writable.
    """
    for name in _HISTOGRAMS:
        values = getattr(rep, name)
        require(
            values.ndim == 1 and _is_normalized(values),
            f"Representation contract violated: '{name}' sums to {values.sum():.6f}"
        )
        require(
            not values.flags.writeable,
            f"Representation contract violated: '{name}' is writable"
        )

    motion = rep.motion.as_array()
    require(
        _is_normalized(motion),
        f"Representation contract violated: motion fractions sum to {motion.sum():.6f}"
    )

    ticks = rep.tick_length + 1
    for name in ("seconds_per_tick", "volumes", "channel_tick_map",
                 "pitched_tick_map", "unpitched_tick_map"):
        values = getattr(rep, name)
        require(
            values.shape[0] == ticks,
            f"Representation contract violated: '{name}' has {values.shape[0]} ticks, "
            f"expected {ticks}"
        )
        require(
            not values.flags.writeable,
            f"Representation contract violated: '{name}' is writable"
        )

    require(
        len(rep.note_loudness) == len(rep.notes),
        "Representation contract violated: per-note arrays disagree with note count"
    )
