"""Pitch, melodic-interval and rhythmic-value histograms.

All histograms are normalized to sum to 1. A window with nothing to count
yields an all-zero histogram rather than NaNs.
"""

import numpy as np

from symfeat.extraction.representation.notes import NoteCollection

__all__ = [
    'RHYTHMIC_VALUES',
    'normalize',
    'pitch_histograms',
    'melodic_lines',
    'melodic_interval_histogram',
    'rhythmic_value_histogram',
]

# Canonical note values in quarter notes: 32nd, 16th, 8th, dotted 8th,
# quarter, dotted quarter, half, dotted half, whole, dotted whole,
# double whole, dotted double whole.
RHYTHMIC_VALUES = np.array([0.125, 0.25, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 4.0, 6.0, 8.0, 12.0])
_RHYTHMIC_BOUNDARIES = (RHYTHMIC_VALUES[:-1] + RHYTHMIC_VALUES[1:]) / 2.0


def normalize(counts: np.ndarray) -> np.ndarray:
    """Scale ``counts`` to sum to 1 (all zeros stay zeros)."""
    counts = np.asarray(counts, dtype=float)
    total = counts.sum()
    if total > 0:
        return counts / total
    return np.zeros_like(counts)


def pitch_histograms(notes: NoteCollection):
    """Basic pitch, pitch-class and circle-of-fifths histograms.

    Only pitched (non-percussion) onsets are counted. The fifths histogram
    moves pitch class ``i`` to bin ``(7 * i) % 12`` so adjacent bins are a
    perfect fifth apart.

    Returns
    -------
    tuple of np.ndarray
        ``(basic_pitch[128], pitch_class[12], fifths[12])``
    """
    pitches = notes.pitch[notes.pitched]
    basic = np.bincount(pitches, minlength=128)[:128].astype(float)

    pitch_class = np.zeros(12)
    for pc in range(12):
        pitch_class[pc] = basic[pc::12].sum()

    fifths = np.zeros(12)
    for pc in range(12):
        fifths[(7 * pc) % 12] = pitch_class[pc]

    return normalize(basic), normalize(pitch_class), normalize(fifths)


def melodic_lines(notes: NoteCollection) -> list:
    """Signed pitch successions, one monophonic line per (track, channel).

    Simultaneous onsets on the same track, channel and tick collapse to the
    first one in event order.
    """
    lines = {}
    last_tick = {}
    mask = notes.pitched
    for tick, pitch, channel, track in zip(notes.start_tick[mask], notes.pitch[mask],
                                           notes.channel[mask], notes.track[mask]):
        key = (int(track), int(channel))
        if last_tick.get(key) == tick:
            continue
        last_tick[key] = tick
        lines.setdefault(key, []).append(int(pitch))
    return [np.diff(np.asarray(line)) for _, line in sorted(lines.items())]


def melodic_interval_histogram(lines: list) -> np.ndarray:
    """Histogram (128 bins) of absolute melodic intervals in semitones."""
    counts = np.zeros(128)
    for intervals in lines:
        if len(intervals):
            counts += np.bincount(np.minimum(np.abs(intervals), 127), minlength=128)
    return normalize(counts)


def rhythmic_value_histogram(notes: NoteCollection, resolution: int) -> np.ndarray:
    """Quantized note values of pitched notes (12 bins).

    Each duration (in quarter notes) falls in the bin of the nearest
    canonical value; midpoints between adjacent canonical values are the
    boundaries.
    """
    durations = notes.duration_ticks[notes.pitched] / float(resolution)
    bins = np.searchsorted(_RHYTHMIC_BOUNDARIES, durations, side="left")
    return normalize(np.bincount(bins, minlength=len(RHYTHMIC_VALUES)))
