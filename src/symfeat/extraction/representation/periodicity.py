"""Beat histogram from autocorrelation of the onset signal.

The onset signal holds, per tick, the sum of ``velocity * channel volume``
of all note-ons at that tick. Its autocorrelation

    y[lag] = (1 / N) * sum_n x[n] * x[n - lag]

is evaluated only for lags inside the configured tempo band and folded
into one bin per beats-per-minute value: bin ``b`` collects the lags
``ticks(b) <= lag < ticks(b - 1)`` where ``ticks(bpm) = int(tps * 60 / bpm)``.
"""

import numpy as np
from scipy import signal

from symfeat.extraction.representation.histograms import normalize

__all__ = [
    'onset_signal',
    'bpm_to_ticks',
    'autocorrelation',
    'beat_histogram',
    'peak_table',
]


def onset_signal(tick_length: int, notes, volumes: np.ndarray) -> np.ndarray:
    """Loudness-weighted onset strength per tick."""
    x = np.zeros(tick_length + 1)
    if len(notes):
        weights = notes.velocity * volumes[notes.start_tick, notes.channel]
        np.add.at(x, notes.start_tick, weights)
    return x


def bpm_to_ticks(bpm: float, ticks_per_second: float) -> int:
    """Number of ticks in one beat at ``bpm``."""
    return int(ticks_per_second * 60.0 / bpm)


def autocorrelation(x: np.ndarray, max_lag: int) -> np.ndarray:
    """``y[lag]`` for ``0 <= lag < max_lag`` (zero past the signal length)."""
    n = len(x)
    y = np.zeros(max_lag)
    if n == 0 or max_lag <= 0:
        return y
    full = signal.correlate(x, x, mode="full")
    available = min(max_lag, n)
    y[:available] = full[n - 1:n - 1 + available] / n
    return y


def beat_histogram(x: np.ndarray, ticks_per_second: float,
                   min_bpm: int = 40, max_bpm: int = 200) -> np.ndarray:
    """Normalized beat histogram with ``max_bpm + 1`` bins.

    Bins below ``min_bpm`` are always zero.
    """
    histogram = np.zeros(max_bpm + 1)
    longest = bpm_to_ticks(min_bpm - 1, ticks_per_second)
    y = autocorrelation(x, longest)
    for bpm in range(min_bpm, max_bpm + 1):
        low = bpm_to_ticks(bpm, ticks_per_second)
        high = bpm_to_ticks(bpm - 1, ticks_per_second)
        histogram[bpm] = y[low:high].sum()
    return normalize(histogram)


def peak_table(histogram: np.ndarray) -> np.ndarray:
    """Thresholded peaks of a beat histogram, shape ``(bins, 3)``.

    Columns keep magnitudes above 0.1, above 0.01 and above 30% of the
    highest bin. Of two adjacent kept bins only the larger survives, so
    every nonzero entry is a peak.
    """
    table = np.zeros((len(histogram), 3))
    if not len(histogram):
        return table
    highest = histogram.max()
    table[histogram > 0.1, 0] = histogram[histogram > 0.1]
    table[histogram > 0.01, 1] = histogram[histogram > 0.01]
    table[histogram > 0.3 * highest, 2] = histogram[histogram > 0.3 * highest]

    for i in range(1, len(histogram)):
        for j in range(3):
            if table[i, j] > 0.0 and table[i - 1, j] > 0.0:
                if table[i, j] > table[i - 1, j]:
                    table[i - 1, j] = 0.0
                else:
                    table[i, j] = 0.0
    return table
