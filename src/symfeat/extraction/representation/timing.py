"""Tick-indexed maps: tempo, channel volume and instrument activity."""

import numpy as np

from symfeat.extraction.representation.notes import NoteCollection

__all__ = [
    'mean_ticks_per_second',
    'volume_map',
    'channel_activity_map',
    'instrument_activity_maps',
]


def mean_ticks_per_second(tick_length: int, duration_seconds: float, resolution: int) -> float:
    """Average tick rate of a window.

    Empty windows fall back to the rate at 120 BPM.
    """
    if tick_length > 0 and duration_seconds > 0:
        return tick_length / duration_seconds
    return resolution * 2.0


def volume_map(tick_length: int, volume_changes: list) -> np.ndarray:
    """Per-tick, per-channel volume scaling in ``[0, 1]``.

    Every channel starts at 1.0; a controller-7 change holds from its tick
    onward.
    """
    volumes = np.ones((tick_length + 1, 16), dtype=float)
    for tick, channel, fraction in volume_changes:
        volumes[tick:, channel] = fraction
    return volumes


def channel_activity_map(tick_length: int, notes: NoteCollection) -> np.ndarray:
    """Boolean ``[tick, channel]`` map of channels with a sounding note."""
    active = np.zeros((tick_length + 1, 16), dtype=bool)
    for start, end, channel in zip(notes.start_tick, notes.end_tick, notes.channel):
        active[start:max(end, start + 1), channel] = True
    return active


def instrument_activity_maps(tick_length: int, notes: NoteCollection):
    """Boolean ``[tick, patch]`` and ``[tick, key]`` activity maps.

    Pitched notes are indexed by the General MIDI program active on their
    channel at onset. Percussion notes are indexed by key number.

    Returns
    -------
    tuple of np.ndarray
        ``(pitched_tick_map, unpitched_tick_map)``, each ``(tick_length + 1, 128)``.
    """
    pitched = np.zeros((tick_length + 1, 128), dtype=bool)
    unpitched = np.zeros((tick_length + 1, 128), dtype=bool)
    for start, end, pitch, program, perc in zip(notes.start_tick, notes.end_tick,
                                                 notes.pitch, notes.program,
                                                 notes.is_percussion):
        stop = max(end, start + 1)
        if perc:
            unpitched[start:stop, pitch] = True
        else:
            pitched[start:stop, program] = True
    return pitched, unpitched
