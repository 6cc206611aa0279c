"""Split a recording's timeline into (possibly overlapping) windows.

Window boundaries are chosen in seconds and converted to ticks through the
recording's tempo map. Each window gets its own sub-recording whose ticks
start at 0 and which re-states, at tick 0, the tempo, controller, program,
meter and key that were in force when the window began.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple

from symfeat.contracts import ConfigurationError, assert_windows
from symfeat.recording.model import Recording

__all__ = ['Window', 'WindowedRecording', 'split_windows', 'window_bounds', 'slice_recording']

logger = logging.getLogger(__name__)

WHOLE = "whole"
WINDOWED = "windowed"


@dataclass(frozen=True)
class Window:
    """Bounds of one window, in ticks of the full recording and in seconds."""
    index: int
    start_tick: int
    end_tick: int
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class WindowedRecording(NamedTuple):
    window: Window
    recording: Recording


def _check_parameters(mode: str, duration: float, overlap: float) -> None:
    if mode not in (WHOLE, WINDOWED):
        raise ConfigurationError(f"Unknown windowing mode '{mode}'")
    if not 0.0 <= overlap < 1.0:
        raise ConfigurationError(f"Window overlap must be in [0, 1), got {overlap}")
    if duration < 0:
        raise ConfigurationError(f"Window duration must be >= 0, got {duration}")
    if mode == WINDOWED and duration == 0:
        raise ConfigurationError("Window duration must be > 0 in windowed mode")
    if mode == WINDOWED and duration * overlap >= duration:
        raise ConfigurationError(
            f"Overlap offset {duration * overlap}s must be smaller than the window ({duration}s)"
        )


def window_bounds(recording: Recording, mode: str = WHOLE,
                  duration: float = 0.0, overlap: float = 0.0) -> List[Window]:
    """Window bounds for ``recording``.

    Parameters
    ----------
    recording : Recording
    mode : {"whole", "windowed"}
        ``"whole"`` yields one window covering the recording.
    duration : float
        Window length in seconds (windowed mode).
    overlap : float
        Fraction of each window shared with the next, in ``[0, 1)``.

    Raises
    ------
    ConfigurationError
        If the parameters are out of range.
    """
    _check_parameters(mode, duration, overlap)
    total = recording.duration_seconds

    if mode == WHOLE:
        return [Window(0, 0, recording.tick_length, 0.0, total)]

    step = duration * (1.0 - overlap)
    windows = []
    index = 0
    start = 0.0
    # Tolerate float error in the cumulative tick times.
    while start < total - 1e-9:
        end = min(start + duration, total)
        windows.append(Window(
            index=index,
            start_tick=recording.time_to_tick(start),
            end_tick=recording.time_to_tick(end),
            start_time=start,
            end_time=end,
        ))
        index += 1
        # Multiply rather than accumulate so starts do not drift.
        start = index * step

    if not windows:
        # Zero-length recording: one empty window keeps it in the output.
        windows.append(Window(0, 0, 0, 0.0, 0.0))
    return windows


def slice_recording(recording: Recording, window: Window) -> Recording:
    """Sub-recording of the events inside ``window``, rebased to tick 0.

    Events in ``[start_tick, end_tick]`` are kept, except note-ons at
    ``end_tick``, which belong to the next window. The last tempo,
    controller values, programs, time signature and key signature seen
    before ``start_tick`` are re-emitted at tick 0. Note-offs before the
    window are dropped with the note-ons they close.
    """
    start, end = window.start_tick, window.end_tick
    tracks = []
    for track in recording.tracks:
        state = {}
        kept = []
        for event in track:
            if event.tick < start:
                key = _state_key(event)
                if key is not None:
                    state[key] = event
                continue
            if event.tick > end:
                break
            if event.is_note_on and event.tick >= end:
                continue
            kept.append(event.moved_to(event.tick - start))
        carried = [event.moved_to(0) for event in state.values()]
        tracks.append(carried + kept)

    side_channel = None
    if recording.side_channel is not None:
        side_channel = recording.side_channel.between(start, end)

    return Recording.from_tracks(
        identifier=recording.identifier,
        resolution=recording.resolution,
        tracks=tracks,
        side_channel=side_channel,
        tick_length=end - start,
    )


def _state_key(event):
    """Identity of the piece of state an event sets, or None."""
    if event.type == "set_tempo":
        return ("tempo",)
    if event.type == "control_change":
        return ("control", event.channel, event.control)
    if event.type == "program_change":
        return ("program", event.channel)
    if event.type == "pitchwheel":
        return ("pitchwheel", event.channel)
    if event.type in ("time_signature", "key_signature"):
        return (event.type,)
    return None


def split_windows(recording: Recording, mode: str = WHOLE,
                  duration: float = 0.0, overlap: float = 0.0) -> List[WindowedRecording]:
    """Split ``recording`` into ordered ``(window, sub_recording)`` pairs.

    In whole mode the single window's recording is ``recording`` itself.

    Examples
    --------
    A 31 second recording with 10 second windows overlapping by 10%::

        >>> [w.window.start_time for w in split_windows(rec, "windowed", 10.0, 0.1)]
        [0.0, 9.0, 18.0, 27.0]
    """
    windows = window_bounds(recording, mode, duration, overlap)
    assert_windows(windows, recording.duration_seconds)

    if mode == WHOLE:
        return [WindowedRecording(windows[0], recording)]

    logger.debug("%s: %d windows of %.2fs (overlap %.2f)",
                 recording.identifier, len(windows), duration, overlap)
    return [WindowedRecording(window, slice_recording(recording, window))
            for window in windows]
