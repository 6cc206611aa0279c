"""Single scan over a window's events.

``scan_events`` walks the merged event stream once and collects everything
the derived structures need: resolved notes, controller-7 volume changes,
tempo and meter changes. Note-ons are paired with the nearest following
note-off (or zero-velocity note-on) of the same pitch on the same track and
channel. Onsets left open at the end of the window close at its last tick.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from symfeat.recording.model import Recording

__all__ = ['NoteCollection', 'EventScan', 'scan_events']

logger = logging.getLogger(__name__)

_CHANNEL_VOLUME = 7


def _readonly(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class NoteCollection:
    """Resolved notes of one window, one entry per onset, ordered by onset.

    All attributes are read-only numpy arrays of equal length.
    """
    start_tick: np.ndarray
    end_tick: np.ndarray
    pitch: np.ndarray
    velocity: np.ndarray
    channel: np.ndarray
    track: np.ndarray
    program: np.ndarray
    is_percussion: np.ndarray

    def __len__(self) -> int:
        return int(self.start_tick.shape[0])

    @property
    def duration_ticks(self) -> np.ndarray:
        return self.end_tick - self.start_tick

    @property
    def pitched(self) -> np.ndarray:
        """Boolean mask of notes outside the percussion channel."""
        return ~self.is_percussion

    @classmethod
    def from_rows(cls, rows: list) -> "NoteCollection":
        """Build from ``(start, end, pitch, velocity, channel, track, program, perc, seq)`` rows.

        ``seq`` is the onset's position in the event stream and breaks ties
        between simultaneous onsets.
        """
        rows = sorted(rows, key=lambda r: (r[0], r[5], r[4], r[8]))
        columns = list(zip(*rows)) if rows else [()] * 9
        ints = [np.asarray(col, dtype=np.int64) for col in columns[:7]]
        return cls(
            start_tick=_readonly(ints[0]),
            end_tick=_readonly(ints[1]),
            pitch=_readonly(ints[2]),
            velocity=_readonly(ints[3]),
            channel=_readonly(ints[4]),
            track=_readonly(ints[5]),
            program=_readonly(ints[6]),
            is_percussion=_readonly(np.asarray(columns[7], dtype=bool)),
        )


class EventScan(NamedTuple):
    """Raw facts gathered in the single pass over a window."""
    notes: NoteCollection
    volume_changes: list       # (tick, channel, fraction)
    time_signatures: list      # (numerator, denominator)
    tempos: list               # (tick, microseconds per quarter)
    unmatched_onsets: int


def scan_events(recording: Recording, percussion_channel: int = 9) -> EventScan:
    """Collect notes and controller/meta changes in one pass.

    Parameters
    ----------
    recording : Recording
        One window's sub-recording (ticks rebased to 0).
    percussion_channel : int
        Zero-based channel whose notes are unpitched.

    Returns
    -------
    EventScan
    """
    programs = [0] * 16
    onset_count = 0
    pending = {}
    rows = []
    volume_changes = []
    time_signatures = []
    tempos = []

    for track_index, event in recording.events():
        kind = event.type
        if kind == "note_on" and event.velocity:
            key = (track_index, event.channel, event.note)
            pending.setdefault(key, []).append(
                (event.tick, event.velocity, programs[event.channel], onset_count)
            )
            onset_count += 1
        elif kind == "note_off" or kind == "note_on":
            # Every still-open onset of this key has this event as its
            # nearest following offset.
            key = (track_index, event.channel, event.note)
            for start, velocity, program, seq in pending.pop(key, ()):
                rows.append((start, event.tick, event.note, velocity, event.channel,
                             track_index, program, event.channel == percussion_channel, seq))
        elif kind == "program_change":
            programs[event.channel] = event.program
        elif kind == "control_change" and event.control == _CHANNEL_VOLUME:
            volume_changes.append((event.tick, event.channel, event.value / 127.0))
        elif kind == "set_tempo":
            tempos.append((event.tick, event.tempo))
        elif kind == "time_signature":
            time_signatures.append((event.numerator, event.denominator))

    unmatched = 0
    last_tick = recording.tick_length
    for (track_index, channel, note), opened in pending.items():
        for start, velocity, program, seq in opened:
            unmatched += 1
            rows.append((start, last_tick, note, velocity, channel,
                         track_index, program, channel == percussion_channel, seq))

    if unmatched:
        logger.warning("%s: %d note-on(s) without a matching note-off, closed at tick %d",
                       recording.identifier, unmatched, last_tick)

    return EventScan(
        notes=NoteCollection.from_rows(rows),
        volume_changes=volume_changes,
        time_signatures=time_signatures,
        tempos=tempos,
        unmatched_onsets=unmatched,
    )
