"""In-memory model of a symbolic recording.

A ``Recording`` is a read-only view of a multi-track event stream with
absolute tick positions, a tick resolution (ticks per quarter note) and an
optional ``SideChannel`` carrying notation facts that plain MIDI events
cannot express (grace notes, slurs). Tempo-aware tick to seconds
conversion lives here so the windower and the representation builder
agree on the timeline.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

__all__ = [
    'DEFAULT_TEMPO',
    'MidiEvent',
    'SideChannel',
    'Recording',
]

# Microseconds per quarter note until the first set_tempo event (120 BPM).
DEFAULT_TEMPO = 500000


@dataclass(frozen=True)
class MidiEvent:
    """One timed event. ``type`` uses mido's message type names."""
    tick: int
    type: str
    channel: Optional[int] = None
    note: Optional[int] = None
    velocity: Optional[int] = None
    control: Optional[int] = None
    value: Optional[int] = None
    program: Optional[int] = None
    tempo: Optional[int] = None
    numerator: Optional[int] = None
    denominator: Optional[int] = None
    key: Optional[str] = None

    @property
    def is_note_on(self) -> bool:
        return self.type == "note_on" and (self.velocity or 0) > 0

    @property
    def is_note_off(self) -> bool:
        return self.type == "note_off" or (self.type == "note_on" and not self.velocity)

    def moved_to(self, tick: int) -> "MidiEvent":
        """Return a copy of this event placed at ``tick``."""
        return MidiEvent(
            tick=tick, type=self.type, channel=self.channel, note=self.note,
            velocity=self.velocity, control=self.control, value=self.value,
            program=self.program, tempo=self.tempo, numerator=self.numerator,
            denominator=self.denominator, key=self.key,
        )


@dataclass(frozen=True)
class SideChannel:
    """Notation facts recovered from richer formats (MusicXML).

    Tick positions are absolute, in the same resolution as the events.
    """
    grace_note_ticks: tuple[int, ...] = ()
    slur_note_ticks: tuple[int, ...] = ()

    def between(self, start_tick: int, end_tick: int) -> "SideChannel":
        """Ticks in ``[start_tick, end_tick)``, rebased to ``start_tick``."""
        return SideChannel(
            grace_note_ticks=tuple(t - start_tick for t in self.grace_note_ticks
                                   if start_tick <= t < end_tick),
            slur_note_ticks=tuple(t - start_tick for t in self.slur_note_ticks
                                  if start_tick <= t < end_tick),
        )


@dataclass(frozen=True)
class Recording:
    """A decoded recording.

    Attributes
    ----------
    identifier : str
        Path or name used in logs and sink output.
    resolution : int
        Ticks per quarter note.
    tracks : tuple of tuple of MidiEvent
        Events per track, sorted by tick.
    tick_length : int
        Tick of the last event (the timeline spans ticks ``0..tick_length``).
    side_channel : SideChannel, optional
        Present only for formats that carry notation facts.
    """
    identifier: str
    resolution: int
    tracks: tuple
    tick_length: int
    side_channel: Optional[SideChannel] = None
    _timing: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_tracks(cls, identifier: str, resolution: int,
                    tracks: Sequence[Sequence[MidiEvent]],
                    side_channel: Optional[SideChannel] = None,
                    tick_length: Optional[int] = None) -> "Recording":
        """Build a recording, sorting events and deriving ``tick_length``."""
        sorted_tracks = tuple(
            tuple(sorted(track, key=lambda e: e.tick)) for track in tracks
        )
        if tick_length is None:
            tick_length = max(
                (track[-1].tick for track in sorted_tracks if track), default=0
            )
        return cls(identifier=identifier, resolution=int(resolution),
                   tracks=sorted_tracks, tick_length=int(tick_length),
                   side_channel=side_channel)

    def events(self) -> list:
        """All events merged across tracks as ``(track_index, event)`` pairs.

        Stable on tick, so same-tick events keep track order.
        """
        merged = [
            (track_index, event)
            for track_index, track in enumerate(self.tracks)
            for event in track
        ]
        merged.sort(key=lambda pair: pair[1].tick)
        return merged

    def tempo_changes(self) -> list:
        """``(tick, microseconds_per_quarter)`` pairs in tick order."""
        return [
            (event.tick, event.tempo)
            for _, event in self.events()
            if event.type == "set_tempo" and event.tempo
        ]

    def seconds_per_tick(self) -> np.ndarray:
        """Duration in seconds of every tick ``0..tick_length``.

        Starts at the default tempo and is overridden from each tempo
        change onward. The array is cached and read-only.
        """
        if "seconds_per_tick" not in self._timing:
            spt = np.full(self.tick_length + 1,
                          DEFAULT_TEMPO / 1e6 / self.resolution, dtype=float)
            for tick, tempo in self.tempo_changes():
                if tick <= self.tick_length:
                    spt[tick:] = tempo / 1e6 / self.resolution
            spt.flags.writeable = False
            self._timing["seconds_per_tick"] = spt
        return self._timing["seconds_per_tick"]

    def tick_start_times(self) -> np.ndarray:
        """Start time in seconds of every tick ``0..tick_length``."""
        if "start_times" not in self._timing:
            spt = self.seconds_per_tick()
            starts = np.concatenate(([0.0], np.cumsum(spt)[:-1]))
            starts.flags.writeable = False
            self._timing["start_times"] = starts
        return self._timing["start_times"]

    @property
    def duration_seconds(self) -> float:
        """Start time of the last tick."""
        return float(self.tick_start_times()[-1])

    @property
    def microsecond_length(self) -> int:
        return int(round(self.duration_seconds * 1e6))

    def time_to_tick(self, seconds: float) -> int:
        """First tick whose start time is at or after ``seconds``."""
        starts = self.tick_start_times()
        # Tolerate float error from the cumulative sum.
        tick = int(np.searchsorted(starts, seconds - 1e-9, side="left"))
        return min(tick, self.tick_length)
