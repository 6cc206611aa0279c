"""Intermediate representation of one window.

The builder scans a window's events once (``scan_events``) and derives
every structure that descriptors read: tick maps, note collection,
histograms, beat periodicity and contrapuntal motion. The result is a
frozen dataclass whose arrays are read-only, so descriptors cannot alter
what later descriptors see.
"""

import logging
from dataclasses import dataclass, fields
from typing import Optional, TYPE_CHECKING

import numpy as np

from symfeat.contracts import ResourceExhaustionError, assert_representation
from symfeat.extraction.representation.histograms import (
    melodic_interval_histogram,
    melodic_lines,
    pitch_histograms,
    rhythmic_value_histogram,
)
from symfeat.extraction.representation.motion import MotionFractions, classify_motion
from symfeat.extraction.representation.notes import NoteCollection, scan_events
from symfeat.extraction.representation.periodicity import beat_histogram, onset_signal, peak_table
from symfeat.extraction.representation.timing import (
    channel_activity_map,
    instrument_activity_maps,
    mean_ticks_per_second,
    volume_map,
)
from symfeat.recording.model import Recording, SideChannel

if TYPE_CHECKING:
    from symfeat.schemas import InternalConfig

__all__ = ['IntermediateRepresentation', 'RepresentationBuilder', 'build_representation']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntermediateRepresentation:
    """Derived, read-only facts about one window."""
    identifier: str
    resolution: int
    tick_length: int
    duration_seconds: float
    mean_ticks_per_second: float
    initial_tempo_bpm: float
    tempo_bpms: np.ndarray
    time_signatures: tuple

    # tick-indexed maps
    seconds_per_tick: np.ndarray
    volumes: np.ndarray
    channel_tick_map: np.ndarray
    pitched_tick_map: np.ndarray
    unpitched_tick_map: np.ndarray

    # notes
    notes: NoteCollection
    unmatched_onsets: int
    note_start_seconds: np.ndarray
    note_duration_seconds: np.ndarray
    note_loudness: np.ndarray
    pitched_instrument_notes: np.ndarray
    unpitched_instrument_notes: np.ndarray
    channel_note_counts: np.ndarray

    # histograms
    rhythmic_value_histogram: np.ndarray
    basic_pitch_histogram: np.ndarray
    pitch_class_histogram: np.ndarray
    fifths_pitch_histogram: np.ndarray
    melodic_intervals: tuple
    melodic_interval_histogram: np.ndarray

    # periodicity
    min_bpm: int
    beat_histogram: np.ndarray
    beat_histogram_tempo_standardized: np.ndarray
    beat_histogram_peaks: np.ndarray
    beat_histogram_tempo_standardized_peaks: np.ndarray

    motion: MotionFractions
    side_channel: Optional[SideChannel] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, np.ndarray):
                value.flags.writeable = False
            elif f.name == "melodic_intervals":
                for line in value:
                    line.flags.writeable = False

    @property
    def pitched_note_count(self) -> int:
        return int(self.notes.pitched.sum())

    @property
    def unpitched_note_count(self) -> int:
        return int(self.notes.is_percussion.sum())


class RepresentationBuilder:
    """Builds an ``IntermediateRepresentation`` per window.

    Stateless apart from its configuration, so one builder is shared by
    all recordings and threads.

    Example usage::

        builder = RepresentationBuilder(config)
        rep = builder.build(window_recording)
        rep.basic_pitch_histogram[60]
    """

    def __init__(self, config: "InternalConfig"):
        rep = config.representation
        self.min_bpm = rep.min_bpm
        self.max_bpm = rep.max_bpm
        self.reference_bpm = rep.reference_bpm
        self.motion_lookahead_beats = rep.motion_lookahead_beats
        self.percussion_channel = rep.percussion_channel

    def build(self, recording: Recording) -> IntermediateRepresentation:
        """Derive all structures for one window.

        Raises
        ------
        ResourceExhaustionError
            If the tick maps do not fit in memory.
        ContractViolation
            If a derived structure breaks its invariants.
        """
        try:
            rep = self._build(recording)
        except MemoryError as e:
            raise ResourceExhaustionError(
                f"Out of memory building representation of {recording.identifier} "
                f"({recording.tick_length} ticks)"
            ) from e
        assert_representation(rep)
        return rep

    def _build(self, recording: Recording) -> IntermediateRepresentation:
        scan = scan_events(recording, self.percussion_channel)
        notes = scan.notes
        tick_length = recording.tick_length
        resolution = recording.resolution

        spt = recording.seconds_per_tick()
        start_times = recording.tick_start_times()
        duration = recording.duration_seconds
        tps = mean_ticks_per_second(tick_length, duration, resolution)
        tempo_bpms = np.array([60.0 / (spt[0] * resolution)]
                              + [60e6 / tempo for tick, tempo in scan.tempos if tick > 0])

        volumes = volume_map(tick_length, scan.volume_changes)
        pitched_map, unpitched_map = instrument_activity_maps(tick_length, notes)

        pitched = notes.pitched
        basic, pitch_class, fifths = pitch_histograms(notes)
        lines = melodic_lines(notes)

        x = onset_signal(tick_length, notes, volumes)
        beats = beat_histogram(x, tps, self.min_bpm, self.max_bpm)
        standard_tps = resolution * self.reference_bpm / 60.0
        beats_standard = beat_histogram(x, standard_tps, self.min_bpm, self.max_bpm)

        lookahead = int(round(self.motion_lookahead_beats * resolution))

        rep = IntermediateRepresentation(
            identifier=recording.identifier,
            resolution=resolution,
            tick_length=tick_length,
            duration_seconds=duration,
            mean_ticks_per_second=tps,
            initial_tempo_bpm=float(tempo_bpms[0]),
            tempo_bpms=tempo_bpms,
            time_signatures=tuple(scan.time_signatures),
            seconds_per_tick=spt,
            volumes=volumes,
            channel_tick_map=channel_activity_map(tick_length, notes),
            pitched_tick_map=pitched_map,
            unpitched_tick_map=unpitched_map,
            notes=notes,
            unmatched_onsets=scan.unmatched_onsets,
            note_start_seconds=start_times[notes.start_tick].copy(),
            note_duration_seconds=start_times[notes.end_tick] - start_times[notes.start_tick],
            note_loudness=notes.velocity * volumes[notes.start_tick, notes.channel],
            pitched_instrument_notes=np.bincount(notes.program[pitched], minlength=128)[:128],
            unpitched_instrument_notes=np.bincount(notes.pitch[notes.is_percussion], minlength=128)[:128],
            channel_note_counts=np.bincount(notes.channel, minlength=16)[:16],
            rhythmic_value_histogram=rhythmic_value_histogram(notes, resolution),
            basic_pitch_histogram=basic,
            pitch_class_histogram=pitch_class,
            fifths_pitch_histogram=fifths,
            melodic_intervals=tuple(lines),
            melodic_interval_histogram=melodic_interval_histogram(lines),
            min_bpm=self.min_bpm,
            beat_histogram=beats,
            beat_histogram_tempo_standardized=beats_standard,
            beat_histogram_peaks=peak_table(beats),
            beat_histogram_tempo_standardized_peaks=peak_table(beats_standard),
            motion=classify_motion(notes, lookahead),
            side_channel=recording.side_channel,
        )
        logger.debug("Representation of %s: %d notes, %d ticks",
                     recording.identifier, len(notes), tick_length)
        return rep


def build_representation(recording: Recording, config: "InternalConfig") -> IntermediateRepresentation:
    """Build the representation of one window with a throwaway builder."""
    return RepresentationBuilder(config).build(recording)
