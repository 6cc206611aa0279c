"""Tests for the per-window intermediate representation."""

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from symfeat.extraction.representation import RepresentationBuilder, build_representation
from symfeat.extraction.representation.histograms import (
    RHYTHMIC_VALUES,
    melodic_interval_histogram,
    melodic_lines,
    normalize,
    rhythmic_value_histogram,
)
from symfeat.extraction.representation.notes import scan_events
from symfeat.recording.model import MidiEvent
from tests.helpers.fake_recording import make_ensemble_recording, make_recording


@pytest.fixture
def builder(internal_config):
    return RepresentationBuilder(internal_config)


class TestTwoNoteRecording:
    """Pitches 60 then 64, one quarter note each."""

    @pytest.fixture
    def rep(self, builder):
        return builder.build(make_recording([(0, 480, 60), (480, 960, 64)]))

    def test_basic_pitch_histogram(self, rep):
        assert rep.basic_pitch_histogram[60] == pytest.approx(0.5)
        assert rep.basic_pitch_histogram[64] == pytest.approx(0.5)
        assert rep.basic_pitch_histogram.sum() == pytest.approx(1.0)

    def test_pitch_class_and_fifths(self, rep):
        assert rep.pitch_class_histogram[0] == pytest.approx(0.5)
        assert rep.pitch_class_histogram[4] == pytest.approx(0.5)
        # E (4) is four fifths above C: bin (7 * 4) % 12 = 4
        assert rep.fifths_pitch_histogram[0] == pytest.approx(0.5)
        assert rep.fifths_pitch_histogram[4] == pytest.approx(0.5)

    def test_single_melodic_interval(self, rep):
        assert rep.melodic_interval_histogram[4] == pytest.approx(1.0)
        assert rep.melodic_interval_histogram.sum() == pytest.approx(1.0)

    def test_quarter_notes(self, rep):
        index = int(np.flatnonzero(RHYTHMIC_VALUES == 1.0)[0])
        assert rep.rhythmic_value_histogram[index] == pytest.approx(1.0)

    def test_timing(self, rep):
        assert rep.duration_seconds == pytest.approx(1.0)
        assert rep.initial_tempo_bpm == pytest.approx(120.0)
        assert rep.note_duration_seconds == pytest.approx([0.5, 0.5])
        assert rep.note_start_seconds == pytest.approx([0.0, 0.5])

    def test_arrays_are_read_only(self, rep):
        with pytest.raises(ValueError):
            rep.basic_pitch_histogram[0] = 1.0
        with pytest.raises(ValueError):
            rep.volumes[0, 0] = 0.0
        with pytest.raises(ValueError):
            rep.notes.pitch[0] = 1


class TestNotePairing:
    """Onsets pair with the nearest following offset of the same key."""

    def test_zero_velocity_note_on_closes_note(self):
        events = [
            MidiEvent(0, "note_on", channel=0, note=60, velocity=90),
            MidiEvent(240, "note_on", channel=0, note=60, velocity=0),
        ]
        scan = scan_events(make_recording(extra_events=events))

        assert scan.notes.end_tick.tolist() == [240]
        assert scan.unmatched_onsets == 0

    def test_overlapping_same_pitch_onsets_close_at_first_offset(self):
        events = [
            MidiEvent(0, "note_on", channel=0, note=60, velocity=90),
            MidiEvent(100, "note_on", channel=0, note=60, velocity=90),
            MidiEvent(300, "note_off", channel=0, note=60, velocity=0),
            MidiEvent(400, "note_off", channel=0, note=60, velocity=0),
        ]
        scan = scan_events(make_recording(extra_events=events))

        assert scan.notes.start_tick.tolist() == [0, 100]
        assert scan.notes.end_tick.tolist() == [300, 300]

    def test_unmatched_onset_closes_at_last_tick(self, caplog):
        events = [MidiEvent(0, "note_on", channel=0, note=60, velocity=90)]
        recording = make_recording([(0, 960, 64)], extra_events=events)

        with caplog.at_level("WARNING"):
            scan = scan_events(recording)

        assert scan.unmatched_onsets == 1
        unmatched = scan.notes.pitch.tolist().index(60)
        assert scan.notes.end_tick[unmatched] == 960
        assert "without a matching note-off" in caplog.text

    def test_offset_on_other_channel_does_not_close(self):
        events = [
            MidiEvent(0, "note_on", channel=0, note=60, velocity=90),
            MidiEvent(100, "note_off", channel=1, note=60, velocity=0),
            MidiEvent(200, "note_off", channel=0, note=60, velocity=0),
        ]
        scan = scan_events(make_recording(extra_events=events))

        assert scan.notes.end_tick.tolist() == [200]

    def test_program_and_percussion(self):
        scan = scan_events(make_ensemble_recording())
        notes = scan.notes

        assert set(notes.program[notes.channel == 1].tolist()) == {40}
        assert notes.is_percussion[notes.channel == 9].all()
        assert not notes.is_percussion[notes.channel != 9].any()


class TestEnsembleRepresentation:
    """Melody, bass and drums."""

    @pytest.fixture
    def rep(self, builder):
        return builder.build(make_ensemble_recording())

    def test_percussion_excluded_from_pitch_histograms(self, rep):
        assert rep.basic_pitch_histogram[36] == 0.0
        assert rep.basic_pitch_histogram[38] == 0.0
        assert rep.basic_pitch_histogram.sum() == pytest.approx(1.0)

    def test_instrument_counts(self, rep):
        assert rep.pitched_instrument_notes[0] == 8
        assert rep.pitched_instrument_notes[40] == 4
        assert rep.unpitched_instrument_notes[36] == 4
        assert rep.unpitched_instrument_notes[38] == 4
        assert rep.pitched_note_count == 12
        assert rep.unpitched_note_count == 8

    def test_melodic_lines_per_channel(self, rep):
        lines = [line.tolist() for line in rep.melodic_intervals]
        assert [2, 2, 1, 2, -2, -1, -2] in lines
        assert [-5, 2, -4] in lines

    def test_tick_maps(self, rep):
        assert rep.channel_tick_map.shape == (rep.tick_length + 1, 16)
        assert rep.channel_tick_map[0, 0] and rep.channel_tick_map[0, 1]
        assert rep.pitched_tick_map[100, 40]
        assert rep.unpitched_tick_map[0, 36]

    def test_histograms_normalized(self, rep):
        for histogram in (rep.rhythmic_value_histogram, rep.melodic_interval_histogram,
                          rep.beat_histogram, rep.beat_histogram_tempo_standardized):
            assert histogram.sum() == pytest.approx(1.0)


def test_channel_volume_scales_loudness(builder):
    events = [MidiEvent(0, "control_change", channel=0, control=7, value=127 // 2)]
    rep = builder.build(make_recording([(0, 480, 60, 100)], extra_events=events))

    assert rep.volumes[0, 0] == pytest.approx(63 / 127)
    assert rep.volumes[0, 1] == 1.0
    assert rep.note_loudness[0] == pytest.approx(100 * 63 / 127)


def test_empty_window_gives_zero_histograms(builder):
    rep = builder.build(make_recording([], tick_length=960))

    assert len(rep.notes) == 0
    assert not rep.basic_pitch_histogram.any()
    assert not rep.beat_histogram.any()
    assert rep.motion.transitions == 0


def test_normalize_keeps_zeros():
    assert normalize(np.zeros(4)).tolist() == [0.0, 0.0, 0.0, 0.0]
    assert normalize([1, 3]).tolist() == [0.25, 0.75]


def test_simultaneous_onsets_collapse_in_melodic_line():
    recording = make_recording([(0, 480, 60), (0, 480, 72), (480, 960, 62)])
    lines = melodic_lines(scan_events(recording).notes)

    assert [line.tolist() for line in lines] == [[2]]
    assert melodic_interval_histogram(lines)[2] == 1.0


def test_rhythmic_value_quantization():
    recording = make_recording([(0, 250, 60), (480, 1200, 62), (1200, 1320, 64)])
    histogram = rhythmic_value_histogram(scan_events(recording).notes, 480)

    # 250 ticks ~ 0.52 quarters -> eighth; 720 -> dotted quarter; 120 -> sixteenth
    assert histogram[2] == pytest.approx(1 / 3)
    assert histogram[5] == pytest.approx(1 / 3)
    assert histogram[1] == pytest.approx(1 / 3)


def test_build_representation_function(internal_config):
    rep = build_representation(make_recording([(0, 480, 67)]), internal_config)

    assert rep.basic_pitch_histogram[67] == 1.0
    assert rep.identifier == "fake.mid"
