"""Tests for the in-memory recording model."""

import pytest

pytestmark = pytest.mark.unit

from symfeat.recording import MidiEvent, Recording, SideChannel
from tests.helpers.fake_recording import make_recording


class TestTiming:
    """Tempo-aware tick to seconds conversion."""

    def test_default_tempo(self):
        recording = make_recording([(0, 960, 60)])

        assert recording.tick_length == 960
        assert recording.duration_seconds == pytest.approx(1.0)
        assert recording.seconds_per_tick()[0] == pytest.approx(1 / 960)

    def test_tempo_change_midway(self):
        tempo = [MidiEvent(480, "set_tempo", tempo=1000000)]
        recording = make_recording([(0, 960, 60)], extra_events=tempo)

        # 480 ticks at 120 BPM then 480 ticks at 60 BPM
        assert recording.duration_seconds == pytest.approx(0.5 + 1.0)
        assert recording.tick_start_times()[480] == pytest.approx(0.5)

    def test_time_to_tick(self):
        recording = make_recording([(0, 960, 60)])

        assert recording.time_to_tick(0.0) == 0
        assert recording.time_to_tick(0.5) == 480
        assert recording.time_to_tick(99.0) == 960

    def test_timing_arrays_are_read_only(self):
        recording = make_recording([(0, 960, 60)])

        with pytest.raises(ValueError):
            recording.seconds_per_tick()[0] = 1.0


class TestEvents:
    """Track storage and merging."""

    def test_tracks_are_sorted(self):
        events = [MidiEvent(100, "note_off", channel=0, note=60, velocity=0),
                  MidiEvent(0, "note_on", channel=0, note=60, velocity=90)]
        recording = Recording.from_tracks("r", 480, [events])

        assert [e.tick for e in recording.tracks[0]] == [0, 100]

    def test_merge_is_stable_on_tick(self):
        first = [MidiEvent(0, "program_change", channel=0, program=5)]
        second = [MidiEvent(0, "note_on", channel=0, note=60, velocity=90)]
        recording = Recording.from_tracks("r", 480, [first, second])

        assert [(track, e.type) for track, e in recording.events()] == [
            (0, "program_change"), (1, "note_on")]

    def test_note_on_off_properties(self):
        assert MidiEvent(0, "note_on", note=60, velocity=1).is_note_on
        assert MidiEvent(0, "note_on", note=60, velocity=0).is_note_off
        assert MidiEvent(0, "note_off", note=60, velocity=64).is_note_off

    def test_moved_to_keeps_fields(self):
        event = MidiEvent(300, "control_change", channel=2, control=7, value=90)
        moved = event.moved_to(0)

        assert moved.tick == 0
        assert (moved.channel, moved.control, moved.value) == (2, 7, 90)

    def test_empty_recording(self):
        recording = Recording.from_tracks("empty", 480, [[]])

        assert recording.tick_length == 0
        assert recording.duration_seconds == 0.0


def test_side_channel_between_rebases():
    side_channel = SideChannel(grace_note_ticks=(100, 500, 900), slur_note_ticks=(480, 960))

    window = side_channel.between(480, 960)

    assert window.grace_note_ticks == (20, 420)
    assert window.slur_note_ticks == (0,)
