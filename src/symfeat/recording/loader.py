"""Recording loader for MIDI and MusicXML files.

MIDI files are decoded with mido. MusicXML files are parsed with music21,
rendered to MIDI in memory (so both formats share one event model) and
scanned for notation facts (grace notes, slurs) that end up in the
recording's side channel.
"""

import io
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import mido
from music21 import converter, exceptions21, sites, spanner, stream
from music21 import midi as m21midi

from symfeat.contracts.failure import InputParseError
from symfeat.recording.model import MidiEvent, Recording, SideChannel

__all__ = ['RecordingLoader', 'find_recordings', 'MIDI_SUFFIXES', 'MUSICXML_SUFFIXES']

logger = logging.getLogger(__name__)

MIDI_SUFFIXES = (".mid", ".midi", ".kar")
MUSICXML_SUFFIXES = (".xml", ".musicxml", ".mxl")

_KEPT_TYPES = {
    "note_on", "note_off", "control_change", "program_change", "pitchwheel",
    "set_tempo", "time_signature", "key_signature", "end_of_track",
}


def _event_from_message(tick: int, msg) -> Optional[MidiEvent]:
    """Convert one mido message into a MidiEvent (None for ignored types)."""
    if msg.type not in _KEPT_TYPES:
        return None
    if msg.type in ("note_on", "note_off"):
        return MidiEvent(tick, msg.type, channel=msg.channel,
                         note=msg.note, velocity=msg.velocity)
    if msg.type == "control_change":
        return MidiEvent(tick, msg.type, channel=msg.channel,
                         control=msg.control, value=msg.value)
    if msg.type == "program_change":
        return MidiEvent(tick, msg.type, channel=msg.channel, program=msg.program)
    if msg.type == "pitchwheel":
        return MidiEvent(tick, msg.type, channel=msg.channel, value=msg.pitch)
    if msg.type == "set_tempo":
        return MidiEvent(tick, msg.type, tempo=msg.tempo)
    if msg.type == "time_signature":
        return MidiEvent(tick, msg.type, numerator=msg.numerator,
                         denominator=msg.denominator)
    if msg.type == "key_signature":
        return MidiEvent(tick, msg.type, key=msg.key)
    return MidiEvent(tick, msg.type)


def find_recordings(paths: Iterable[Union[str, Path]],
                    input_kind: str = "any") -> List[Path]:
    """Expand files and directories into a sorted list of music files.

    Parameters
    ----------
    paths : iterable of str or Path
        Files and/or directories. Directories are searched recursively.
    input_kind : {"any", "midi", "musicxml"}
        Restricts which suffixes are accepted.
    """
    if input_kind == "midi":
        suffixes = MIDI_SUFFIXES
    elif input_kind == "musicxml":
        suffixes = MUSICXML_SUFFIXES
    else:
        suffixes = MIDI_SUFFIXES + MUSICXML_SUFFIXES

    found = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            found.extend(p for p in sorted(path.rglob("*"))
                         if p.is_file() and p.suffix.lower() in suffixes)
        elif path.suffix.lower() in suffixes:
            found.append(path)
        else:
            logger.warning("Ignoring non-music input: %s", path)
    return found


class RecordingLoader:
    """Decode files into ``Recording`` objects.

    Example usage::

        loader = RecordingLoader()
        recording = loader.load("bach/bwv772.mid")
    """

    def load(self, path: Union[str, Path]) -> Recording:
        """Load a MIDI or MusicXML file.

        Raises
        ------
        InputParseError
            If the file is missing, has an unsupported suffix or cannot be decoded.
        """
        path = Path(path)
        if not path.is_file():
            raise InputParseError(path, "file not found")

        suffix = path.suffix.lower()
        if suffix in MIDI_SUFFIXES:
            return self.load_midi(path)
        if suffix in MUSICXML_SUFFIXES:
            return self.load_musicxml(path)
        raise InputParseError(path, f"unsupported file type '{suffix}'")

    def load_midi(self, path: Union[str, Path], data: Optional[bytes] = None,
                  side_channel: Optional[SideChannel] = None) -> Recording:
        """Decode a Standard MIDI File from disk or from ``data``."""
        try:
            if data is not None:
                midi_file = mido.MidiFile(file=io.BytesIO(data))
            else:
                midi_file = mido.MidiFile(str(path))
        except (OSError, EOFError, ValueError, KeyError, IndexError) as e:
            raise InputParseError(path, f"invalid MIDI data: {e}") from e

        resolution = midi_file.ticks_per_beat
        if not resolution or resolution & 0x8000:
            raise InputParseError(path, "SMPTE timing is not supported")

        tracks = []
        for track in midi_file.tracks:
            tick = 0
            events = []
            for msg in track:
                tick += msg.time
                event = _event_from_message(tick, msg)
                if event is not None:
                    events.append(event)
            tracks.append(events)

        recording = Recording.from_tracks(str(path), resolution, tracks,
                                          side_channel=side_channel)
        logger.debug("Loaded %s: %d tracks, %d ticks at %d PPQ",
                     Path(path).name, len(tracks), recording.tick_length, resolution)
        return recording

    def load_musicxml(self, path: Union[str, Path]) -> Recording:
        """Parse MusicXML with music21 and attach grace/slur side data."""
        try:
            score = converter.parse(str(path))
        except (exceptions21.Music21Exception, OSError, ValueError) as e:
            raise InputParseError(path, f"invalid MusicXML: {e}") from e

        if not isinstance(score, stream.Score):
            wrapper = stream.Score()
            wrapper.append(score)
            score = wrapper

        try:
            midi_file = m21midi.translate.music21ObjectToMidiFile(score)
            data = midi_file.writestr()
        except (exceptions21.Music21Exception, ValueError) as e:
            raise InputParseError(path, f"cannot render MusicXML to MIDI: {e}") from e

        resolution = midi_file.ticksPerQuarterNote
        side_channel = self._side_channel(score, resolution)
        return self.load_midi(path, data=data, side_channel=side_channel)

    def _side_channel(self, score, resolution: int) -> SideChannel:
        """Collect grace-note and slur-note onset ticks from a score."""
        flat = score.flatten()

        grace_ticks = []
        for n in flat.notes:
            if n.duration.isGrace:
                grace_ticks.append(int(round(float(flat.elementOffset(n)) * resolution)))

        slur_ticks = []
        for slur in flat.getElementsByClass(spanner.Slur):
            for n in slur.getSpannedElements():
                try:
                    offset = n.getOffsetInHierarchy(score)
                except sites.SitesException:
                    logger.debug("Slurred element without a position in the score, skipped")
                    continue
                slur_ticks.append(int(round(float(offset) * resolution)))

        return SideChannel(grace_note_ticks=tuple(sorted(grace_ticks)),
                           slur_note_ticks=tuple(sorted(slur_ticks)))
