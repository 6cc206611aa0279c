"""Recording model and file loaders."""

from symfeat.recording.model import DEFAULT_TEMPO, MidiEvent, Recording, SideChannel
from symfeat.recording.loader import RecordingLoader, find_recordings

__all__ = [
    'DEFAULT_TEMPO',
    'MidiEvent',
    'Recording',
    'SideChannel',
    'RecordingLoader',
    'find_recordings',
]
