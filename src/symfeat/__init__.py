"""symfeat: windowed descriptor extraction from symbolic music.

Reads MIDI and MusicXML recordings, slices them into (optionally
overlapping) time windows, builds a shared intermediate representation
per window and evaluates a dependency-ordered catalog of numeric
descriptors, optionally aggregating windowed values into whole-recording
summaries.

Authors: symfeat developers
"""

__version__ = "0.1.0"
