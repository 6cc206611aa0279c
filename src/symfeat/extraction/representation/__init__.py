"""Per-window intermediate representation.

Modules
-------
notes : single event scan and note pairing
timing : tick-indexed volume and activity maps
histograms : pitch, melodic-interval and rhythmic-value histograms
periodicity : autocorrelation beat histograms
motion : contrapuntal motion classification
builder : RepresentationBuilder and IntermediateRepresentation
"""

from symfeat.extraction.representation.builder import (
    IntermediateRepresentation,
    RepresentationBuilder,
    build_representation,
)
from symfeat.extraction.representation.motion import MotionFractions
from symfeat.extraction.representation.notes import NoteCollection

__all__ = [
    'IntermediateRepresentation',
    'RepresentationBuilder',
    'build_representation',
    'MotionFractions',
    'NoteCollection',
]
