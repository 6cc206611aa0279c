"""Descriptors that need notation facts absent from MIDI.

They read the recording's side channel and are skipped for recordings
that have none.
"""

from symfeat.catalog.definition import DescriptorDefinition, Variant

__all__ = ['DESCRIPTORS']


def number_of_grace_notes(rep, _):
    return [len(rep.side_channel.grace_note_ticks)]


def number_of_slur_notes(rep, _):
    return [len(rep.side_channel.slur_note_ticks)]


DESCRIPTORS = [
    DescriptorDefinition(
        "Number of Grace Notes", "S-1",
        "Number of grace notes (appoggiaturas and acciaccaturas).",
        1, number_of_grace_notes, variant=Variant.FORMAT_SPECIFIC),
    DescriptorDefinition(
        "Number of Slur Notes", "S-2",
        "Number of notes covered by a slur.",
        1, number_of_slur_notes, variant=Variant.FORMAT_SPECIFIC),
]
