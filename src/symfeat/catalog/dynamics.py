"""Dynamics descriptors.

Loudness of a note is its velocity scaled by the channel volume at onset.
"""

import numpy as np

from symfeat.catalog.definition import DescriptorDefinition

__all__ = ['DESCRIPTORS']


def dynamic_range(rep, _):
    loudness = rep.note_loudness
    if not len(loudness):
        return [0.0]
    return [loudness.max() - loudness.min()]


def variation_of_dynamics(rep, _):
    loudness = rep.note_loudness
    return [loudness.std() if len(loudness) else 0.0]


def average_note_to_note_change_in_dynamics(rep, _):
    """Mean absolute loudness change between successive notes of a channel."""
    notes = rep.notes
    changes = []
    for channel in np.unique(notes.channel):
        loudness = rep.note_loudness[notes.channel == channel]
        changes.extend(np.abs(np.diff(loudness)))
    return [float(np.mean(changes)) if changes else 0.0]


DESCRIPTORS = [
    DescriptorDefinition(
        "Dynamic Range", "D-1",
        "Loudness of the loudest note minus loudness of the softest note.",
        1, dynamic_range),
    DescriptorDefinition(
        "Variation of Dynamics", "D-2",
        "Standard deviation of note loudness.",
        1, variation_of_dynamics),
    DescriptorDefinition(
        "Average Note to Note Change in Dynamics", "D-4",
        "Mean absolute loudness change between consecutive notes on a channel.",
        1, average_note_to_note_change_in_dynamics),
]
