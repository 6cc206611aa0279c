"""Texture descriptors: contrapuntal motion and independent voices.

A voice here is a non-percussion MIDI channel with a sounding note.
"""

import numpy as np

from symfeat.catalog.definition import DescriptorDefinition

__all__ = ['DESCRIPTORS']


def _voice_counts(rep) -> np.ndarray:
    """Number of sounding pitched channels at every tick with any sound."""
    pitched_channels = np.ones(16, dtype=bool)
    percussion = np.unique(rep.notes.channel[rep.notes.is_percussion])
    pitched_channels[percussion] = False
    counts = rep.channel_tick_map[:, pitched_channels].sum(axis=1)
    return counts[counts > 0]


def _motion(attribute: str):
    def compute(rep, _):
        return [getattr(rep.motion, attribute)]
    return compute


def average_number_of_independent_voices(rep, _):
    counts = _voice_counts(rep)
    return [counts.mean() if len(counts) else 0.0]


def maximum_number_of_independent_voices(rep, _):
    counts = _voice_counts(rep)
    return [counts.max() if len(counts) else 0]


def variability_of_number_of_independent_voices(rep, _):
    counts = _voice_counts(rep)
    return [counts.std() if len(counts) else 0.0]


DESCRIPTORS = [
    DescriptorDefinition(
        "Parallel Motion", "T-1",
        "Fraction of voice-pair movements in the same direction by the same interval.",
        1, _motion("parallel")),
    DescriptorDefinition(
        "Similar Motion", "T-2",
        "Fraction of voice-pair movements in the same direction by different intervals.",
        1, _motion("similar")),
    DescriptorDefinition(
        "Contrary Motion", "T-3",
        "Fraction of voice-pair movements in opposite directions.",
        1, _motion("contrary")),
    DescriptorDefinition(
        "Oblique Motion", "T-4",
        "Fraction of voice-pair movements where only one voice moves.",
        1, _motion("oblique")),
    DescriptorDefinition(
        "Average Number of Independent Voices", "T-5",
        "Mean number of sounding pitched channels, ignoring silence.",
        1, average_number_of_independent_voices),
    DescriptorDefinition(
        "Maximum Number of Independent Voices", "T-6",
        "Largest number of simultaneously sounding pitched channels.",
        1, maximum_number_of_independent_voices),
    DescriptorDefinition(
        "Variability of Number of Independent Voices", "T-7",
        "Standard deviation of the number of sounding pitched channels.",
        1, variability_of_number_of_independent_voices),
]
