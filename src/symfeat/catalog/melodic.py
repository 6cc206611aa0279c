"""Melodic interval descriptors.

All of these read the melodic interval histogram, or the signed interval
lines it was built from.
"""

import numpy as np

from symfeat.catalog.definition import DescriptorDefinition

__all__ = ['DESCRIPTORS']


def _signed_intervals(rep) -> np.ndarray:
    if not rep.melodic_intervals:
        return np.zeros(0)
    return np.concatenate(rep.melodic_intervals).astype(float)


def _bins(*indices):
    def compute(rep, _):
        return [rep.melodic_interval_histogram[list(indices)].sum()]
    return compute


def melodic_interval_histogram(rep, _):
    return rep.melodic_interval_histogram


def mean_melodic_interval(rep, _):
    intervals = np.abs(_signed_intervals(rep))
    return [intervals.mean() if len(intervals) else 0.0]


def most_common_melodic_interval(rep, _):
    return [int(np.argmax(rep.melodic_interval_histogram))]


def prevalence_of_most_common_melodic_interval(rep, _):
    return [rep.melodic_interval_histogram.max()]


def number_of_common_melodic_intervals(rep, _):
    return [np.count_nonzero(rep.melodic_interval_histogram >= 0.09)]


def direction_of_melodic_motion(rep, _):
    """Fraction of non-repeated melodic intervals that rise."""
    intervals = _signed_intervals(rep)
    moving = intervals[intervals != 0]
    if not len(moving):
        return [0.0]
    return [np.count_nonzero(moving > 0) / len(moving)]


def melodic_large_intervals(rep, _):
    return [rep.melodic_interval_histogram[13:].sum()]


DESCRIPTORS = [
    DescriptorDefinition(
        "Melodic Interval Histogram", "M-1",
        "Fraction of melodic intervals of each size in semitones (0-127).",
        128, melodic_interval_histogram),
    DescriptorDefinition(
        "Mean Melodic Interval", "M-2",
        "Mean absolute melodic interval in semitones.",
        1, mean_melodic_interval),
    DescriptorDefinition(
        "Most Common Melodic Interval", "M-3",
        "Size in semitones of the most frequent melodic interval.",
        1, most_common_melodic_interval),
    DescriptorDefinition(
        "Prevalence of Most Common Melodic Interval", "M-4",
        "Fraction of melodic intervals that have the most common size.",
        1, prevalence_of_most_common_melodic_interval),
    DescriptorDefinition(
        "Number of Common Melodic Intervals", "M-6",
        "Number of interval sizes accounting individually for at least 9% of intervals.",
        1, number_of_common_melodic_intervals),
    DescriptorDefinition(
        "Repeated Notes", "M-10",
        "Fraction of melodic intervals that are unisons.",
        1, _bins(0)),
    DescriptorDefinition(
        "Chromatic Motion", "M-11",
        "Fraction of melodic intervals that are one semitone.",
        1, _bins(1)),
    DescriptorDefinition(
        "Stepwise Motion", "M-12",
        "Fraction of melodic intervals that are one or two semitones.",
        1, _bins(1, 2)),
    DescriptorDefinition(
        "Melodic Thirds", "M-13",
        "Fraction of melodic intervals that are major or minor thirds.",
        1, _bins(3, 4)),
    DescriptorDefinition(
        "Melodic Perfect Fifths", "M-15",
        "Fraction of melodic intervals that are perfect fifths.",
        1, _bins(7)),
    DescriptorDefinition(
        "Melodic Tritones", "M-16",
        "Fraction of melodic intervals that are tritones.",
        1, _bins(6)),
    DescriptorDefinition(
        "Melodic Octaves", "M-17",
        "Fraction of melodic intervals that are octaves.",
        1, _bins(12)),
    DescriptorDefinition(
        "Melodic Large Intervals", "M-18",
        "Fraction of melodic intervals larger than an octave.",
        1, melodic_large_intervals),
    DescriptorDefinition(
        "Direction of Melodic Motion", "M-19",
        "Fraction of non-unison melodic intervals that rise in pitch.",
        1, direction_of_melodic_motion),
]
