"""Pitch statistics descriptors."""

import numpy as np
from scipy import stats

from symfeat.catalog.definition import DescriptorDefinition

__all__ = ['DESCRIPTORS']


def _pitches(rep) -> np.ndarray:
    return rep.notes.pitch[rep.notes.pitched].astype(float)


def _top_two(histogram: np.ndarray):
    """Indices of the highest and second highest bins (ties go low)."""
    order = np.argsort(-histogram, kind="stable")
    return int(order[0]), int(order[1])


def basic_pitch_histogram(rep, _):
    return rep.basic_pitch_histogram


def pitch_class_histogram(rep, _):
    return rep.pitch_class_histogram


def folded_fifths_histogram(rep, _):
    return rep.fifths_pitch_histogram


def number_of_pitches(rep, _):
    return [np.count_nonzero(rep.basic_pitch_histogram)]


def number_of_pitch_classes(rep, _):
    return [np.count_nonzero(rep.pitch_class_histogram)]


def number_of_common_pitches(rep, _):
    return [np.count_nonzero(rep.basic_pitch_histogram >= 0.09)]


def pitch_range(rep, _):
    present = np.flatnonzero(rep.basic_pitch_histogram)
    if not len(present):
        return [0.0]
    return [present[-1] - present[0]]


def mean_pitch(rep, _):
    pitches = _pitches(rep)
    return [pitches.mean() if len(pitches) else 0.0]


def most_common_pitch(rep, _):
    return [int(np.argmax(rep.basic_pitch_histogram))]


def most_common_pitch_class(rep, _):
    return [int(np.argmax(rep.pitch_class_histogram))]


def prevalence_of_most_common_pitch(rep, _):
    return [rep.basic_pitch_histogram.max()]


def interval_between_most_prevalent_pitches(rep, _):
    if np.count_nonzero(rep.basic_pitch_histogram) < 2:
        return [0.0]
    first, second = _top_two(rep.basic_pitch_histogram)
    return [abs(first - second)]


def pitch_variability(rep, _):
    pitches = _pitches(rep)
    return [pitches.std() if len(pitches) else 0.0]


def pitch_class_variability(rep, _):
    pitch_classes = _pitches(rep) % 12
    return [pitch_classes.std() if len(pitch_classes) else 0.0]


def pitch_skewness(rep, _):
    """Pearson median skewness: 3 * (mean - median) / std."""
    pitches = _pitches(rep)
    if len(pitches) < 2 or pitches.std() == 0:
        return [0.0]
    return [3.0 * (pitches.mean() - np.median(pitches)) / pitches.std()]


def pitch_kurtosis(rep, _):
    pitches = _pitches(rep)
    if len(pitches) < 4 or pitches.std() == 0:
        return [0.0]
    return [stats.kurtosis(pitches, fisher=True, bias=False)]


DESCRIPTORS = [
    DescriptorDefinition(
        "Basic Pitch Histogram", "P-1",
        "Fraction of pitched notes at each of the 128 MIDI pitches.",
        128, basic_pitch_histogram),
    DescriptorDefinition(
        "Pitch Class Histogram", "P-2",
        "Fraction of pitched notes in each of the 12 pitch classes (C first).",
        12, pitch_class_histogram),
    DescriptorDefinition(
        "Folded Fifths Pitch Class Histogram", "P-3",
        "Pitch class histogram reordered so adjacent bins are a perfect fifth apart.",
        12, folded_fifths_histogram),
    DescriptorDefinition(
        "Number of Pitches", "P-4",
        "Number of distinct MIDI pitches used.",
        1, number_of_pitches),
    DescriptorDefinition(
        "Number of Pitch Classes", "P-5",
        "Number of distinct pitch classes used.",
        1, number_of_pitch_classes),
    DescriptorDefinition(
        "Number of Common Pitches", "P-6",
        "Number of pitches accounting individually for at least 9% of pitched notes.",
        1, number_of_common_pitches),
    DescriptorDefinition(
        "Range", "P-8",
        "Difference in semitones between the highest and lowest pitches.",
        1, pitch_range),
    DescriptorDefinition(
        "Mean Pitch", "P-14",
        "Mean MIDI pitch of all pitched notes.",
        1, mean_pitch),
    DescriptorDefinition(
        "Most Common Pitch", "P-16",
        "MIDI pitch of the most frequently occurring pitch.",
        1, most_common_pitch),
    DescriptorDefinition(
        "Most Common Pitch Class", "P-17",
        "Pitch class of the most frequently occurring pitch class.",
        1, most_common_pitch_class),
    DescriptorDefinition(
        "Prevalence of Most Common Pitch", "P-18",
        "Fraction of pitched notes that have the most common pitch.",
        1, prevalence_of_most_common_pitch),
    DescriptorDefinition(
        "Interval Between Most Prevalent Pitches", "P-22",
        "Absolute semitone distance between the two most common pitches.",
        1, interval_between_most_prevalent_pitches),
    DescriptorDefinition(
        "Pitch Variability", "P-24",
        "Standard deviation of the MIDI pitches of all pitched notes.",
        1, pitch_variability),
    DescriptorDefinition(
        "Pitch Class Variability", "P-25",
        "Standard deviation of the pitch classes of all pitched notes.",
        1, pitch_class_variability),
    DescriptorDefinition(
        "Pitch Skewness", "P-27",
        "Median skewness of the MIDI pitches of all pitched notes.",
        1, pitch_skewness),
    DescriptorDefinition(
        "Pitch Kurtosis", "P-30",
        "Sample excess kurtosis of the MIDI pitches of all pitched notes.",
        1, pitch_kurtosis),
]
