"""Rhythm and tempo descriptors.

Beat-histogram descriptors expose only the bins of the configured tempo
band, so their length follows the configuration.
"""

import numpy as np

from symfeat.catalog.definition import VARIABLE, DescriptorDefinition
from symfeat.extraction.representation.histograms import RHYTHMIC_VALUES

__all__ = ['DESCRIPTORS']

STRONGEST = "Strength of Strongest Rhythmic Pulse"
SECOND_STRONGEST = "Strength of Second Strongest Rhythmic Pulse"


def rhythmic_value_histogram(rep, _):
    return rep.rhythmic_value_histogram


def most_common_rhythmic_value(rep, _):
    if not rep.rhythmic_value_histogram.any():
        return [0.0]
    return [RHYTHMIC_VALUES[int(np.argmax(rep.rhythmic_value_histogram))]]


def number_of_different_rhythmic_values(rep, _):
    return [np.count_nonzero(rep.rhythmic_value_histogram)]


def beat_histogram(rep, _):
    return rep.beat_histogram[rep.min_bpm:]


def beat_histogram_tempo_standardized(rep, _):
    return rep.beat_histogram_tempo_standardized[rep.min_bpm:]


def strongest_rhythmic_pulse(rep, _):
    return [int(np.argmax(rep.beat_histogram))]


def strongest_rhythmic_pulse_tempo_standardized(rep, _):
    return [int(np.argmax(rep.beat_histogram_tempo_standardized))]


def strength_of_strongest_rhythmic_pulse(rep, _):
    return [rep.beat_histogram.max()]


def _second_strongest(histogram: np.ndarray, table: np.ndarray):
    """Bin and magnitude of the strongest peak other than the maximum."""
    strongest = int(np.argmax(histogram))
    candidates = table[:, 1].copy()
    candidates[strongest] = 0.0
    second = int(np.argmax(candidates))
    return second, candidates[second]


def strength_of_second_strongest_rhythmic_pulse(rep, _):
    _, magnitude = _second_strongest(rep.beat_histogram, rep.beat_histogram_peaks)
    return [magnitude]


def strength_ratio_of_two_strongest_rhythmic_pulses(rep, prerequisites):
    strongest, second = prerequisites[0][0], prerequisites[1][0]
    return [strongest / second if second > 0 else 0.0]


def combined_strength_of_two_strongest_rhythmic_pulses(rep, prerequisites):
    return [prerequisites[0][0] + prerequisites[1][0]]


def harmonicity_of_two_strongest_rhythmic_pulses(rep, _):
    """Ratio of the faster to the slower of the two strongest pulses."""
    strongest = int(np.argmax(rep.beat_histogram))
    second, magnitude = _second_strongest(rep.beat_histogram, rep.beat_histogram_peaks)
    if strongest == 0 or second == 0 or magnitude == 0:
        return [0.0]
    return [max(strongest, second) / min(strongest, second)]


def _peak_count(column: int):
    def compute(rep, _):
        return [np.count_nonzero(rep.beat_histogram_peaks[:, column] > 0.001)]
    return compute


def note_density(rep, _):
    if rep.duration_seconds <= 0:
        return [0.0]
    return [len(rep.notes) / rep.duration_seconds]


def average_note_duration(rep, _):
    durations = rep.note_duration_seconds
    return [durations.mean() if len(durations) else 0.0]


def variability_of_note_durations(rep, _):
    durations = rep.note_duration_seconds
    return [durations.std() if len(durations) else 0.0]


def initial_tempo(rep, _):
    return [rep.initial_tempo_bpm]


def initial_time_signature(rep, _):
    if not rep.time_signatures:
        return [4, 4]
    return list(rep.time_signatures[0])


DESCRIPTORS = [
    DescriptorDefinition(
        "Rhythmic Value Histogram", "RT-1",
        "Fraction of pitched notes at each of 12 quantized rhythmic values.",
        12, rhythmic_value_histogram),
    DescriptorDefinition(
        "Most Common Rhythmic Value", "RT-2",
        "Most frequent quantized rhythmic value, in quarter notes.",
        1, most_common_rhythmic_value),
    DescriptorDefinition(
        "Number of Different Rhythmic Values Present", "RT-3",
        "Number of quantized rhythmic values that occur at least once.",
        1, number_of_different_rhythmic_values),
    DescriptorDefinition(
        "Beat Histogram", "RT-10",
        "Autocorrelation strength of the onset signal per beats-per-minute bin.",
        VARIABLE, beat_histogram),
    DescriptorDefinition(
        "Beat Histogram Tempo Standardized", "RT-11",
        "Beat histogram computed as if the recording ran at the reference tempo.",
        VARIABLE, beat_histogram_tempo_standardized),
    DescriptorDefinition(
        "Strongest Rhythmic Pulse", "RT-27",
        "Beats per minute of the beat histogram bin with the highest magnitude.",
        1, strongest_rhythmic_pulse),
    DescriptorDefinition(
        "Strongest Rhythmic Pulse - Tempo Standardized", "RT-28",
        "Strongest rhythmic pulse of the tempo-standardized beat histogram.",
        1, strongest_rhythmic_pulse_tempo_standardized),
    DescriptorDefinition(
        STRONGEST, "RT-20",
        "Magnitude of the highest beat histogram bin.",
        1, strength_of_strongest_rhythmic_pulse),
    DescriptorDefinition(
        SECOND_STRONGEST, "RT-21",
        "Magnitude of the highest beat histogram peak other than the strongest bin.",
        1, strength_of_second_strongest_rhythmic_pulse),
    DescriptorDefinition(
        "Strength Ratio of Two Strongest Rhythmic Pulses", "RT-22",
        "Strongest pulse magnitude divided by the second strongest.",
        1, strength_ratio_of_two_strongest_rhythmic_pulses,
        prerequisites=(STRONGEST, SECOND_STRONGEST)),
    DescriptorDefinition(
        "Combined Strength of Two Strongest Rhythmic Pulses", "RT-23",
        "Sum of the magnitudes of the two strongest pulses.",
        1, combined_strength_of_two_strongest_rhythmic_pulses,
        prerequisites=(STRONGEST, SECOND_STRONGEST)),
    DescriptorDefinition(
        "Harmonicity of Two Strongest Rhythmic Pulses", "RT-24",
        "Ratio of the higher to the lower beats-per-minute of the two strongest pulses.",
        1, harmonicity_of_two_strongest_rhythmic_pulses),
    DescriptorDefinition(
        "Number of Strong Rhythmic Pulses", "RT-17",
        "Number of beat histogram peaks with normalized magnitudes over 0.1.",
        1, _peak_count(0)),
    DescriptorDefinition(
        "Number of Moderate Rhythmic Pulses", "RT-18",
        "Number of beat histogram peaks with normalized magnitudes over 0.01.",
        1, _peak_count(1)),
    DescriptorDefinition(
        "Number of Relatively Strong Rhythmic Pulses", "RT-19",
        "Number of beat histogram peaks over 30% of the highest magnitude.",
        1, _peak_count(2)),
    DescriptorDefinition(
        "Note Density", "RT-5",
        "Average number of notes per second.",
        1, note_density),
    DescriptorDefinition(
        "Average Note Duration", "RT-6",
        "Mean note duration in seconds.",
        1, average_note_duration),
    DescriptorDefinition(
        "Variability of Note Durations", "RT-7",
        "Standard deviation of note durations in seconds.",
        1, variability_of_note_durations),
    DescriptorDefinition(
        "Initial Tempo", "RT-30",
        "Tempo in beats per minute at the start of the recording.",
        1, initial_tempo, per_window=False),
    DescriptorDefinition(
        "Initial Time Signature", "RT-31",
        "Numerator and denominator of the first time signature (4/4 when absent).",
        2, initial_time_signature, per_window=False),
]
