"""Instrumentation descriptors (General MIDI programs and percussion keys)."""

import numpy as np

from symfeat.catalog.definition import DescriptorDefinition
from symfeat.extraction.representation.histograms import normalize

__all__ = ['DESCRIPTORS']

# General MIDI percussion key range.
FIRST_PERCUSSION_KEY = 35
LAST_PERCUSSION_KEY = 81


def pitched_instruments_present(rep, _):
    return (rep.pitched_instrument_notes > 0).astype(float)


def unpitched_instruments_present(rep, _):
    keys = rep.unpitched_instrument_notes[FIRST_PERCUSSION_KEY:LAST_PERCUSSION_KEY + 1]
    return (keys > 0).astype(float)


def note_prevalence_of_pitched_instruments(rep, _):
    total = len(rep.notes)
    if not total:
        return np.zeros(128)
    return rep.pitched_instrument_notes / float(total)


def time_prevalence_of_pitched_instruments(rep, _):
    """Fraction of the window during which each program sounds."""
    return rep.pitched_tick_map.sum(axis=0) / float(rep.tick_length + 1)


def number_of_pitched_instruments(rep, _):
    return [np.count_nonzero(rep.pitched_instrument_notes)]


def number_of_unpitched_instruments(rep, _):
    keys = rep.unpitched_instrument_notes[FIRST_PERCUSSION_KEY:LAST_PERCUSSION_KEY + 1]
    return [np.count_nonzero(keys)]


def percussion_prevalence(rep, _):
    total = len(rep.notes)
    return [rep.unpitched_note_count / total if total else 0.0]


def most_common_pitched_instrument(rep, _):
    return [int(np.argmax(rep.pitched_instrument_notes))]


def variability_of_note_prevalence_of_pitched_instruments(rep, _):
    used = rep.pitched_instrument_notes[rep.pitched_instrument_notes > 0]
    if not len(used):
        return [0.0]
    return [normalize(used).std()]


DESCRIPTORS = [
    DescriptorDefinition(
        "Pitched Instruments Present", "I-1",
        "One value per General MIDI program: 1 if it plays at least one note.",
        128, pitched_instruments_present),
    DescriptorDefinition(
        "Unpitched Instruments Present", "I-2",
        "One value per General MIDI percussion key 35-81: 1 if it is struck.",
        LAST_PERCUSSION_KEY - FIRST_PERCUSSION_KEY + 1, unpitched_instruments_present),
    DescriptorDefinition(
        "Note Prevalence of Pitched Instruments", "I-3",
        "Fraction of all notes played by each General MIDI program.",
        128, note_prevalence_of_pitched_instruments),
    DescriptorDefinition(
        "Time Prevalence of Pitched Instruments", "I-5",
        "Fraction of the ticks during which each General MIDI program sounds.",
        128, time_prevalence_of_pitched_instruments),
    DescriptorDefinition(
        "Variability of Note Prevalence of Pitched Instruments", "I-6",
        "Standard deviation of the note shares of the programs that are used.",
        1, variability_of_note_prevalence_of_pitched_instruments),
    DescriptorDefinition(
        "Number of Pitched Instruments", "I-8",
        "Number of General MIDI programs that play at least one note.",
        1, number_of_pitched_instruments),
    DescriptorDefinition(
        "Number of Unpitched Instruments", "I-9",
        "Number of distinct percussion keys that are struck.",
        1, number_of_unpitched_instruments),
    DescriptorDefinition(
        "Most Common Pitched Instrument", "I-10",
        "General MIDI program playing the most notes.",
        1, most_common_pitched_instrument),
    DescriptorDefinition(
        "Percussion Prevalence", "I-11",
        "Fraction of notes played on the percussion channel.",
        1, percussion_prevalence),
]
