"""Contrapuntal motion between successive simultaneities.

At every pitched onset tick the set of sounding pitches is taken as a
vertical sonority (voices ordered low to high). Each sonority is compared
with the next one holding the same number of voices. Every pair of voices
is then tagged:

- parallel: both voices move in the same direction by the same interval
- similar: both move in the same direction by different intervals
- contrary: the voices move in opposite directions
- oblique: exactly one voice moves

When the next sonority has a different voice count, later onsets are
searched up to ``lookahead_ticks`` away; if none matches the transition is
skipped.
"""

from dataclasses import dataclass
from itertools import combinations

import numpy as np

from symfeat.extraction.representation.notes import NoteCollection

__all__ = ['MotionFractions', 'sounding_sets', 'classify_motion']


@dataclass(frozen=True)
class MotionFractions:
    """Fractions of classified voice-pair movements (sum to 1, or all 0)."""
    parallel: float = 0.0
    similar: float = 0.0
    contrary: float = 0.0
    oblique: float = 0.0
    transitions: int = 0

    def as_array(self) -> np.ndarray:
        return np.array([self.parallel, self.similar, self.contrary, self.oblique])


def sounding_sets(notes: NoteCollection) -> list:
    """``(tick, sorted pitches)`` at each pitched onset tick."""
    mask = notes.pitched
    starts = notes.start_tick[mask]
    ends = notes.end_tick[mask]
    pitches = notes.pitch[mask]

    sets = []
    for tick in np.unique(starts):
        sounding = (starts <= tick) & ((ends > tick) | (starts == tick))
        sets.append((int(tick), tuple(sorted(set(pitches[sounding].tolist())))))
    return sets


def _classify_pair(low_move: int, high_move: int):
    if low_move == 0 and high_move == 0:
        return None
    if low_move == 0 or high_move == 0:
        return "oblique"
    if np.sign(low_move) != np.sign(high_move):
        return "contrary"
    if low_move == high_move:
        return "parallel"
    return "similar"


def classify_motion(notes: NoteCollection, lookahead_ticks: int) -> MotionFractions:
    """Classify voice-pair motion across a window.

    Parameters
    ----------
    notes : NoteCollection
        The window's resolved notes.
    lookahead_ticks : int
        How far past the next onset to search for a sonority with a
        matching voice count.
    """
    sets = sounding_sets(notes)
    counts = {"parallel": 0, "similar": 0, "contrary": 0, "oblique": 0}
    transitions = 0

    for i in range(len(sets) - 1):
        _, current = sets[i]
        if len(current) < 2:
            continue

        next_tick = sets[i + 1][0]
        following = None
        for tick, candidate in sets[i + 1:]:
            if tick - next_tick > lookahead_ticks:
                break
            if len(candidate) == len(current):
                following = candidate
                break
        if following is None:
            continue

        transitions += 1
        moves = [b - a for a, b in zip(current, following)]
        for low, high in combinations(range(len(moves)), 2):
            kind = _classify_pair(moves[low], moves[high])
            if kind is not None:
                counts[kind] += 1

    total = sum(counts.values())
    if total == 0:
        return MotionFractions(transitions=transitions)
    return MotionFractions(
        parallel=counts["parallel"] / total,
        similar=counts["similar"] / total,
        contrary=counts["contrary"] / total,
        oblique=counts["oblique"] / total,
        transitions=transitions,
    )
