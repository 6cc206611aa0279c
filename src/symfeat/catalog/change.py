"""Window-to-window change descriptors.

Each reads a prerequisite in the current window (offset 0) and in the
previous one (offset -1), so it is UNAVAILABLE for the first window and
whenever the recording is not windowed. They are off by default.
"""

import numpy as np

from symfeat.catalog.definition import DescriptorDefinition

__all__ = ['DESCRIPTORS']


def _difference(rep, prerequisites):
    current, previous = prerequisites
    return [current[0] - previous[0]]


def _histogram_distance(rep, prerequisites):
    current, previous = prerequisites
    return [float(np.linalg.norm(np.asarray(current) - np.asarray(previous)))]


def _from_previous(name: str, code: str, description: str, compute, prerequisite: str):
    return DescriptorDefinition(
        name, code, description, 1, compute,
        prerequisites=(prerequisite, prerequisite),
        offsets=(0, -1),
        default_on=False,
    )


DESCRIPTORS = [
    _from_previous(
        "Change in Mean Pitch from Previous Window", "C-1",
        "Mean pitch of this window minus that of the previous window.",
        _difference, "Mean Pitch"),
    _from_previous(
        "Change in Note Density from Previous Window", "C-2",
        "Note density of this window minus that of the previous window.",
        _difference, "Note Density"),
    _from_previous(
        "Pitch Class Histogram Distance from Previous Window", "C-3",
        "Euclidean distance between this and the previous window's pitch class histograms.",
        _histogram_distance, "Pitch Class Histogram"),
]
