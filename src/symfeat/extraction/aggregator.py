"""Reduce per-window values to whole-recording summaries."""

import logging
from typing import List

import numpy as np

from symfeat.extraction.results import OVERALL, UNAVAILABLE, ResultTable, ResultVector, freeze_values
from symfeat.extraction.scheduler import EvaluationPlan

__all__ = ['aggregate', 'AVERAGE_SUFFIX', 'STD_SUFFIX']

logger = logging.getLogger(__name__)

AVERAGE_SUFFIX = " Overall Average"
STD_SUFFIX = " Overall Standard Deviation"


def aggregate(plan: EvaluationPlan, table: ResultTable, window_count: int) -> List[ResultVector]:
    """Overall values of every saved plan entry.

    With one window the window's value is the overall value, under the
    descriptor's own name. With several windows each entry yields
    ``"<name> Overall Average"`` and ``"<name> Overall Standard Deviation"``:
    the dimension-wise mean and population standard deviation over the
    windows where the entry is available.

    Parameters
    ----------
    plan : EvaluationPlan
    table : ResultTable
    window_count : int

    Returns
    -------
    list of ResultVector
        In plan order; summaries with no available window are UNAVAILABLE.
    """
    results = []
    for entry in plan.saved:
        name = entry.name
        column = [table[(w, entry.position)] for w in range(window_count)]

        if window_count == 1:
            results.append(ResultVector(name, OVERALL, column[0]))
            continue

        available = [values for values in column if values is not UNAVAILABLE]
        if available and entry.descriptor.is_variable:
            # Windows may disagree in length; keep those matching the latest.
            length = available[-1].size
            available = [values for values in available if values.size == length]

        if not available:
            results.append(ResultVector(name + AVERAGE_SUFFIX, OVERALL, UNAVAILABLE))
            results.append(ResultVector(name + STD_SUFFIX, OVERALL, UNAVAILABLE))
            continue

        stacked = np.vstack(available)
        results.append(ResultVector(name + AVERAGE_SUFFIX, OVERALL,
                                    freeze_values(stacked.mean(axis=0))))
        results.append(ResultVector(name + STD_SUFFIX, OVERALL,
                                    freeze_values(stacked.std(axis=0))))
    return results
