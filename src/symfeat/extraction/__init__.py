"""Windowed descriptor extraction.

Modules
-------
scheduler : evaluation plans from requested descriptors
windower : window bounds and per-window sub-recordings
representation : per-window intermediate representation
engine : per-recording extraction
aggregator : whole-recording summaries
results : result values, table and failure log
"""

from symfeat.extraction.aggregator import aggregate
from symfeat.extraction.engine import ExtractionEngine, RecordingResult
from symfeat.extraction.results import (
    OVERALL,
    UNAVAILABLE,
    ExtractionLog,
    LogEntry,
    ResultTable,
    ResultVector,
)
from symfeat.extraction.scheduler import EvaluationPlan, PlanEntry, build_plan
from symfeat.extraction.windower import Window, WindowedRecording, split_windows

__all__ = [
    'build_plan',
    'EvaluationPlan',
    'PlanEntry',
    'split_windows',
    'Window',
    'WindowedRecording',
    'ExtractionEngine',
    'RecordingResult',
    'aggregate',
    'UNAVAILABLE',
    'OVERALL',
    'ResultVector',
    'ResultTable',
    'ExtractionLog',
    'LogEntry',
]
