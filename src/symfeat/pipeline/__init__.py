"""Batch pipeline modules.

- orchestrator: batch controller and run summary
- processor: recording worker thread
- sink: result sinks (pandas / SQLite / Parquet)
"""

from symfeat.pipeline.orchestrator import BatchOrchestrator, BatchSummary
from symfeat.pipeline.processor import RecordingProcessor
from symfeat.pipeline.sink import ResultSink, TableSink

__all__ = [
    "BatchOrchestrator",
    "BatchSummary",
    "RecordingProcessor",
    "ResultSink",
    "TableSink",
]
