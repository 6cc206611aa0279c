"""Worker thread that extracts descriptors from queued recordings."""

import logging
import queue
import threading
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from symfeat.contracts import ContractViolation, InputParseError, ResourceExhaustionError
from symfeat.extraction.aggregator import aggregate
from symfeat.extraction.engine import ExtractionEngine, RecordingResult
from symfeat.extraction.results import ExtractionLog
from symfeat.pipeline.sink import ResultSink
from symfeat.recording.loader import RecordingLoader

if TYPE_CHECKING:
    from symfeat.schemas import InternalConfig

__all__ = ['RecordingProcessor']

logger = logging.getLogger(__name__)


class RecordingProcessor(threading.Thread):
    """Loads, extracts and emits recordings taken from a queue.

    For each path the processor:

    1. **Load**: decodes MIDI or MusicXML into a ``Recording``. A file that
       cannot be decoded is logged and skipped.
    2. **Extract**: runs the shared ``ExtractionEngine`` over every window.
    3. **Emit**: writes saved per-window values and, when enabled, the
       whole-recording summaries to the sink while holding the sink lock.

    A resource-exhaustion failure sets the run-wide ``abort_event``; a
    contract violation stops this worker. Both are logged at CRITICAL.

    Example usage (typically called by the orchestrator)::

        processor = RecordingProcessor(paths, engine, config, sink, log, abort_event)
        processor.start()
        paths.join()
        processor.stop()
    """

    def __init__(self, input_queue: queue.Queue, engine: ExtractionEngine,
                 config: "InternalConfig", sink: ResultSink, log: ExtractionLog,
                 abort_event: Optional[threading.Event] = None,
                 loader: Optional[RecordingLoader] = None,
                 name: str = "RecordingProcessor"):
        super().__init__(daemon=True, name=name)
        self.input_queue = input_queue
        self.engine = engine
        self.plan = engine.plan
        self.config = config
        self.sink = sink
        self.log = log
        self.abort_event = abort_event or threading.Event()
        self.loader = loader or RecordingLoader()
        self._stop_event = threading.Event()

        self.attempted = 0
        self.contributing = 0
        self.failed = 0
        self.fatal_error = None

    def stop(self):
        """Signal processor to stop after the current recording."""
        self._stop_event.set()

    def stopped(self):
        return self._stop_event.is_set() or self.abort_event.is_set()

    def process_file(self, filepath) -> bool:
        """Load, extract and emit one recording.

        Returns
        -------
        bool
            True if the recording contributed at least one value.
        """
        self.attempted += 1
        try:
            logger.info("Processing: %s", Path(filepath).name)
            recording = self.loader.load(filepath)
            result = self.engine.extract(recording, self.log)
            self._emit(result)
            if result.has_values:
                self.contributing += 1
                return True
            logger.warning("%s produced no values", recording.identifier)
            return False

        except InputParseError as e:
            logger.error("Skipping unreadable recording %s", e)
            self.log.add(str(filepath), f"Input parse error: {e}")
            self.failed += 1
            return False

        except ResourceExhaustionError as e:
            logger.critical("Resource exhaustion: %s", e)
            logger.critical("Aborting the run; recordings already emitted are kept.")
            self.log.add(str(filepath), f"Resource exhaustion: {e}")
            self.fatal_error = e
            self.failed += 1
            self.abort_event.set()
            return False

        except ContractViolation as e:
            logger.critical("CRITICAL: Extraction contract violated: %s", e)
            logger.critical("This indicates a bug in extraction logic. Stopping processor.")
            self.log.add(str(filepath), f"Contract violation: {e}")
            self.fatal_error = e
            self.failed += 1
            self.stop()
            return False

        except Exception as e:
            logger.exception("Error processing %s", filepath)
            self.log.add(str(filepath), f"{type(e).__name__}: {e}")
            self.failed += 1
            return False

    def _emit(self, result: RecordingResult) -> None:
        """Write one recording's saved values to the sink."""
        output = self.config.output
        table = result.table
        saved = self.plan.saved
        with self.sink.lock:
            self.sink.begin_recording(result.identifier)
            try:
                if output.save_windowed:
                    for window in result.windows:
                        for entry in saved:
                            if entry.descriptor.per_window:
                                self.sink.emit_window_value(
                                    window, entry.name, table[(window.index, entry.position)])
                if output.save_overall:
                    for vector in aggregate(self.plan, table, result.window_count):
                        self.sink.emit_overall_value(vector.descriptor, vector.values)
            finally:
                self.sink.end_recording()

    def run(self):
        """Main processor loop (runs in thread).

        Reads paths until stopped or the run is aborted.
        """
        logger.info("%s started, waiting for recordings...", self.name)

        while not self.stopped():
            try:
                filepath = self.input_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                self.process_file(filepath)
            except Exception:
                logger.exception("Failed to process file: %s", filepath)
            finally:
                self.input_queue.task_done()

        logger.info("%s stopped", self.name)
