"""Batch orchestration.

Resolves the evaluation plan once, then fans recordings out to worker
threads through a queue and collects a run summary.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

from symfeat.catalog import DescriptorCatalog, build_default_catalog, resolve_selection
from symfeat.extraction.engine import ExtractionEngine
from symfeat.extraction.results import ExtractionLog
from symfeat.extraction.scheduler import build_plan
from symfeat.pipeline.processor import RecordingProcessor
from symfeat.pipeline.sink import ResultSink, TableSink
from symfeat.recording.loader import RecordingLoader, find_recordings
from symfeat.setup_directories import setup_output_directories

if TYPE_CHECKING:
    from symfeat.schemas import InternalConfig

__all__ = ['BatchOrchestrator', 'BatchSummary']

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    """Outcome of a batch run."""
    attempted: int
    contributing: int
    failed: int
    log: ExtractionLog
    aborted: bool = False


class BatchOrchestrator:
    """Runs extraction over a batch of recordings.

    Configuration problems (unknown descriptors, cycles, bad windowing)
    surface from the constructor, before any recording is read.

    **Workers:**

    ``extraction.num_workers`` ``RecordingProcessor`` threads share one
    immutable plan and engine. Each recording is extracted by a single
    worker; sink emission is serialized by the sink lock.

    **Abort:**

    A resource-exhaustion failure sets a run-wide abort event. Workers stop
    taking new recordings; recordings already emitted stay in the sink,
    which is still finalized.

    **Logging:**

    Console and ``<output_dir>/logs/<log_filename>``, at ``logging.level``.

    Example usage::

        config = resolve_config(ParamConfig(), UserConfig(**CONFIG))
        summary = BatchOrchestrator(config).run()
        print(summary.attempted, summary.contributing)
    """

    def __init__(self, config: "InternalConfig", sink: Optional[ResultSink] = None,
                 catalog: Optional[DescriptorCatalog] = None,
                 loader: Optional[RecordingLoader] = None,
                 configure_logging: bool = True):
        self.config = config
        self.catalog = catalog or build_default_catalog()
        requested = resolve_selection(self.catalog, config.features.selected,
                                      config.extraction.input_kind)
        self.plan = build_plan(self.catalog, requested)
        self.engine = ExtractionEngine(self.plan, config)
        self.loader = loader or RecordingLoader()
        self.configure_logging = configure_logging

        self.output_dirs = None
        self.sink = sink
        self.log = ExtractionLog()
        self.processors = []
        self._abort = threading.Event()
        self._start_time = None

    def _setup_logging(self):
        """Configure the root logger with file and console handlers."""
        log_level = getattr(logging, self.config.logging.level, logging.INFO)
        log_path = Path(self.output_dirs["logs"]) / self.config.logging.log_filename

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

    def _default_sink(self) -> TableSink:
        output = self.config.output
        features_dir = Path(self.output_dirs["features"])
        return TableSink(
            db_path=features_dir / output.db_filename,
            parquet_path=features_dir / output.parquet_filename,
            compression=output.compression,
        )

    def run(self, paths: Optional[Iterable] = None) -> BatchSummary:
        """Extract every recording and return the run summary.

        Parameters
        ----------
        paths : iterable of str or Path, optional
            Files or directories. Defaults to ``config.inputs.paths``.
        """
        if self.sink is None or self.configure_logging:
            self.output_dirs = setup_output_directories(self.config.output.output_dir)
        if self.configure_logging:
            self._setup_logging()
        if self.sink is None:
            self.sink = self._default_sink()

        logger.info("=" * 60)
        logger.info("Starting descriptor extraction")
        logger.info("=" * 60)
        self._start_time = time.time()

        recordings = find_recordings(paths if paths is not None else self.config.inputs.paths,
                                     self.config.extraction.input_kind)
        logger.info("%d recordings, %d descriptors in plan (%d saved), mode=%s",
                    len(recordings), len(self.plan), len(self.plan.saved),
                    self.config.windowing.mode)

        input_queue = queue.Queue()
        for path in recordings:
            input_queue.put(path)

        workers = min(self.config.extraction.num_workers, max(len(recordings), 1))
        self.processors = [
            RecordingProcessor(input_queue, self.engine, self.config, self.sink, self.log,
                               abort_event=self._abort, loader=self.loader,
                               name=f"RecordingProcessor-{i}")
            for i in range(workers)
        ]
        for processor in self.processors:
            processor.start()

        try:
            self._wait(input_queue)
        except KeyboardInterrupt:
            logger.info("Shutdown signal received (Ctrl+C)")
            self._abort.set()
        finally:
            self.stop()

        return self._summary()

    def _wait(self, input_queue: queue.Queue):
        """Block until the queue is processed, the run aborts or all workers die."""
        while input_queue.unfinished_tasks:
            if self._abort.wait(timeout=0.05):
                logger.warning("Run aborted with %d recordings unprocessed",
                               input_queue.qsize())
                return
            if not any(p.is_alive() for p in self.processors):
                logger.warning("All processors stopped with %d recordings unprocessed",
                               input_queue.qsize())
                return

    def stop(self):
        """Stop workers and finalize the sink."""
        for processor in self.processors:
            processor.stop()
        for processor in self.processors:
            processor.join(timeout=10)
            if processor.is_alive():
                logger.warning("%s did not stop cleanly", processor.name)
        if self.sink is not None:
            self.sink.finalize()

    def _summary(self) -> BatchSummary:
        summary = BatchSummary(
            attempted=sum(p.attempted for p in self.processors),
            contributing=sum(p.contributing for p in self.processors),
            failed=sum(p.failed for p in self.processors),
            log=self.log,
            aborted=self._abort.is_set(),
        )
        elapsed = time.time() - self._start_time if self._start_time else 0
        logger.info("=" * 60)
        logger.info("Extraction finished. Runtime: %.1f seconds", elapsed)
        logger.info("Recordings: attempted=%d, contributing=%d, failed=%d",
                    summary.attempted, summary.contributing, summary.failed)
        if len(self.log):
            logger.info("Extraction log: %d entries", len(self.log))
            for entry in self.log:
                logger.info("  %s", entry)
        if summary.aborted:
            logger.error("Run was aborted before all recordings were processed")
        logger.info("=" * 60)
        return summary
