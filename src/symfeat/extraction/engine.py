"""Per-recording extraction engine.

The engine walks windows in order. For each window it builds the
intermediate representation once, then evaluates every plan entry in
plan order. Descriptors that look back (negative offsets) read earlier
windows' stored values from the result table; the representation of an
earlier window is never kept.

Failure scopes:

- one descriptor on one window raises: that cell is UNAVAILABLE and one
  log entry is added
- the representation of a window cannot be built: every cell of that
  window is UNAVAILABLE and one log entry is added
- memory runs out anywhere: ``ResourceExhaustionError`` aborts the run
"""

import logging
from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from symfeat.catalog.definition import Variant
from symfeat.contracts import (
    ComputationError,
    ContractViolation,
    ResourceExhaustionError,
)
from symfeat.extraction.representation import RepresentationBuilder
from symfeat.extraction.results import UNAVAILABLE, ExtractionLog, ResultTable, freeze_values
from symfeat.extraction.scheduler import EvaluationPlan, PlanEntry
from symfeat.extraction.windower import Window, split_windows
from symfeat.recording.model import Recording

if TYPE_CHECKING:
    from symfeat.schemas import InternalConfig

__all__ = ['ExtractionEngine', 'RecordingResult']

logger = logging.getLogger(__name__)


@dataclass
class RecordingResult:
    """Everything extracted from one recording."""
    identifier: str
    windows: List[Window]
    table: ResultTable

    @property
    def window_count(self) -> int:
        return len(self.windows)

    @property
    def has_values(self) -> bool:
        return self.table.available_count() > 0


class ExtractionEngine:
    """Runs an evaluation plan over the windows of a recording.

    Immutable after construction and shared by all worker threads.

    Example usage::

        engine = ExtractionEngine(plan, config)
        log = ExtractionLog()
        result = engine.extract(recording, log)
        result.table[(0, plan.names.index("Mean Pitch"))]
    """

    def __init__(self, plan: EvaluationPlan, config: "InternalConfig",
                 builder: RepresentationBuilder = None):
        self.plan = plan
        self.mode = config.windowing.mode
        self.window_size = config.windowing.window_size
        self.window_overlap = config.windowing.window_overlap
        self.builder = builder or RepresentationBuilder(config)

    def extract(self, recording: Recording, log: ExtractionLog) -> RecordingResult:
        """Compute every plan entry on every window of ``recording``.

        Parameters
        ----------
        recording : Recording
        log : ExtractionLog
            Receives one entry per failed cell or failed window.

        Returns
        -------
        RecordingResult

        Raises
        ------
        ConfigurationError
            If the windowing parameters are invalid.
        ResourceExhaustionError
            If memory runs out.
        """
        windowed = split_windows(recording, self.mode, self.window_size, self.window_overlap)
        table = ResultTable(window_count=len(windowed))
        identifier = recording.identifier

        for window, sub_recording in windowed:
            try:
                rep = self.builder.build(sub_recording)
            except (ResourceExhaustionError, ContractViolation):
                raise
            except MemoryError as e:
                raise ResourceExhaustionError(
                    f"Out of memory in {identifier} window {window.index}") from e
            except Exception as e:
                logger.error("Failed to build representation of %s window %d: %s",
                             identifier, window.index, e)
                log.add(identifier, f"Representation failed: {e}", window=window.index)
                for entry in self.plan:
                    table[(window.index, entry.position)] = UNAVAILABLE
                continue

            for entry in self.plan:
                table[(window.index, entry.position)] = self._evaluate(
                    entry, window, rep, table, identifier, log)

        logger.debug("Extracted %s: %d windows, %d cells available",
                     identifier, table.window_count, table.available_count())
        return RecordingResult(identifier=identifier,
                               windows=[w for w, _ in windowed], table=table)

    def _evaluate(self, entry: PlanEntry, window: Window, rep, table: ResultTable,
                  identifier: str, log: ExtractionLog):
        """Value of one plan entry on one window, or UNAVAILABLE."""
        descriptor = entry.descriptor
        if window.index < entry.history_depth:
            return UNAVAILABLE
        if descriptor.variant == Variant.FORMAT_SPECIFIC and rep.side_channel is None:
            logger.debug("Skipping '%s' for %s: no notation side channel",
                         descriptor.name, identifier)
            return UNAVAILABLE

        prerequisites = [
            table[(window.index + offset, position)]
            for position, offset in zip(entry.prerequisite_positions, entry.offsets)
        ]
        if any(values is UNAVAILABLE for values in prerequisites):
            return UNAVAILABLE

        try:
            return self._compute(entry, window, rep, prerequisites)
        except (ResourceExhaustionError, ContractViolation):
            raise
        except MemoryError as e:
            raise ResourceExhaustionError(
                f"Out of memory computing '{descriptor.name}' on {identifier}") from e
        except Exception as e:
            if not isinstance(e, ComputationError):
                e = ComputationError(descriptor.name, window.index, f"{type(e).__name__}: {e}")
            logger.error("%s: %s", identifier, e)
            log.add(identifier, str(e), descriptor=descriptor.name, window=window.index)
            return UNAVAILABLE

    @staticmethod
    def _compute(entry: PlanEntry, window: Window, rep, prerequisites):
        descriptor = entry.descriptor
        values = freeze_values(descriptor.compute(rep, prerequisites))
        if descriptor.is_variable:
            if values.size == 0:
                raise ComputationError(descriptor.name, window.index, "returned no values")
        elif values.size != descriptor.dimensionality:
            raise ComputationError(
                descriptor.name, window.index,
                f"returned {values.size} values, expected {descriptor.dimensionality}")
        return values
