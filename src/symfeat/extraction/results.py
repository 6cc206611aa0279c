"""Result values, the per-recording result table and the extraction log."""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union

import numpy as np

__all__ = [
    'UNAVAILABLE',
    'Unavailable',
    'OVERALL',
    'ResultVector',
    'ResultTable',
    'LogEntry',
    'ExtractionLog',
    'freeze_values',
]

OVERALL = "overall"


class Unavailable(Enum):
    """Marker for a value that could not be computed."""
    UNAVAILABLE = "unavailable"

    def __repr__(self):
        return "UNAVAILABLE"

    def __bool__(self):
        return False


UNAVAILABLE = Unavailable.UNAVAILABLE

Values = Union[np.ndarray, Unavailable]


def freeze_values(values) -> np.ndarray:
    """Copy ``values`` into a read-only 1-D float array."""
    array = np.array(values, dtype=float).reshape(-1)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class ResultVector:
    """Value of one descriptor for one window, or for the whole recording.

    Attributes
    ----------
    descriptor : str
        Output name (for summaries, the decorated name).
    window : int or "overall"
    values : np.ndarray or UNAVAILABLE
    """
    descriptor: str
    window: Union[int, str]
    values: Values

    @property
    def available(self) -> bool:
        return self.values is not UNAVAILABLE


class ResultTable:
    """Per-recording cells keyed by ``(window_index, plan_position)``.

    Owned by a single extraction; never shared between threads.
    """

    def __init__(self, window_count: int = 0):
        self.window_count = window_count
        self._cells = {}

    def __setitem__(self, key: tuple, values: Values):
        self._cells[key] = values

    def __getitem__(self, key: tuple) -> Values:
        return self._cells.get(key, UNAVAILABLE)

    def __contains__(self, key: tuple) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def column(self, position: int) -> List[Values]:
        """Every window's value for one plan position, in window order."""
        return [self[(window, position)] for window in range(self.window_count)]

    def available_count(self) -> int:
        return sum(1 for values in self._cells.values() if values is not UNAVAILABLE)


@dataclass(frozen=True)
class LogEntry:
    """One recorded failure.

    ``descriptor`` and ``window`` are None for failures that affect a whole
    recording or a whole window.
    """
    recording: str
    descriptor: Optional[str]
    window: Optional[int]
    message: str

    def __str__(self):
        where = self.recording
        if self.window is not None:
            where += f" [window {self.window}]"
        if self.descriptor is not None:
            where += f" '{self.descriptor}'"
        return f"{where}: {self.message}"


class ExtractionLog:
    """Thread-safe collection of failure entries for a run."""

    def __init__(self):
        self._entries = []
        self._lock = threading.Lock()

    def add(self, recording: str, message: str, descriptor: Optional[str] = None,
            window: Optional[int] = None) -> LogEntry:
        entry = LogEntry(recording=recording, descriptor=descriptor,
                         window=window, message=message)
        with self._lock:
            self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def for_recording(self, recording: str) -> List[LogEntry]:
        return [e for e in self.entries if e.recording == recording]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)
