"""Result sinks.

A sink receives the values of one recording at a time, between
``begin_recording`` and ``end_recording``. Callers hold ``sink.lock`` for
the whole emission of a recording so rows of different recordings never
interleave.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from symfeat.extraction.results import UNAVAILABLE
from symfeat.extraction.windower import Window

__all__ = ['ResultSink', 'TableSink', 'COLUMNS']

logger = logging.getLogger(__name__)

COLUMNS = [
    "recording",
    "scope",
    "window",
    "start_time",
    "end_time",
    "descriptor",
    "dimension",
    "value",
    "available",
]


class ResultSink(ABC):
    """Receiver of extracted values."""

    def __init__(self):
        self.lock = threading.RLock()

    @abstractmethod
    def begin_recording(self, identifier: str) -> None:
        ...

    @abstractmethod
    def emit_window_value(self, window: Window, name: str, values) -> None:
        ...

    @abstractmethod
    def emit_overall_value(self, name: str, values) -> None:
        ...

    @abstractmethod
    def end_recording(self) -> None:
        ...

    def finalize(self) -> None:
        """Flush and release resources once the batch is over."""


class TableSink(ResultSink):
    """Long-format table of values (one row per value dimension).

    UNAVAILABLE values become a single row with ``value`` NaN and
    ``available`` False. Each finished recording is appended to the SQLite
    table ``features`` when ``db_path`` is set; ``finalize`` exports all
    rows to Parquet when ``parquet_path`` is set.

    Example usage::

        sink = TableSink(db_path="out/features.db", parquet_path="out/features.parquet")
        ...
        sink.finalize()
        df = sink.to_dataframe()
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None,
                 parquet_path: Optional[Union[str, Path]] = None,
                 compression: str = "snappy"):
        super().__init__()
        self.db_path = Path(db_path) if db_path else None
        self.parquet_path = Path(parquet_path) if parquet_path else None
        self.compression = None if compression == "none" else compression
        self._frames = []
        self._rows = None
        self._identifier = None
        self.db_conn = None
        if self.db_path is not None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.db_conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            logger.info("Database initialized: %s", self.db_path)

    def begin_recording(self, identifier: str) -> None:
        if self._rows is not None:
            raise RuntimeError(f"Recording {self._identifier} was not ended")
        self._identifier = identifier
        self._rows = []

    def _append(self, scope: str, window: Optional[Window], name: str, values) -> None:
        if self._rows is None:
            raise RuntimeError("emit called outside begin_recording/end_recording")
        base = {
            "recording": self._identifier,
            "scope": scope,
            "window": window.index if window is not None else None,
            "start_time": window.start_time if window is not None else None,
            "end_time": window.end_time if window is not None else None,
            "descriptor": name,
        }
        if values is UNAVAILABLE:
            self._rows.append({**base, "dimension": 0, "value": np.nan, "available": False})
            return
        for dimension, value in enumerate(values):
            self._rows.append({**base, "dimension": dimension, "value": float(value),
                               "available": True})

    def emit_window_value(self, window: Window, name: str, values) -> None:
        self._append("window", window, name, values)

    def emit_overall_value(self, name: str, values) -> None:
        self._append("overall", None, name, values)

    def end_recording(self) -> None:
        df = pd.DataFrame(self._rows, columns=COLUMNS)
        df["window"] = df["window"].astype("Int64")
        self._frames.append(df)
        if self.db_conn is not None and len(df):
            df.to_sql("features", self.db_conn, if_exists="append", index=False)
            self.db_conn.commit()
        logger.debug("Stored %d rows for %s", len(df), self._identifier)
        self._rows = None
        self._identifier = None

    def to_dataframe(self) -> pd.DataFrame:
        """All rows emitted so far."""
        with self.lock:
            if not self._frames:
                return pd.DataFrame(columns=COLUMNS)
            return pd.concat(self._frames, ignore_index=True)

    def finalize(self) -> None:
        """Export to Parquet (if configured) and close the database."""
        with self.lock:
            if self.parquet_path is not None:
                df = self.to_dataframe()
                if len(df):
                    self.parquet_path.parent.mkdir(parents=True, exist_ok=True)
                    df.to_parquet(self.parquet_path, engine="pyarrow",
                                  compression=self.compression, index=False)
                    logger.info("Exported %d rows to: %s", len(df), self.parquet_path)
                else:
                    logger.warning("No results to export")
            if self.db_conn is not None:
                self.db_conn.close()
                self.db_conn = None
                logger.info("Database connection closed")
