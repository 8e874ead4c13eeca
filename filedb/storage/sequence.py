"""SequenceGenerator — persisted named counters for minting document IDs.

All counters live in one JSON object file, e.g. {"post": 42}. Each
allocation is a read-modify-write of the whole mapping under a single
in-process lock. There is no cross-process coordination: two processes
sharing the file can hand out the same value.
"""

from __future__ import annotations

import json
import math
import threading
from pathlib import Path
from typing import Any

import structlog

from filedb.exceptions import StorageIOError

logger = structlog.get_logger()


class SequenceGenerator:
    """Allocates strictly increasing integers per sequence name.

    Thread-safe within one process. After `next(name)` returns n, the
    persisted value for `name` is n.
    """

    def __init__(self, path: Path) -> None:
        self._lock = threading.Lock()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def next(self, name: str) -> int:
        """Increment the counter for `name` by one and return the new value."""
        with self._lock:
            counters = self._read()
            value = _as_int(counters.get(name, 0)) + 1
            counters[name] = value
            self._write(counters)

        logger.debug("Sequence allocated", sequence=name, value=value)
        return value

    def current(self, name: str) -> int:
        """Last value issued for `name`, 0 if none.

        Diagnostic read; allocation only goes through next().
        """
        with self._lock:
            return _as_int(self._read().get(name, 0))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        """Load the counter mapping; missing, empty or corrupt means no counters yet."""
        try:
            if not self._path.exists() or self._path.stat().st_size == 0:
                return {}
            raw = self._path.read_bytes()
        except OSError as exc:
            raise StorageIOError(
                f"Failed to read sequence file: {exc}", path=self._path
            ) from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "Corrupt sequence file, starting from zero",
                path=str(self._path),
                error=str(exc),
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Sequence file is not a JSON object, starting from zero",
                path=str(self._path),
            )
            return {}
        return data

    def _write(self, counters: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(counters, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise StorageIOError(
                f"Failed to write sequence file: {exc}", path=self._path
            ) from exc


def _as_int(raw: Any) -> int:
    # bool is an int subclass but never a valid counter
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    # json accepts NaN and Infinity
    if isinstance(raw, float) and not math.isfinite(raw):
        return 0
    return int(raw)
