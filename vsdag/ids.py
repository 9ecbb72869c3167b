"""Monotonic identifiers for DAG map children, persisted to a file."""

from __future__ import annotations

import os
import threading
from pathlib import Path

_U128_LIMIT = 1 << 128


class IdCounter:
    """A counter stored in a file; each call to next() yields a fresh number."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        try:
            text = self._path.read_text(encoding="ascii")
        except FileNotFoundError:
            self._value = 0
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._store()
            return
        try:
            value = int(text.strip())
        except ValueError as err:
            raise ValueError(f"corrupt id counter file: {self._path}") from err
        if not 0 <= value < _U128_LIMIT:
            raise ValueError(f"id counter out of range in {self._path}")
        self._value = value

    def _store(self) -> None:
        self._path.write_text(str(self._value), encoding="ascii")

    def next(self) -> int:
        """Advance the counter and return its new value."""
        with self._lock:
            if self._value + 1 >= _U128_LIMIT:
                raise OverflowError("id counter exhausted")
            self._value += 1
            self._store()
            return self._value


_default_lock = threading.Lock()
_default_counter: IdCounter | None = None


def _custom_dir() -> Path:
    base = os.environ.get("VSDAG_BASE_DIR") or Path.home() / ".vsdag"
    directory = Path(base) / "__CUSTOM__"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def gen_dag_map_id_num() -> int:
    """Return the next process-wide DAG map id number."""
    global _default_counter
    with _default_lock:
        if _default_counter is None:
            _default_counter = IdCounter(_custom_dir() / "id_num")
        counter = _default_counter
    return counter.next()