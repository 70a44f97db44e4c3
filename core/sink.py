"""
Serialized, best-effort result log.

Each entry is written with a single call while holding the sink lock, so
concurrent workers never interleave partial lines. I/O failures are
counted and otherwise ignored; the scan must not depend on the log.
"""

from __future__ import annotations

import datetime as dt
import logging
import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

log = logging.getLogger(__name__)


def _timestamp() -> str:
    return dt.datetime.now().astimezone().isoformat(timespec="seconds")


def ensure_parent_dir(path: str) -> None:
    """Create the log directory if needed; failure only logs a warning."""
    parent = Path(path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log.warning("could not create log directory %s: %s", parent, exc)


class ResultSink:
    def __init__(self, path: Optional[str], echo: bool = True, stream: Optional[TextIO] = None):
        self.path = Path(path) if path else None
        self.echo = echo
        self._stream = stream
        self._lock = threading.Lock()
        self.failures = 0
        self.last_error: Optional[str] = None

    def write(self, line: str, echo: bool = True) -> None:
        entry = f"{_timestamp()} | {line}\n"
        with self._lock:
            if self.echo and echo:
                self._print(line)
            self._append(entry)

    def mark(self, line: str) -> None:
        """Log-only entry (scan start/finish markers)."""
        self.write(line, echo=False)

    def _print(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        try:
            stream.write(line + "\n")
            stream.flush()
        except (OSError, ValueError) as exc:
            self._record_failure(exc)

    def _append(self, entry: str) -> None:
        if not self.path:
            return
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(entry)
        except OSError as exc:
            self._record_failure(exc)

    def _record_failure(self, exc: Exception) -> None:
        self.failures += 1
        self.last_error = str(exc)
        log.debug("result sink write failed: %s", exc)
