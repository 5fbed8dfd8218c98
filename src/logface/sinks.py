"""
Log sink abstractions and concrete implementations.

A sink is the destination a backend writes rendered entries to. One sink is
opened per constructed logger and shared by every logger derived from it.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import sys
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .options import LoggerOptions
from .types import OUTPUT_STDOUT

_log = logging.getLogger(__name__)

BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S.%f"
MEGABYTE = 1024 * 1024


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    ``write`` is best-effort: failures are reported once through the
    library's own logger and never raised into the caller.
    ``flush`` propagates genuine flush failures.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._write_failed = False

    def write(self, text: str) -> None:
        """Write ``text`` as-is; callers supply the line terminator."""
        with self._lock:
            try:
                self._write(text)
            except (OSError, ValueError) as e:
                if not self._write_failed:
                    self._write_failed = True
                    _log.warning("Log sink %s failed to write: %s", self.describe(), e)

    def flush(self) -> None:
        with self._lock:
            self._flush()

    @abstractmethod
    def _write(self, text: str) -> None: ...

    @abstractmethod
    def _flush(self) -> None: ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...

    @abstractmethod
    def describe(self) -> str: ...


class StdoutSink(BaseSink):
    """Writes to the interpreter's current ``sys.stdout``."""

    def _write(self, text: str) -> None:
        sys.stdout.write(text)

    def _flush(self) -> None:
        sys.stdout.flush()

    def close(self) -> None:
        pass

    def describe(self) -> str:
        return OUTPUT_STDOUT


class RotatingFileSink(BaseSink):
    """Local file sink with size-based rotation.

    When a write would grow the file past ``max_size_mb``, the file is renamed
    to ``<stem>-<timestamp><suffix>`` and a fresh one is opened. Backups
    beyond ``max_backups`` or older than ``max_age_days`` are removed;
    with ``compress`` they are gzipped. Zero disables the respective limit.
    """

    def __init__(
        self,
        path: str | Path,
        max_size_mb: int = 100,
        max_age_days: int = 7,
        max_backups: int = 10,
        compress: bool = False,
    ) -> None:
        super().__init__()
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max(0, max_size_mb) * MEGABYTE
        self._max_age_days = max(0, max_age_days)
        self._max_backups = max(0, max_backups)
        self._compress = compress
        self._file = open(self._path, "a", encoding="utf-8")
        self._size = self._path.stat().st_size

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, text: str) -> None:
        data_len = len(text.encode("utf-8"))
        if self._max_bytes and self._size > 0 and self._size + data_len > self._max_bytes:
            self._rotate()
        self._file.write(text)
        self._file.flush()
        self._size += data_len

    def _flush(self) -> None:
        self._file.flush()
        os.fsync(self._file.fileno())

    def _backup_name(self) -> Path:
        stamp = datetime.now().strftime(BACKUP_TIME_FORMAT)[:-3]
        return self._path.with_name(f"{self._path.stem}-{stamp}{self._path.suffix}")

    def _rotate(self) -> None:
        self._file.close()
        backup = self._backup_name()
        try:
            self._path.rename(backup)
        except OSError as e:
            # keep appending to the current file; the next write retries
            _log.warning("Failed to rotate log %s: %s", self._path, e)
            self._file = open(self._path, "a", encoding="utf-8")
            self._size = self._path.stat().st_size
            return
        self._file = open(self._path, "a", encoding="utf-8")
        self._size = 0
        if self._compress:
            self._gzip(backup)
        self._prune()

    @staticmethod
    def _gzip(src: Path) -> None:
        dst = src.with_name(src.name + ".gz")
        try:
            with open(src, "rb") as f_in, gzip.open(dst, "wb") as f_out:
                shutil.copyfileobj(f_in, f_out)
            src.unlink()
        except OSError as e:
            _log.warning("Failed to compress rotated log %s: %s", src, e)

    def _backup_time(self, name: str) -> Optional[datetime]:
        """Timestamp of a backup of this file, None for any other name."""
        if name.endswith(".gz"):
            name = name[: -len(".gz")]
        prefix = f"{self._path.stem}-"
        suffix = self._path.suffix
        if not name.startswith(prefix) or not name.endswith(suffix):
            return None
        stamp = name[len(prefix) : len(name) - len(suffix)]
        try:
            return datetime.strptime(stamp, BACKUP_TIME_FORMAT)
        except ValueError:
            return None

    def backups(self) -> List[Path]:
        """Rotated files, newest first."""
        found = []
        for p in self._path.parent.iterdir():
            stamp = self._backup_time(p.name)
            if stamp is not None and p.is_file():
                found.append((stamp, p))
        found.sort(reverse=True)
        return [p for _, p in found]

    def _prune(self) -> None:
        backups = self.backups()
        doomed = []
        if self._max_backups:
            doomed.extend(backups[self._max_backups :])
            backups = backups[: self._max_backups]
        if self._max_age_days:
            cutoff = time.time() - self._max_age_days * 86400
            doomed.extend(p for p in backups if p.stat().st_mtime < cutoff)
        for p in doomed:
            try:
                p.unlink()
            except OSError as e:
                _log.warning("Failed to remove old log %s: %s", p, e)

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()

    def describe(self) -> str:
        return str(self._path)


def open_sink(options: LoggerOptions) -> BaseSink:
    """Resolve ``options.output_path`` into a sink."""
    if options.output_path == OUTPUT_STDOUT:
        return StdoutSink()
    return RotatingFileSink(
        options.output_path,
        max_size_mb=options.max_log_size,
        max_age_days=options.max_log_age_days,
        max_backups=options.max_log_files,
        compress=options.compress_logs,
    )
