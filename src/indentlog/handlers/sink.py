"""Lock-guarded byte sink shared by a family of formatters."""

from __future__ import annotations

import threading
from typing import Protocol

__all__ = ["ByteWriter", "Sink", "SinkWriteError"]


class ByteWriter(Protocol):
    def write(self, data: bytes, /) -> object: ...


class SinkWriteError(OSError):
    """Raised when the destination rejects a rendered record."""


class Sink:
    """Serialize whole-record writes to ``writer``.

    Every formatter derived from one root holds the same ``Sink`` so that
    concurrent records never interleave.
    """

    def __init__(self, writer: ByteWriter) -> None:
        self.writer = writer
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            try:
                self.writer.write(data)
            except (OSError, ValueError) as exc:
                raise SinkWriteError(f"failed to write log record: {exc}") from exc
            flush = getattr(self.writer, "flush", None)
            if not callable(flush):
                return
            try:
                flush()
            except (OSError, ValueError) as exc:
                raise SinkWriteError(f"failed to flush log sink: {exc}") from exc

    def __repr__(self) -> str:
        return f"Sink({self.writer!r})"
