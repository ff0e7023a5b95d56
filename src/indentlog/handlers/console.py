"""Console sink helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any

from .sink import Sink

__all__ = ["ConsoleSinkConfig", "build_console_sink"]


@dataclass(slots=True)
class ConsoleSinkConfig:
    """Configuration for console sinks."""

    stream: str = "stderr"


def build_console_sink(config: ConsoleSinkConfig | None = None) -> Sink:
    """Construct a :class:`Sink` over stdout or stderr."""

    cfg = config or ConsoleSinkConfig()
    stream: Any
    if cfg.stream == "stdout":
        stream = sys.stdout
    elif cfg.stream == "stderr":
        stream = sys.stderr
    else:
        raise ValueError(f"Unknown console stream: {cfg.stream}")
    return Sink(_ConsoleWriter(stream))


class _ConsoleWriter:
    """Write rendered bytes to a text stream's binary buffer.

    Text already queued on the stream (``print`` output, other handlers) is
    flushed first so console output stays in call order. Streams without a
    binary buffer are written to as text.
    """

    def __init__(self, stream: Any) -> None:
        self.stream = stream

    def write(self, data: bytes) -> int:
        buffer = getattr(self.stream, "buffer", None)
        if buffer is None:
            return self.stream.write(data.decode("utf-8"))
        self.stream.flush()
        return buffer.write(data)

    def flush(self) -> None:
        buffer = getattr(self.stream, "buffer", None)
        (buffer or self.stream).flush()

    def __repr__(self) -> str:
        return f"_ConsoleWriter({self.stream!r})"
