from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import io
import logging
from typing import Protocol, TextIO

LOGGER = logging.getLogger(__name__)


class OutputSink(Protocol):
    def write(self, text: str) -> None:
        ...


class BufferSink:
    """In-memory sink; holds the captured header text."""

    def __init__(self) -> None:
        self._buf = io.StringIO()

    def write(self, text: str) -> None:
        self._buf.write(text)

    def getvalue(self) -> str:
        return self._buf.getvalue()

    def __len__(self) -> int:
        return self._buf.tell()


class StreamSink:
    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._broken = False

    @property
    def broken(self) -> bool:
        return self._broken

    def write(self, text: str) -> None:
        if self._broken:
            return
        try:
            self._stream.write(text)
        except BrokenPipeError:
            # The child exited before reading its script; nothing more can be delivered.
            self._broken = True
            LOGGER.warning("command stream closed by child; dropping further script text")

    def flush(self) -> None:
        if self._broken:
            return
        try:
            self._stream.flush()
        except BrokenPipeError:
            self._broken = True
            LOGGER.warning("command stream closed by child during flush")


class ScriptStream:
    """Text stream handed to styles.

    Every value is written as ``str(value)`` to whichever sink is active, so the
    same style code serves both live output and header capture.
    """

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink

    @property
    def sink(self) -> OutputSink:
        return self._sink

    def write(self, *parts: object) -> "ScriptStream":
        for part in parts:
            self._sink.write(part if isinstance(part, str) else str(part))
        return self

    def line(self, *parts: object) -> "ScriptStream":
        return self.write(*parts, "\n")

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is not None:
            flush()

    @contextmanager
    def redirect(self, sink: OutputSink) -> Iterator[OutputSink]:
        previous = self._sink
        self._sink = sink
        try:
            yield sink
        finally:
            self._sink = previous
