from __future__ import annotations

from collections.abc import Callable, Iterable
import logging
from typing import Any

from qplot.bootstrap import bootstrap_for
from qplot.core.backends import Backend, backend_named
from qplot.core.channel import ProcessChannel
from qplot.core.config import resolve_backend
from qplot.core.sinks import BufferSink
from qplot.dispatch import process_arguments
from qplot.errors import ChannelError
from qplot.styles import DEFAULT_REGISTRY, StyleRegistry, StyleTable

LOGGER = logging.getLogger(__name__)


class Qplot:
    """Turns argument sequences into scripts for one external interpreter.

    ``header_args`` are captured once and replayed before every ``plot()``.
    Each ``plot()`` writes one complete script and then replaces the process,
    so calls never share interpreter state beyond the header.

    Not thread-safe: one adapter drives one channel at a time.
    """

    def __init__(
        self,
        backend: Backend | str,
        kinds: Iterable[type],
        *header_args: Any,
        registry: StyleRegistry | None = None,
        channel_factory: Callable[[Backend], Any] | None = None,
        configure: bool = True,
    ) -> None:
        if isinstance(backend, str):
            backend = backend_named(backend)
        self._backend = resolve_backend(backend) if configure else backend
        self._registry = registry or DEFAULT_REGISTRY
        self._styles = self._registry.build_table(kinds)
        self._styles_header = self._styles.copy()
        self._header = BufferSink()
        factory = channel_factory or ProcessChannel
        self._channel: Any = factory(self._backend)
        try:
            self.add_to_header(*bootstrap_for(self._backend))
            self.add_to_header(*header_args)
        except BaseException:
            self.close()
            raise

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def header(self) -> str:
        return self._header.getvalue()

    @property
    def styles(self) -> StyleTable:
        return self._styles.copy()

    @property
    def baseline_styles(self) -> StyleTable:
        return self._styles_header.copy()

    @property
    def channel(self) -> Any:
        return self._require_channel()

    @property
    def closed(self) -> bool:
        return self._channel is None

    def plot(self, *args: Any) -> None:
        channel = self._require_channel()
        try:
            channel.out().write(self._header.getvalue())
            self._styles = self._styles_header.copy()
            process_arguments(args, channel=channel, table=self._styles, backend=self._backend)
        finally:
            self._styles = self._styles_header.copy()
            self._respawn()

    def add_to_header(self, *args: Any) -> None:
        """Capture ``args`` into the header instead of sending them live.

        The baseline that ``plot()`` resets to is the table as it stood before
        these arguments; object styles given here only govern objects later in
        the same header.
        """
        channel = self._require_channel()
        self._styles_header = self._styles.copy()
        try:
            with channel.out().redirect(self._header):
                process_arguments(args, channel=channel, table=self._styles, backend=self._backend)
        finally:
            self._styles = self._styles_header.copy()

    def close(self) -> None:
        channel = self._channel
        if channel is None:
            return
        self._channel = None
        channel.close()

    def __enter__(self) -> "Qplot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _respawn(self) -> None:
        old = self._channel
        # No channel is active while the old process winds down.
        self._channel = None
        self._channel = old.reopen()
        LOGGER.debug("respawned %s channel", self._backend.name)

    def _require_channel(self) -> Any:
        if self._channel is None:
            raise ChannelError(f"qplot adapter for backend {self._backend.name!r} has no live channel")
        return self._channel
