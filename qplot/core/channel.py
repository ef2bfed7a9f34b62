from __future__ import annotations

from collections.abc import Mapping
import logging
import os
from pathlib import Path
import subprocess
from typing import BinaryIO

import numpy as np

from ..errors import ChannelError, ChannelSpawnError
from .backends import Backend
from .sinks import ScriptStream, StreamSink

LOGGER = logging.getLogger(__name__)


class ProcessChannel:
    """One external interpreter process plus its script stream and data pipe.

    The child is started through the shell with stdin bound to a text stream.
    A separate pipe carries bulk bytes: the parent keeps the write end, the
    child inherits both ends under the same descriptor numbers so bootstrap
    code can close the write end and open the read end on its side.

    Closing stdin is what tells the interpreter the script is complete, so a
    channel is used for exactly one script and then replaced via ``reopen()``.
    """

    num_channels = 1

    def __init__(
        self,
        backend: Backend,
        *,
        pin_fds: tuple[int, int] | None = None,
        env: Mapping[str, str] | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        self._backend = backend
        self._env = dict(env) if env is not None else None
        self._cwd = cwd
        self._closed = False
        self._fd_r, self._fd_w = _open_pipe(pin_fds)
        inherited = tuple(fd for fd in (self._fd_r, self._fd_w) if fd >= 0)
        try:
            self._proc = subprocess.Popen(
                backend.cmd,
                shell=True,
                stdin=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                pass_fds=inherited,
                env=self._env,
                cwd=None if cwd is None else str(cwd),
            )
        except OSError as exc:
            for fd in inherited:
                _close_logged(fd, "data pipe end")
            raise ChannelSpawnError(f"failed to spawn backend {backend.name!r} ({backend.cmd}): {exc}") from exc
        if self._proc.stdin is None:
            raise ChannelSpawnError(f"backend {backend.name!r} started without a stdin stream")
        # The read end belongs to the child; only its number is kept for bootstrap code.
        if self._fd_r >= 0:
            _close_logged(self._fd_r, "data pipe read end")
        self._stdin = StreamSink(self._proc.stdin)
        self._out = ScriptStream(self._stdin)
        self._data_out: BinaryIO | None = None
        if self._fd_w >= 0:
            self._data_out = open(self._fd_w, "wb", buffering=0, closefd=False)
        LOGGER.debug(
            "spawned %s pid=%s cmd=%r data pipe r=%d w=%d",
            backend.name,
            self._proc.pid,
            backend.cmd,
            self._fd_r,
            self._fd_w,
        )

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        return self._proc.returncode

    @property
    def fd_r(self) -> int:
        return self._fd_r

    @property
    def fd_w(self) -> int:
        return self._fd_w

    def data_fds(self, index: int = 0) -> tuple[int, int]:
        if not 0 <= index < self.num_channels:
            raise IndexError(f"data channel index out of range: {index}")
        return self._fd_r, self._fd_w

    def out(self) -> ScriptStream:
        self._require_open()
        return self._out

    def data_out(self) -> BinaryIO:
        self._require_open()
        if self._data_out is None:
            raise ChannelError(f"data pipe unavailable for backend {self._backend.name!r}")
        return self._data_out

    def write(self, *parts: object) -> ScriptStream:
        return self.out().write(*parts)

    def line(self, *parts: object) -> ScriptStream:
        return self.out().line(*parts)

    def write_data(self, payload: bytes | bytearray | memoryview | np.ndarray) -> int:
        """Write raw bytes to the data pipe; arrays are sent in native byte order.

        Returns the count the OS accepted, which may be short.
        """
        stream = self.data_out()
        if isinstance(payload, np.ndarray):
            payload = np.ascontiguousarray(payload).tobytes()
        written = stream.write(payload)
        return 0 if written is None else int(written)

    def close(self) -> None:
        """Close the data pipe, then stdin, then wait for the process to exit.

        Failures are logged and otherwise ignored. May block for as long as the
        child keeps running after its input ends.
        """
        if self._closed:
            return
        self._closed = True
        if self._data_out is not None:
            self._data_out.close()
            self._data_out = None
        if self._fd_w >= 0:
            _close_logged(self._fd_w, "data pipe write end")
        stdin = self._proc.stdin
        if stdin is not None:
            try:
                stdin.close()
            except BrokenPipeError:
                LOGGER.warning("%s exited before its script was flushed", self._backend.name)
            except OSError as exc:
                LOGGER.warning("closing %s stdin failed: %s", self._backend.name, exc)
        try:
            code = self._proc.wait()
        except OSError as exc:
            LOGGER.warning("waiting for %s pid=%s failed: %s", self._backend.name, self._proc.pid, exc)
            return
        LOGGER.debug("%s pid=%s exited with %s", self._backend.name, self._proc.pid, code)

    def reopen(self) -> "ProcessChannel":
        """Tear this channel down completely and return a fresh one for the same backend."""
        pins = (self._fd_r, self._fd_w) if self._fd_r >= 0 and self._fd_w >= 0 else None
        self.close()
        return type(self)(self._backend, pin_fds=pins, env=self._env, cwd=self._cwd)

    def __enter__(self) -> "ProcessChannel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __copy__(self) -> "ProcessChannel":
        raise ChannelError("process channels cannot be copied")

    def __deepcopy__(self, memo: dict) -> "ProcessChannel":
        raise ChannelError("process channels cannot be copied")

    def __reduce__(self):
        raise ChannelError("process channels cannot be pickled")

    def _require_open(self) -> None:
        if self._closed:
            raise ChannelError(f"channel for backend {self._backend.name!r} is closed")


def _open_pipe(pin_fds: tuple[int, int] | None) -> tuple[int, int]:
    try:
        fd_r, fd_w = os.pipe()
    except OSError as exc:
        LOGGER.error("pipe() failed, data channel disabled: %s", exc)
        return -1, -1
    if pin_fds is None:
        return fd_r, fd_w
    want_r, want_w = pin_fds
    if want_r == fd_w:
        fd_w = _pin_descriptor(fd_w, want_w)
        fd_r = _pin_descriptor(fd_r, want_r)
    else:
        fd_r = _pin_descriptor(fd_r, want_r)
        fd_w = _pin_descriptor(fd_w, want_w)
    return fd_r, fd_w


def _pin_descriptor(fd: int, wanted: int) -> int:
    if fd == wanted or wanted < 0:
        return fd
    if _fd_in_use(wanted):
        LOGGER.warning("descriptor %d is in use; data pipe end stays on %d", wanted, fd)
        return fd
    os.dup2(fd, wanted, inheritable=False)
    os.close(fd)
    return wanted


def _fd_in_use(fd: int) -> bool:
    try:
        os.fstat(fd)
    except OSError:
        return False
    return True


def _close_logged(fd: int, what: str) -> None:
    try:
        os.close(fd)
    except OSError as exc:
        LOGGER.warning("closing %s (fd %d) failed: %s", what, fd, exc)
