from __future__ import annotations

import logging
from typing import Any, ClassVar

from qplot.core.backends import Backend
from qplot.styles import Style

LOGGER = logging.getLogger(__name__)

DATA_LIST_NAME = "qp_data_in"


class PythonBootstrap(Style):
    """Header preamble that opens the data pipe inside a python child.

    For every data channel the child closes its inherited copy of the write
    end and appends a binary reader for the read end to ``qp_data_in``.
    """

    canvas_backends: ClassVar[frozenset[str] | None] = frozenset({"python"})

    def draw_canvas(self, channel: Any) -> None:
        out = channel.out()
        out.write(
            "# This header has been added by qplot. See qplot/bootstrap.py\n",
            "import os\n",
            f"{DATA_LIST_NAME} = list()\n",
            "\n",
        )
        for index in range(channel.num_channels):
            fd_r, fd_w = channel.data_fds(index)
            if fd_r < 0 or fd_w < 0:
                LOGGER.warning("data channel %d has no pipe; skipping its bootstrap block", index)
                continue
            out.write(
                f"os.close({fd_w})\n",
                f"{DATA_LIST_NAME}.append(os.fdopen({fd_r}, 'rb'))\n",
                "\n",
            )

    def __repr__(self) -> str:
        return "PythonBootstrap()"


_BOOTSTRAPS: dict[str, Any] = {"python": PythonBootstrap()}


def bootstrap_for(backend: Backend) -> tuple[Any, ...]:
    if not backend.requires_bootstrap:
        return ()
    try:
        return (_BOOTSTRAPS[backend.name],)
    except KeyError:
        raise ValueError(f"backend {backend.name!r} requires a bootstrap but none is registered") from None
