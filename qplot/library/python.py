from __future__ import annotations

import math
from typing import Any

import numpy as np

from qplot.bootstrap import DATA_LIST_NAME
from qplot.core.sinks import ScriptStream
from qplot.series import Point, Series

PYPLOT_IMPORT = "import matplotlib.pyplot as plt"
NUMPY_IMPORT = "import numpy as np"


def number(value: float) -> str:
    value = float(value)
    if math.isfinite(value):
        return repr(value)
    return f"float({str(value)!r})"


def title(out: ScriptStream, text: str) -> None:
    out.line(PYPLOT_IMPORT)
    out.line(f"plt.title({text!r})")


def show(out: ScriptStream) -> None:
    out.line(PYPLOT_IMPORT)
    out.line("plt.show()")


def select_points(out: ScriptStream, size: float) -> None:
    out.line(PYPLOT_IMPORT)
    out.line("plt.rcParams['lines.markersize'] = ", number(size))


def select_lines(out: ScriptStream, width: float) -> None:
    out.line(PYPLOT_IMPORT)
    out.line("plt.rcParams['lines.linewidth'] = ", number(width))


def send_array(channel: Any, name: str, values: np.ndarray, *, index: int = 0) -> None:
    """Stream ``values`` as float64 over the data pipe and bind them to ``name`` in the child.

    The child only starts reading once its whole script has arrived, which
    happens after the parent closes stdin. Everything sent during one
    ``plot()`` call must therefore fit in the OS pipe buffer (typically
    64 KiB, about 4k samples per x/y pair); larger payloads block the parent
    in ``write_data`` forever.
    """
    arr = np.ascontiguousarray(values, dtype=np.float64)
    channel.out().line(
        f"{name} = np.frombuffer({DATA_LIST_NAME}[{index}].read({arr.nbytes}), dtype=np.float64)"
    )
    channel.write_data(arr)


def _label_kwarg(series: Series) -> str:
    return "" if series.label is None else f", label={series.label!r}"


def scatter(channel: Any, obj: Point | Series) -> None:
    out = channel.out()
    out.line(PYPLOT_IMPORT)
    if isinstance(obj, Point):
        out.line(f"plt.scatter([{number(obj.x)}], [{number(obj.y)}])")
        return
    out.line(NUMPY_IMPORT)
    xs, ys = obj.finite_xy()
    send_array(channel, "_qp_x", xs)
    send_array(channel, "_qp_y", ys)
    out.line(f"plt.scatter(_qp_x, _qp_y{_label_kwarg(obj)})")


def lines(channel: Any, obj: Point | Series) -> None:
    out = channel.out()
    out.line(PYPLOT_IMPORT)
    if isinstance(obj, Point):
        out.line(f"plt.plot([{number(obj.x)}], [{number(obj.y)}])")
        return
    out.line(NUMPY_IMPORT)
    send_array(channel, "_qp_x", obj.x)
    send_array(channel, "_qp_y", obj.gapped_y())
    out.line(f"plt.plot(_qp_x, _qp_y{_label_kwarg(obj)})")
