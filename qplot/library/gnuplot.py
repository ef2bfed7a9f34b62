from __future__ import annotations

import itertools
from typing import Any

from qplot.core.sinks import ScriptStream
from qplot.series import Point, Series

# Set by the first plot clause of a script; later clauses replot onto it.
PLOTTED_FLAG = "qp_plotted"

# Datablock names only need to be unique within one script.
_BLOCK_IDS = itertools.count(1)


def quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def number(value: float) -> str:
    return repr(float(value))


def title(out: ScriptStream, text: str) -> None:
    out.line("set title ", quote(text))


def show(out: ScriptStream) -> None:
    out.line("pause mouse close")


def select_points(out: ScriptStream, size: float) -> None:
    out.line("set style data points")
    out.line("set pointsize ", number(size))


def select_lines(out: ScriptStream, width: float) -> None:
    out.line("set style data lines")
    out.line("set linetype 1 linewidth ", number(width))


def _legend(obj: Point | Series) -> str:
    label = getattr(obj, "label", None)
    return "notitle" if label is None else f"title {quote(label)}"


def _write_block(out: ScriptStream, name: str, obj: Point | Series) -> None:
    out.line(name, " << EOD")
    if isinstance(obj, Point):
        out.line(number(obj.x), " ", number(obj.y))
    else:
        for i, (start, stop) in enumerate(obj.runs()):
            if i:
                # A blank line breaks the curve across non-finite samples.
                out.line()
            for xv, yv in zip(obj.x[start:stop].tolist(), obj.y[start:stop].tolist()):
                out.line(number(xv), " ", number(yv))
    out.line("EOD")


def draw(channel: Any, obj: Point | Series, *, with_: str) -> None:
    """Store ``obj`` in a datablock and add it to the current graph.

    ``with_`` is the full plotting style, e.g. ``"lines lw 2.0"``. The first
    object of a script issues ``plot``; every later one issues ``replot`` so
    the graph accumulates all objects of the call.
    """
    out = channel.out()
    name = f"$qp{next(_BLOCK_IDS)}"
    _write_block(out, name, obj)
    clause = f"{name} with {with_} {_legend(obj)}"
    out.line(f'if (exists("{PLOTTED_FLAG}")) {{')
    out.line("    replot ", clause)
    out.line("} else {")
    out.line("    plot ", clause)
    out.line(f"    {PLOTTED_FLAG} = 1")
    out.line("}")
