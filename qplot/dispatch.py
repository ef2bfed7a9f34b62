from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
import logging
from typing import Any

from qplot.core.backends import Backend
from qplot.errors import StyleLookupError
from qplot.styles import StyleTable, is_canvas_style, is_object_style

LOGGER = logging.getLogger(__name__)


class ArgumentRole(Enum):
    CANVAS_STYLE = "canvas_style"
    OBJECT_STYLE = "object_style"
    DUAL_STYLE = "dual_style"
    PLOTTABLE = "plottable"


def classify_argument(arg: Any, backend: Backend) -> ArgumentRole:
    canvas = is_canvas_style(arg, backend)
    obj = is_object_style(arg, backend)
    if canvas and obj:
        return ArgumentRole.DUAL_STYLE
    if canvas:
        return ArgumentRole.CANVAS_STYLE
    if obj:
        return ArgumentRole.OBJECT_STYLE
    return ArgumentRole.PLOTTABLE


def process_arguments(args: Iterable[Any], *, channel: Any, table: StyleTable, backend: Backend) -> None:
    """Apply ``args`` left to right against ``channel``.

    Styles only affect the arguments after them. Object styles are recorded in
    ``table``; plottable objects are drawn by the style currently selected for
    their kind.
    """
    for arg in args:
        role = classify_argument(arg, backend)
        if role is ArgumentRole.PLOTTABLE:
            draw_object(arg, channel=channel, table=table, backend=backend)
            continue
        if role is not ArgumentRole.OBJECT_STYLE:
            arg.draw_canvas(channel)
        if role is not ArgumentRole.CANVAS_STYLE:
            if table.update(arg) == 0:
                LOGGER.debug("%s selects no style slot among %s", type(arg).__name__, table.kinds)


def draw_object(obj: Any, *, channel: Any, table: StyleTable, backend: Backend) -> None:
    kind = type(obj)
    if not table.has_slot(kind):
        raise StyleLookupError(
            f"{kind.__name__} is neither a style for backend {backend.name!r} nor a registered plottable kind"
        )
    style = table.active_for(kind)
    if not is_object_style(style, backend):
        raise StyleLookupError(
            f"active style {type(style).__name__} cannot draw {kind.__name__} on backend {backend.name!r}"
        )
    style.draw_object(channel, obj)
