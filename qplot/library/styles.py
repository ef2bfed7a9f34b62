from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, ClassVar

from qplot.errors import StyleLookupError
from qplot.library import gnuplot, python
from qplot.styles import Style

DRAWING_BACKENDS = frozenset({"python", "gnuplot"})

_EMITTERS: dict[str, ModuleType] = {"python": python, "gnuplot": gnuplot}


def emitter_for(channel: Any) -> ModuleType:
    name = channel.backend.name
    try:
        return _EMITTERS[name]
    except KeyError:
        raise StyleLookupError(f"no script emitter for backend {name!r}") from None


@dataclass(frozen=True)
class Title(Style):
    text: str

    canvas_backends: ClassVar[frozenset[str] | None] = DRAWING_BACKENDS

    def draw_canvas(self, channel: Any) -> None:
        emitter_for(channel).title(channel.out(), self.text)


@dataclass(frozen=True)
class Show(Style):
    canvas_backends: ClassVar[frozenset[str] | None] = DRAWING_BACKENDS

    def draw_canvas(self, channel: Any) -> None:
        emitter_for(channel).show(channel.out())


@dataclass(frozen=True)
class Scatter(Style):
    """Markers only. Selecting it also sets the backend's marker size."""

    size: float = 6.0

    backends: ClassVar[frozenset[str] | None] = DRAWING_BACKENDS

    def draw_canvas(self, channel: Any) -> None:
        emitter_for(channel).select_points(channel.out(), self.size)

    def draw_object(self, channel: Any, obj: Any) -> None:
        emitter = emitter_for(channel)
        if emitter is gnuplot:
            gnuplot.draw(channel, obj, with_=f"points ps {gnuplot.number(self.size)}")
        else:
            python.scatter(channel, obj)


@dataclass(frozen=True)
class Lines(Style):
    """Connected polyline, broken at non-finite samples."""

    width: float = 1.5

    backends: ClassVar[frozenset[str] | None] = DRAWING_BACKENDS

    def draw_canvas(self, channel: Any) -> None:
        emitter_for(channel).select_lines(channel.out(), self.width)

    def draw_object(self, channel: Any, obj: Any) -> None:
        emitter = emitter_for(channel)
        if emitter is gnuplot:
            gnuplot.draw(channel, obj, with_=f"lines lw {gnuplot.number(self.width)}")
        else:
            python.lines(channel, obj)


@dataclass(frozen=True)
class Hidden(Style):
    """Selects nothing and draws nothing; objects under it are skipped."""

    def draw_object(self, channel: Any, obj: Any) -> None:
        return None
