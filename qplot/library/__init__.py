from qplot.series import Point, Series
from qplot.styles import DEFAULT_REGISTRY

from .styles import DRAWING_BACKENDS, Hidden, Lines, Scatter, Show, Title, emitter_for

DEFAULT_REGISTRY.register(Point, Scatter, Lines, Hidden)
DEFAULT_REGISTRY.register(Series, Lines, Scatter, Hidden)

__all__ = [
    "DRAWING_BACKENDS",
    "Hidden",
    "Lines",
    "Scatter",
    "Show",
    "Title",
    "emitter_for",
]
