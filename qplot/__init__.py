from qplot.adapter import Qplot
from qplot.adapters.normalize import normalize_xy
from qplot.core import CAT, GNUPLOT, NULL, PYTHON, Backend, ProcessChannel
from qplot.dispatch import ArgumentRole, classify_argument, process_arguments
from qplot.errors import ChannelError, ChannelSpawnError, PlotDataError, QplotError, StyleLookupError
from qplot.library import Hidden, Lines, Scatter, Show, Title
from qplot.series import Point, Series
from qplot.styles import DEFAULT_REGISTRY, Style, StyleRegistry, StyleTable, has_styles

__all__ = [
    "ArgumentRole",
    "Backend",
    "CAT",
    "ChannelError",
    "ChannelSpawnError",
    "DEFAULT_REGISTRY",
    "GNUPLOT",
    "Hidden",
    "Lines",
    "NULL",
    "PYTHON",
    "PlotDataError",
    "Point",
    "ProcessChannel",
    "Qplot",
    "QplotError",
    "Scatter",
    "Series",
    "Show",
    "Style",
    "StyleLookupError",
    "StyleRegistry",
    "StyleTable",
    "Title",
    "classify_argument",
    "has_styles",
    "normalize_xy",
    "process_arguments",
]
