from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar
import unittest

from qplot.core.backends import GNUPLOT, PYTHON
from qplot.core.sinks import BufferSink, ScriptStream
from qplot.dispatch import ArgumentRole, classify_argument, process_arguments
from qplot.errors import StyleLookupError
from qplot.styles import Style, StyleRegistry


class _RecordingChannel:
    def __init__(self, backend) -> None:
        self.backend = backend
        self.sink = BufferSink()
        self._out = ScriptStream(self.sink)

    def out(self) -> ScriptStream:
        return self._out

    @property
    def script(self) -> str:
        return self.sink.getvalue()


@dataclass(frozen=True)
class _Heading(Style):
    text: str

    def draw_canvas(self, channel) -> None:
        channel.out().line("heading ", self.text)


@dataclass(frozen=True)
class _Dots(Style):
    def draw_object(self, channel, obj) -> None:
        channel.out().line("dots ", obj.name)


@dataclass(frozen=True)
class _Bars(Style):
    def draw_canvas(self, channel) -> None:
        channel.out().line("select bars")

    def draw_object(self, channel, obj) -> None:
        channel.out().line("bars ", obj.name)


@dataclass(frozen=True)
class _GnuplotOnlyDots(Style):
    object_backends: ClassVar[frozenset[str] | None] = frozenset({"gnuplot"})

    def draw_object(self, channel, obj) -> None:
        channel.out().line("gdots ", obj.name)


@dataclass(frozen=True)
class _Cell:
    name: str


@dataclass(frozen=True)
class _Row:
    name: str


def _table():
    registry = StyleRegistry()
    registry.register(_Cell, _Dots, _Bars, _GnuplotOnlyDots)
    registry.register(_Row, _Bars, _Dots)
    return registry.build_table([_Cell, _Row])


class ClassifyArgumentTests(unittest.TestCase):
    def test_roles(self) -> None:
        self.assertIs(classify_argument(_Heading("t"), PYTHON), ArgumentRole.CANVAS_STYLE)
        self.assertIs(classify_argument(_Dots(), PYTHON), ArgumentRole.OBJECT_STYLE)
        self.assertIs(classify_argument(_Bars(), PYTHON), ArgumentRole.DUAL_STYLE)
        self.assertIs(classify_argument(_Cell("c"), PYTHON), ArgumentRole.PLOTTABLE)

    def test_backend_restricted_style_is_plottable_elsewhere(self) -> None:
        self.assertIs(classify_argument(_GnuplotOnlyDots(), GNUPLOT), ArgumentRole.OBJECT_STYLE)
        self.assertIs(classify_argument(_GnuplotOnlyDots(), PYTHON), ArgumentRole.PLOTTABLE)


class ProcessArgumentsTests(unittest.TestCase):
    def test_objects_use_default_style_without_directives(self) -> None:
        channel = _RecordingChannel(PYTHON)
        process_arguments([_Cell("a"), _Row("b")], channel=channel, table=_table(), backend=PYTHON)
        self.assertEqual(channel.script, "dots a\nbars b\n")

    def test_style_affects_only_following_arguments(self) -> None:
        channel = _RecordingChannel(PYTHON)
        table = _table()
        process_arguments(
            [_Cell("a"), _Bars(), _Cell("b"), _Dots(), _Cell("c"), _Row("d")],
            channel=channel,
            table=table,
            backend=PYTHON,
        )
        self.assertEqual(
            channel.script,
            "dots a\nselect bars\nbars b\ndots c\ndots d\n",
        )
        self.assertEqual(table.active_for(_Row), _Dots())

    def test_canvas_style_leaves_table_untouched(self) -> None:
        channel = _RecordingChannel(PYTHON)
        table = _table()
        before = table.snapshot()
        process_arguments([_Heading("T")], channel=channel, table=table, backend=PYTHON)
        self.assertEqual(channel.script, "heading T\n")
        self.assertEqual(table.snapshot(), before)

    def test_object_only_style_writes_nothing(self) -> None:
        channel = _RecordingChannel(PYTHON)
        table = _table()
        process_arguments([_Bars(), _Dots()], channel=channel, table=table, backend=PYTHON)
        self.assertEqual(channel.script, "select bars\n")
        self.assertEqual(table.active_for(_Cell), _Dots())

    def test_dispatch_is_deterministic(self) -> None:
        args = [_Bars(), _Cell("x"), _Row("y")]
        scripts = []
        for _ in range(3):
            channel = _RecordingChannel(PYTHON)
            process_arguments(args, channel=channel, table=_table(), backend=PYTHON)
            scripts.append(channel.script)
        self.assertEqual(len(set(scripts)), 1)

    def test_unregistered_object_raises(self) -> None:
        channel = _RecordingChannel(PYTHON)
        with self.assertRaises(StyleLookupError):
            process_arguments([object()], channel=channel, table=_table(), backend=PYTHON)

    def test_active_style_must_support_backend(self) -> None:
        table = _table()
        gnuplot_channel = _RecordingChannel(GNUPLOT)
        process_arguments([_GnuplotOnlyDots(), _Cell("g")], channel=gnuplot_channel, table=table, backend=GNUPLOT)
        self.assertEqual(gnuplot_channel.script, "gdots g\n")

        python_channel = _RecordingChannel(PYTHON)
        with self.assertRaises(StyleLookupError):
            process_arguments([_Cell("p")], channel=python_channel, table=table, backend=PYTHON)

    def test_accepts_generators(self) -> None:
        channel = _RecordingChannel(PYTHON)
        process_arguments((_Cell(n) for n in "ab"), channel=channel, table=_table(), backend=PYTHON)
        self.assertEqual(channel.script, "dots a\ndots b\n")


if __name__ == "__main__":
    unittest.main()
