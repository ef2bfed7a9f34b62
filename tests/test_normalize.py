from __future__ import annotations

from decimal import Decimal
import unittest

import numpy as np

from qplot import PlotDataError, Series
from qplot.adapters.normalize import normalize_xy

try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None

try:
    import torch
except ImportError:  # pragma: no cover - optional dependency
    torch = None


class NormalizeXYTests(unittest.TestCase):
    def test_list_uses_sample_index_for_x(self) -> None:
        series = normalize_xy([3, 1, 2])
        np.testing.assert_array_equal(series.x, np.asarray([0.0, 1.0, 2.0]))
        np.testing.assert_array_equal(series.y, np.asarray([3.0, 1.0, 2.0]))
        self.assertEqual(series.y.dtype, np.float64)
        self.assertTrue(np.all(series.mask))

    def test_explicit_x(self) -> None:
        series = normalize_xy(np.asarray([1.0, 4.0]), x=[10, 20], label="speed")
        np.testing.assert_array_equal(series.x, np.asarray([10.0, 20.0]))
        self.assertEqual(series.label, "speed")

    def test_pairs_array_is_split(self) -> None:
        series = normalize_xy(np.asarray([[0.0, 1.0], [2.0, 3.0], [4.0, 5.0]]))
        np.testing.assert_array_equal(series.x, np.asarray([0.0, 2.0, 4.0]))
        np.testing.assert_array_equal(series.y, np.asarray([1.0, 3.0, 5.0]))

    def test_wide_2d_array_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(np.zeros((4, 3)))

    def test_nested_lists_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy([[1, 2], [3, 4]])

    def test_none_and_decimal_values(self) -> None:
        series = normalize_xy([Decimal("1.5"), None, 2])
        self.assertEqual(series.y[0], 1.5)
        self.assertTrue(np.isnan(series.y[1]))
        np.testing.assert_array_equal(series.mask, np.asarray([True, False, True]))
        self.assertEqual(series.runs(), [(0, 1), (2, 3)])

    def test_rejects_bad_input(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(None)
        with self.assertRaises(PlotDataError):
            normalize_xy([])
        with self.assertRaises(PlotDataError):
            normalize_xy([1.0, 2.0], x=[1.0])
        with self.assertRaises(PlotDataError):
            normalize_xy([float("nan"), float("inf")])
        with self.assertRaises(PlotDataError):
            normalize_xy(["a", "b"])
        with self.assertRaises(PlotDataError):
            normalize_xy("abc")

    def test_series_helpers(self) -> None:
        series = Series.from_xy([1.0, float("nan"), 3.0, 4.0])
        xs, ys = series.finite_xy()
        np.testing.assert_array_equal(xs, np.asarray([0.0, 2.0, 3.0]))
        np.testing.assert_array_equal(ys, np.asarray([1.0, 3.0, 4.0]))
        self.assertEqual(series.size, 4)
        self.assertEqual(series.runs(), [(0, 1), (2, 4)])
        self.assertTrue(np.isnan(series.gapped_y()[1]))

    @unittest.skipIf(torch is None, "torch not installed")
    def test_torch_tensor(self) -> None:
        series = normalize_xy(torch.tensor([1, 2, 3], dtype=torch.int32))
        np.testing.assert_array_equal(series.y, np.asarray([1.0, 2.0, 3.0]))
        with self.assertRaises(PlotDataError):
            normalize_xy(torch.zeros((2, 2, 2)))

    @unittest.skipIf(torch is None, "torch not installed")
    def test_torch_pairs(self) -> None:
        series = normalize_xy(torch.tensor([[1.0, 2.0], [3.0, 4.0]]))
        np.testing.assert_array_equal(series.x, np.asarray([1.0, 3.0]))

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_dataframe_columns(self) -> None:
        frame = pd.DataFrame({"t": [0.0, 1.0, 2.0], "v": [5.0, 6.0, 7.0]})
        series = normalize_xy("v", x="t", data=frame)
        np.testing.assert_array_equal(series.x, np.asarray([0.0, 1.0, 2.0]))
        self.assertEqual(series.label, "v")
        with self.assertRaises(PlotDataError):
            normalize_xy("missing", data=frame)
        with self.assertRaises(PlotDataError):
            normalize_xy(data=frame)

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_named_pandas_series_sets_label(self) -> None:
        series = normalize_xy(pd.Series([1.0, 2.0], name="load"))
        self.assertEqual(series.label, "load")


if __name__ == "__main__":
    unittest.main()
