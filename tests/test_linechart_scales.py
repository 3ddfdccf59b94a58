from __future__ import annotations

import math
import unittest

import numpy as np

from linechart.errors import DegenerateRangeError
from linechart.scales import (
    SIN_45,
    PlotRect,
    build_transform,
    floor_to_step,
    int_step_values,
    rotated_extent_45,
    step_values,
)
from linechart.series import Boundaries


def _bounds(x_min: int, x_max: int, y_min: float, y_max: float) -> Boundaries:
    return Boundaries(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)


class AxisTransformTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rect = PlotRect(left=45.0, top=40.0, right=400.0, bottom=250.0)
        self.transform = build_transform(_bounds(-3, 17, -2.5, 8.0), self.rect)

    def test_extremes_map_exactly_onto_plot_edges(self) -> None:
        self.assertEqual(self.transform.screen_x(-3), 45.0)
        self.assertEqual(self.transform.screen_x(17), 400.0)
        self.assertEqual(self.transform.screen_y(8.0), 40.0)
        self.assertEqual(self.transform.screen_y(-2.5), 250.0)

    def test_screen_x_is_monotonic(self) -> None:
        xs = list(range(-3, 18))
        mapped = [self.transform.screen_x(x) for x in xs]
        self.assertEqual(mapped, sorted(mapped))

    def test_screen_y_is_flipped(self) -> None:
        ys = np.linspace(-2.5, 8.0, 31)
        mapped = [self.transform.screen_y(float(y)) for y in ys]
        for a, b in zip(mapped, mapped[1:]):
            self.assertGreaterEqual(a, b)

    def test_map_points_matches_scalar_maps(self) -> None:
        xs = np.asarray([-3, 2, 17], dtype=np.int64)
        ys = np.asarray([8.0, 0.0, -2.5], dtype=np.float64)
        px, py = self.transform.map_points(xs, ys)
        for i in range(3):
            self.assertAlmostEqual(px[i], self.transform.screen_x(float(xs[i])), places=9)
            self.assertAlmostEqual(py[i], self.transform.screen_y(float(ys[i])), places=9)

    def test_degenerate_x_range_is_refused(self) -> None:
        with self.assertRaises(DegenerateRangeError) as ctx:
            build_transform(_bounds(5, 5, 0.0, 1.0), self.rect)
        self.assertEqual(ctx.exception.axis, "x")

    def test_degenerate_y_range_is_refused(self) -> None:
        with self.assertRaises(DegenerateRangeError) as ctx:
            build_transform(_bounds(0, 5, 1.0, 1.0), self.rect)
        self.assertEqual(ctx.exception.axis, "y")


class StepHelperTests(unittest.TestCase):
    def test_step_values_include_stop_despite_float_drift(self) -> None:
        values = list(step_values(0.0, 1.0, 0.1))
        self.assertEqual(len(values), 11)
        self.assertAlmostEqual(values[-1], 1.0, places=12)

    def test_step_values_stop_below_unaligned_max(self) -> None:
        self.assertEqual(list(step_values(0.5, 3.7, 1.0)), [0.5, 1.5, 2.5, 3.5])

    def test_step_values_reject_non_positive_step(self) -> None:
        with self.assertRaises(ValueError):
            list(step_values(0.0, 1.0, 0.0))

    def test_int_step_values_are_inclusive(self) -> None:
        self.assertEqual(list(int_step_values(0, 10, 5)), [0, 5, 10])
        self.assertEqual(list(int_step_values(0, 9, 5)), [0, 5])

    def test_floor_to_step_handles_negative_values(self) -> None:
        self.assertEqual(floor_to_step(3.7, 1.0), 3.0)
        self.assertEqual(floor_to_step(-2.5, 1.0), -3.0)
        self.assertEqual(floor_to_step(6.0, 2.0), 6.0)

    def test_floor_to_step_keeps_values_already_on_a_multiple(self) -> None:
        self.assertEqual(floor_to_step(1.0, 0.1), 1.0)
        self.assertEqual(floor_to_step(0.3, 0.1), 0.3)
        self.assertEqual(floor_to_step(-0.7, 0.1), -0.7)
        self.assertAlmostEqual(floor_to_step(1.05, 0.1), 1.0, places=12)
        with self.assertRaises(ValueError):
            floor_to_step(1.0, 0.0)

    def test_rotated_extent_45(self) -> None:
        h1, h2 = rotated_extent_45(10.0, 4.0)
        self.assertAlmostEqual(h1, 4.0 * SIN_45)
        self.assertAlmostEqual(h2, 10.0 * SIN_45)
        self.assertAlmostEqual(SIN_45, math.sqrt(0.5))


if __name__ == "__main__":
    unittest.main()
