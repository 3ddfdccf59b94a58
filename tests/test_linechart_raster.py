from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image
import torch

from linechart.api import render_chart
from linechart.canvas import Stroke, TextPaint, rotated
from linechart.compile import compile_frame_tensor, compile_patch_tensor
from linechart.errors import ConfigurationError
from linechart.raster import RasterCanvas, draw_hline, draw_segment, draw_vline, fill_rect, new_canvas
from linechart.raster.draw_text import IDENTITY
from linechart.series import ArraySeries, SeriesCollection
from linechart.style import validate_chart_style

RED = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def _is(px: np.ndarray, color: tuple[int, int, int, int]) -> bool:
    return tuple(int(v) for v in px) == color


class PixelPrimitiveTests(unittest.TestCase):
    def test_new_canvas_rejects_empty_size(self) -> None:
        with self.assertRaises(ValueError):
            new_canvas(0, 4)

    def test_fill_rect_is_clipped(self) -> None:
        dst = new_canvas(8, 8)
        fill_rect(dst, -3, -3, 2, 2, RED)
        self.assertTrue(_is(dst[0, 0], RED))
        self.assertTrue(_is(dst[2, 2], RED))
        self.assertTrue(_is(dst[3, 3], WHITE))

    def test_hline_and_vline_are_inclusive(self) -> None:
        dst = new_canvas(8, 8)
        draw_hline(dst, 6, 1, 3, RED)
        draw_vline(dst, 7, 0, 2, RED)
        self.assertTrue(all(_is(dst[3, x], RED) for x in range(1, 7)))
        self.assertTrue(all(_is(dst[y, 7], RED) for y in range(0, 3)))
        self.assertTrue(_is(dst[3, 0], WHITE))

    def test_diagonal_segment_visits_both_ends(self) -> None:
        dst = new_canvas(10, 10)
        draw_segment(dst, 1, 1, 8, 6, RED)
        self.assertTrue(_is(dst[1, 1], RED))
        self.assertTrue(_is(dst[6, 8], RED))
        self.assertEqual(int(np.sum(np.all(dst == RED, axis=2))), 8)


class RasterCanvasTests(unittest.TestCase):
    def test_horizontal_line(self) -> None:
        canvas = RasterCanvas(20, 20)
        canvas.draw_line(2, 10, 17, 10, Stroke(RED))
        pixels = canvas.to_rgba()
        self.assertTrue(all(_is(pixels[10, x], RED) for x in range(2, 18)))
        self.assertTrue(_is(pixels[10, 1], WHITE))
        self.assertTrue(_is(pixels[9, 10], WHITE))

    def test_quarter_turn_makes_horizontal_line_vertical(self) -> None:
        canvas = RasterCanvas(20, 20)
        with rotated(canvas, 90.0, 10.0, 10.0):
            canvas.draw_line(2, 10, 17, 10, Stroke(RED))
        self.assertEqual(canvas.matrix, IDENTITY)
        pixels = canvas.to_rgba()
        self.assertTrue(all(_is(pixels[y, 10], RED) for y in range(2, 18)))
        self.assertTrue(_is(pixels[10, 2], WHITE))

    def test_outlined_and_filled_rects(self) -> None:
        canvas = RasterCanvas(20, 20)
        canvas.draw_rect(2, 2, 8, 8, Stroke(RED))
        canvas.draw_rect(12, 12, 15, 15, Stroke(RED, fill=True))
        pixels = canvas.to_rgba()
        self.assertTrue(_is(pixels[2, 5], RED))
        self.assertTrue(_is(pixels[5, 5], WHITE))
        self.assertTrue(_is(pixels[13, 13], RED))

    def test_text_is_measured_and_drawn(self) -> None:
        canvas = RasterCanvas(80, 40)
        paint = TextPaint(BLACK, 20.0)
        w, h = canvas.measure_text("Hi", paint)
        self.assertGreater(w, 0.0)
        self.assertGreater(h, 0.0)
        self.assertEqual(canvas.measure_text("", paint)[0], 0.0)
        canvas.draw_text("Hi", 5, 30, paint)
        ink = canvas.to_rgba()[:31, :, :3].min(axis=2) < 128
        self.assertTrue(bool(ink.any()))
        # Nothing lands below the baseline for glyphs without descenders.
        self.assertFalse(bool((canvas.to_rgba()[33:, :, :3] < 128).any()))

    def test_rotated_text_is_drawn(self) -> None:
        canvas = RasterCanvas(80, 80)
        with rotated(canvas, -45.0, 20.0, 60.0):
            canvas.draw_text("label", 20, 60, TextPaint(BLACK, 14.0))
        self.assertTrue(bool((canvas.to_rgba()[:, :, :3] < 128).any()))

    def test_clear_resets_pixels_and_transform(self) -> None:
        canvas = RasterCanvas(10, 10)
        canvas.rotate(30.0, 5.0, 5.0)
        canvas.draw_line(0, 5, 9, 5, Stroke(RED))
        canvas.clear()
        self.assertEqual(canvas.matrix, IDENTITY)
        self.assertTrue(bool(np.all(canvas.to_rgba() == 255)))

    def test_exports(self) -> None:
        canvas = RasterCanvas(12, 7)
        tensor = canvas.to_tensor()
        self.assertEqual(tuple(tensor.shape), (7, 12, 4))
        self.assertEqual(tensor.dtype, torch.uint8)
        with tempfile.TemporaryDirectory() as tmp:
            out = canvas.save_png(Path(tmp) / "chart.png")
            with Image.open(out) as image:
                self.assertEqual(image.size, (12, 7))
                self.assertEqual(image.mode, "RGBA")


class TensorCompileTests(unittest.TestCase):
    def test_frame_tensor_is_a_copy(self) -> None:
        frame = new_canvas(4, 3)
        tensor = compile_frame_tensor(frame)
        frame[0, 0] = RED
        self.assertEqual(int(tensor[0, 0, 1]), 255)

    def test_patch_bounds(self) -> None:
        frame = new_canvas(4, 3)
        self.assertEqual(tuple(compile_patch_tensor(frame, 1, 1, 3, 2).shape), (2, 3, 4))
        for args in ((0, 0, 5, 1), (-1, 0, 1, 1), (0, 0, 0, 1)):
            with self.subTest(args=args):
                with self.assertRaises(ValueError):
                    compile_patch_tensor(frame, *args)
        with self.assertRaises(ValueError):
            compile_frame_tensor(np.zeros((3, 4, 3), dtype=np.uint8))


class RenderChartTests(unittest.TestCase):
    def test_renders_series_lines(self) -> None:
        collection = SeriesCollection()
        collection.add_series(
            ArraySeries(
                title="requests",
                x_values=np.arange(6, dtype=np.int64),
                y_values=np.asarray([1.0, 3.0, 2.0, 5.0, 4.0, 6.0]),
            )
        )
        style = validate_chart_style({"title_size": 16, "label_size": 12, "legend_size": 12, "line_colors": ["red,red"]})
        pixels = render_chart(collection, width=320, height=240, style=style, title="load")
        self.assertEqual(pixels.shape, (240, 320, 4))
        self.assertTrue(bool(np.all(pixels == np.asarray(RED, dtype=np.uint8), axis=2).any()))

    def test_default_style_renders_only_empty_collections(self) -> None:
        pixels = render_chart(SeriesCollection(), width=120, height=80, title="t")
        self.assertEqual(pixels.shape, (80, 120, 4))
        collection = SeriesCollection()
        collection.add_series(ArraySeries(title="a", x_values=np.arange(3), y_values=np.asarray([1.0, 2.0, 3.0])))
        with self.assertRaises(ConfigurationError):
            render_chart(collection, width=120, height=80)

    def test_rejects_empty_canvas(self) -> None:
        with self.assertRaises(ValueError):
            render_chart(SeriesCollection(), width=0, height=10)


if __name__ == "__main__":
    unittest.main()
