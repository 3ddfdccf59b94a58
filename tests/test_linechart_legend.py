from __future__ import annotations

import unittest

from linechart.errors import ConfigurationError
from linechart.legend import build_legend_layout, fit_title


def _measure(text: str) -> tuple[float, float]:
    return (10.0 * len(text), 8.0)


class FitTitleTests(unittest.TestCase):
    def test_title_that_fits_is_not_truncated(self) -> None:
        length, width, height = fit_title("short", 100.0, 8.0, _measure)
        self.assertEqual(length, 5)
        self.assertEqual(width, 50.0)
        self.assertEqual(height, 8.0)

    def test_title_is_shrunk_until_it_fits_beside_swatch(self) -> None:
        length, width, _ = fit_title("a-very-long-title-here", 100.0, 8.0, _measure)
        self.assertEqual(length, 9)
        self.assertEqual(width, 90.0)

    def test_exact_fit_is_rejected(self) -> None:
        length, _, _ = fit_title("abcdefghij", 100.0, 0.0, _measure)
        self.assertEqual(length, 9)

    def test_nothing_fits_yields_empty_prefix(self) -> None:
        length, width, height = fit_title("abc", 12.0, 8.0, _measure)
        self.assertEqual(length, 0)
        self.assertEqual(width, 0.0)
        self.assertEqual(height, 8.0)

    def test_truncation_never_exceeds_column_width(self) -> None:
        title = "quarterly revenue (adjusted)"
        for column_width in range(1, 400, 7):
            for swatch in (0.0, 8.0, 20.0):
                length, width, _ = fit_title(title, float(column_width), swatch, _measure)
                if length:
                    self.assertLess(_measure(title[:length])[0] + swatch, column_width)
                    self.assertLessEqual(width, column_width)
                if _measure(title)[0] + swatch < column_width:
                    self.assertEqual(length, len(title))

    def test_shrink_is_greedy_from_full_length(self) -> None:
        calls: list[str] = []

        def measure(text: str) -> tuple[float, float]:
            calls.append(text)
            return _measure(text)

        fit_title("abcdef", 45.0, 0.0, measure)
        self.assertEqual(calls, ["abcdef", "abcde", "abcd"])


class LegendLayoutTests(unittest.TestCase):
    def test_two_column_layout(self) -> None:
        layout = build_legend_layout(
            ["short", "a-very-long-title-here"],
            canvas_width=200.0,
            canvas_height=300.0,
            max_columns=2,
            measure=_measure,
        )
        self.assertEqual((layout.columns, layout.rows), (2, 1))
        self.assertEqual(layout.column_width, 100.0)
        self.assertEqual(layout.swatch_size, 8.0)
        self.assertEqual(layout.column_text_widths, (50.0, 90.0))
        self.assertEqual([c.text for c in layout.cells], ["short", "a-very-lo"])
        self.assertEqual(layout.height, 16.0)
        self.assertEqual(layout.top, 284.0)
        self.assertEqual(layout.swatch_rect(layout.cells[0]), (21.0, 284.0, 29.0, 292.0))
        self.assertEqual(layout.swatch_rect(layout.cells[1]), (101.0, 284.0, 109.0, 292.0))

    def test_first_cell_is_measured_without_swatch_allowance(self) -> None:
        layout = build_legend_layout(
            ["abcdefghi", "abcdefghi"],
            canvas_width=190.0,
            canvas_height=100.0,
            max_columns=2,
            measure=_measure,
        )
        # Column width 95: the first title fits with no swatch yet, the second
        # must also leave room for the 8px swatch.
        self.assertEqual([c.text for c in layout.cells], ["abcdefghi", "abcdefgh"])

    def test_columns_are_capped_by_series_count(self) -> None:
        layout = build_legend_layout(["one"], canvas_width=300.0, canvas_height=100.0, max_columns=4, measure=_measure)
        self.assertEqual((layout.columns, layout.rows), (1, 1))
        self.assertEqual(layout.column_width, 300.0)

    def test_rows_wrap_and_add_spare_row_of_height(self) -> None:
        titles = ["a", "b", "c", "d", "e"]
        layout = build_legend_layout(titles, canvas_width=300.0, canvas_height=100.0, max_columns=2, measure=_measure)
        self.assertEqual((layout.columns, layout.rows), (2, 3))
        self.assertEqual([(c.row, c.column) for c in layout.cells], [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0)])
        self.assertEqual(layout.height, 8.0 * 4)
        self.assertEqual(layout.top, 100.0 - 32.0)
        _, top, _, bottom = layout.swatch_rect(layout.cells[4])
        self.assertEqual((top, bottom), (100.0 - 32.0 + 16.0, 100.0 - 32.0 + 24.0))

    def test_empty_titles_produce_zero_height(self) -> None:
        layout = build_legend_layout([], canvas_width=300.0, canvas_height=100.0, max_columns=2, measure=_measure)
        self.assertEqual(layout.height, 0.0)
        self.assertEqual(layout.top, 100.0)

    def test_rejects_non_positive_column_count(self) -> None:
        with self.assertRaises(ConfigurationError):
            build_legend_layout(["a"], canvas_width=10.0, canvas_height=10.0, max_columns=0, measure=_measure)


if __name__ == "__main__":
    unittest.main()
