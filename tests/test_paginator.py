import random
import unittest

from fakes import FixedMetrics
from handwriting.lib.layout import (
    JitterGenerator,
    PageModel,
    Paginator,
    StyleParameters,
    build_lines,
    flow_dividers,
)


class TestPaginator(unittest.TestCase):
    def setUp(self):
        # 10px glyphs, 20px lines, 100px of text per line, four lines per page
        self.params = StyleParameters(
            char_spacing=0,
            font_size=10,
            vertical_spacing=2,
            indent_first_line=False,
            prevent_symbol_at_all_line_starts=False,
        )
        self.page_model = PageModel(width=100, height=100, top_margin=10, bottom_margin=10)

    def paginator(self, params=None, page_model=None):
        return Paginator(
            page_model or self.page_model,
            FixedMetrics(10),
            "test-font",
            params or self.params,
            JitterGenerator(random.Random(0)),
        )

    def paginate(self, text, params=None, page_model=None):
        params = params or self.params
        return self.paginator(params, page_model).paginate(build_lines(text, params))

    def test_wraps_at_usable_width(self):
        pages = self.paginate("一二三四五六七八九十甲乙")
        self.assertEqual(len(pages), 1)
        lines = pages[0].lines
        self.assertEqual([line.text for line in lines], ["一二三四五六七八九十", "甲乙"])
        self.assertFalse(lines[0].is_continuation)
        self.assertTrue(lines[1].is_continuation)
        self.assertEqual(lines[0].width, 100)

    def test_page_breaks_before_overflowing_line(self):
        pages = self.paginate("\n".join(["一"] * 10))
        self.assertEqual([len(page.lines) for page in pages], [4, 4, 2])
        self.assertEqual([page.index for page in pages], [0, 1, 2])
        self.assertEqual([line.index_in_page for line in pages[1].lines], [0, 1, 2, 3])

    def test_page_height_bound(self):
        text = "\n".join(["Hello你好，世界" * 3] * 12)
        for page in self.paginate(text):
            used = sum(line.height for line in page.lines) + 10 + 10
            self.assertLessEqual(used, 100)
            self.assertEqual(page.height, used)

    def test_no_unit_is_lost_or_split(self):
        text = "\n".join(["Hello你好，世界World！2024年" * 2] * 9)
        pages = self.paginate(text)
        rendered = "".join(line.text for page in pages for line in page.lines)
        self.assertEqual(rendered, text.replace("\n", ""))
        for page in pages:
            for line in page.lines:
                self.assertEqual(line.height, 20)

    def test_absolute_positions(self):
        pages = self.paginate("\n".join(["一"] * 5))
        self.assertEqual(pages[0].lines[2].units[0].y, 2 * 20 + 10)
        self.assertEqual(pages[1].lines[0].units[0].y, 0 * 20 + 10 + 1 * 100)

    def test_x_accumulates_with_margins(self):
        params = self.params.model_copy(update={"char_spacing": 1})
        page_model = PageModel(width=110, height=100, horizontal_padding=5, top_margin=10, bottom_margin=10)
        line = self.paginate("一二", params, page_model)[0].lines[0]
        self.assertEqual([unit.x for unit in line.units], [6, 18])
        self.assertEqual([unit.advance for unit in line.units], [10, 10])
        self.assertEqual(line.width, 24)

    def test_symbol_reattaches_to_previous_line(self):
        pages = self.paginate("一二三四五六七八九十，")
        self.assertEqual(len(pages), 1)
        self.assertEqual([line.text for line in pages[0].lines], ["一二三四五六七八九十，"])

    def test_symbol_not_reattached_without_headroom(self):
        pages = self.paginate("一\n一\n一\n一二三四五六七八九十，")
        self.assertEqual(len(pages), 2)
        self.assertEqual(pages[0].lines[-1].text, "一二三四五六七八九十")
        self.assertEqual(pages[1].lines[0].text, "，")

    def test_symbol_at_logical_line_start_is_not_reattached(self):
        pages = self.paginate("一二\n，三")
        self.assertEqual([line.text for line in pages[0].lines], ["一二", "，三"])

    def test_empty_line_reserves_height(self):
        lines = self.paginate("一\n\n二")[0].lines
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[1].units, [])
        self.assertEqual(lines[1].min_height, 20)
        self.assertEqual(lines[1].height, 20)
        self.assertIsNone(lines[0].min_height)

    def test_over_wide_unit_gets_its_own_line(self):
        lines = self.paginate("a" * 15 + "一")[0].lines
        self.assertEqual([line.text for line in lines], ["a" * 15, "一"])

    def test_line_taller_than_page_is_rejected(self):
        params = self.params.model_copy(update={"font_size": 50})
        with self.assertRaises(ValueError):
            self.paginate("一", params)

    def test_wrap_has_no_page_budget(self):
        params = self.params
        lines = self.paginator().wrap(build_lines("\n".join(["一"] * 10), params))
        self.assertEqual(len(lines), 10)
        self.assertEqual(lines[-1].units[0].y, 9 * 20 + 10)

    def test_measures_with_font_family_and_size(self):
        metrics = FixedMetrics(10)
        paginator = Paginator(self.page_model, metrics, "test-font", self.params)
        paginator.paginate(build_lines("ab你", self.params))
        self.assertEqual(metrics.calls, [("ab", "test-font", 10), ("你", "test-font", 10)])


class TestFlowDividers(unittest.TestCase):
    def test_one_gutter_per_page_reached(self):
        preview = PageModel(width=1190, height=1000, top_margin=20, bottom_margin=20)
        dividers = flow_dividers(2500, preview)
        self.assertEqual(len(dividers), 3)
        self.assertEqual((dividers[0].start, dividers[0].end), (980, 1000))
        self.assertEqual((dividers[2].start, dividers[2].end), (2980, 3000))

    def test_gutter_stops_at_page_edge(self):
        preview = PageModel(width=1190, height=1000, top_margin=20, bottom_margin=20)
        divider = flow_dividers(500, preview)[0]
        self.assertEqual(divider.end, 1000)
        self.assertEqual(divider.end - divider.start, preview.bottom_margin)

    def test_short_content_still_gets_one_divider(self):
        preview = PageModel(width=1190, height=1000, top_margin=20, bottom_margin=20)
        self.assertEqual(len(flow_dividers(0, preview)), 1)


if __name__ == "__main__":
    unittest.main()
