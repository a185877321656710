import os
import tempfile
import unittest

from handwriting.lib.errors import FontUnavailable
from handwriting.lib.fonts import (
    BUILTIN_FONT,
    FONT_CACHE_SIZE,
    FontCatalogEntry,
    FontRegistry,
    PillowFontMetrics,
    cached_font,
    load_catalog,
)
from handwriting.lib.layout import FontStatus


class FlakyLoader:
    def __init__(self, broken=(), failures_before_success=None):
        self.broken = set(broken)
        self.failures_before_success = dict(failures_before_success or {})
        self.calls = []

    def __call__(self, path, size):
        self.calls.append(path)
        if path in self.broken:
            raise OSError(f"cannot open resource {path}")
        remaining = self.failures_before_success.get(path, 0)
        if remaining:
            self.failures_before_success[path] = remaining - 1
            raise OSError("timeout")
        return object()


class TestFontRegistry(unittest.TestCase):
    def setUp(self):
        self.catalog = [
            FontCatalogEntry(display_name="Broken", family_id="broken", path="broken.ttf"),
            FontCatalogEntry(display_name="Good", family_id="good", path="good.ttf"),
            FontCatalogEntry(display_name="Other", family_id="other", path="other.ttf"),
        ]

    def test_failure_does_not_block_other_fonts(self):
        registry = FontRegistry(self.catalog, retries=3, loader=FlakyLoader(broken={"broken.ttf"}))
        statuses = registry.load_all()
        self.assertEqual(statuses, {"broken": FontStatus.FAILED, "good": FontStatus.LOADED, "other": FontStatus.LOADED})
        self.assertIn("cannot open resource", registry.failed["broken"])

    def test_retries_before_giving_up(self):
        loader = FlakyLoader(broken={"broken.ttf"})
        registry = FontRegistry(self.catalog, retries=3, loader=loader)
        registry.load("broken")
        self.assertEqual(loader.calls.count("broken.ttf"), 3)

    def test_transient_failure_recovers(self):
        loader = FlakyLoader(failures_before_success={"good.ttf": 2})
        registry = FontRegistry(self.catalog, retries=3, loader=loader)
        self.assertEqual(registry.load("good"), FontStatus.LOADED)

    def test_status_before_loading_is_pending(self):
        registry = FontRegistry(self.catalog, loader=FlakyLoader())
        self.assertEqual(registry.status("good"), FontStatus.PENDING)
        self.assertEqual(registry.status("unknown"), FontStatus.FAILED)

    def test_failed_selection_falls_back_to_first_loaded(self):
        registry = FontRegistry(self.catalog, loader=FlakyLoader(broken={"broken.ttf"}))
        registry.load("broken")
        registry.load("other")
        self.assertEqual(registry.resolve("broken"), "other")
        self.assertEqual(registry.resolve("good"), "good")

    def test_fallback_without_loaded_fonts_raises(self):
        registry = FontRegistry(self.catalog, loader=FlakyLoader(broken={"broken.ttf"}))
        registry.load("broken")
        with self.assertRaises(FontUnavailable):
            registry.resolve("broken")

    def test_retry_clears_failure(self):
        loader = FlakyLoader(broken={"good.ttf"})
        registry = FontRegistry(self.catalog, retries=1, loader=loader)
        self.assertEqual(registry.load("good"), FontStatus.FAILED)
        loader.broken.clear()
        self.assertEqual(registry.retry("good"), FontStatus.LOADED)
        self.assertNotIn("good", registry.failed)

    def test_retry_unknown_font(self):
        registry = FontRegistry(self.catalog, loader=FlakyLoader())
        with self.assertRaises(FontUnavailable):
            registry.retry("missing")

    def test_fonts_listing(self):
        registry = FontRegistry(self.catalog, loader=FlakyLoader(broken={"broken.ttf"}))
        registry.load_all()
        listing = {font.family_id: font for font in registry.fonts()}
        self.assertEqual(listing["broken"].status, FontStatus.FAILED)
        self.assertIsNotNone(listing["broken"].error)
        self.assertIsNone(listing["good"].error)


class TestCatalog(unittest.TestCase):
    def test_scans_font_files(self):
        with tempfile.TemporaryDirectory() as font_dir:
            for name in ("menglixinghe.ttf", "custom.otf", "notes.txt"):
                open(os.path.join(font_dir, name), "wb").close()
            catalog = load_catalog(font_dir)
        ids = [entry.family_id for entry in catalog]
        self.assertEqual(ids, ["custom", "menglixinghe", BUILTIN_FONT])
        self.assertEqual(catalog[1].display_name, "萌礼行楷")

    def test_missing_directory_keeps_builtin(self):
        catalog = load_catalog("/nonexistent/fonts")
        self.assertEqual([entry.family_id for entry in catalog], [BUILTIN_FONT])

    def test_empty_font_file_fails_to_load(self):
        with tempfile.TemporaryDirectory() as font_dir:
            open(os.path.join(font_dir, "empty.ttf"), "wb").close()
            registry = FontRegistry(load_catalog(font_dir), retries=1)
            statuses = registry.load_all()
        self.assertEqual(statuses["empty"], FontStatus.FAILED)
        self.assertEqual(statuses[BUILTIN_FONT], FontStatus.LOADED)


class TestPillowFontMetrics(unittest.TestCase):
    def test_builtin_font_measures(self):
        registry = FontRegistry(load_catalog("/nonexistent/fonts"))
        registry.load_all()
        metrics = PillowFontMetrics(registry)
        short = metrics.measure_advance("ab", BUILTIN_FONT, 20)
        long = metrics.measure_advance("abab", BUILTIN_FONT, 20)
        self.assertGreater(short, 0)
        self.assertAlmostEqual(long, 2 * short, delta=1)
        self.assertGreater(metrics.measure_advance("ab", BUILTIN_FONT, 40), short)

    def test_open_fonts_are_bounded(self):
        registry = FontRegistry(load_catalog("/nonexistent/fonts"))
        metrics = PillowFontMetrics(registry)
        cached_font.cache_clear()
        self.assertIs(metrics.font(BUILTIN_FONT, 20), metrics.font(BUILTIN_FONT, 20))
        for size in range(10, 10 + FONT_CACHE_SIZE + 20):
            metrics.measure_advance("a", BUILTIN_FONT, size + 0.5)
        info = cached_font.cache_info()
        self.assertEqual(info.maxsize, FONT_CACHE_SIZE)
        self.assertLessEqual(info.currsize, FONT_CACHE_SIZE)


if __name__ == "__main__":
    unittest.main()
