import unittest
from dataclasses import FrozenInstanceError, replace

from tests._test_path import SRC  # noqa: F401  (ensures src on path)

from passportsheet.core.models import (
    A4_PAGE,
    CropRegion,
    LayoutMode,
    Rect,
    SheetParams,
    round_half_up,
)


class TestSheetParams(unittest.TestCase):
    def test_defaults(self):
        p = SheetParams()
        self.assertEqual((p.rows, p.cols), (5, 5))
        self.assertEqual((p.margin, p.gap, p.border), (20, 38, 20))
        self.assertIs(p.mode, LayoutMode.UNIFORM_MAX)

    def test_frozen(self):
        p = SheetParams()
        with self.assertRaises(FrozenInstanceError):
            p.rows = 7  # type: ignore[misc]

    def test_replace(self):
        p = SheetParams()
        p2 = replace(p, rows=4, mode=LayoutMode.LETTERBOX)
        self.assertEqual(p2.rows, 4)
        self.assertIs(p2.mode, LayoutMode.LETTERBOX)
        # original unchanged
        self.assertEqual(p.rows, 5)

    def test_clamped_snaps_to_control_bounds(self):
        p = SheetParams(rows=0, cols=42, margin=900, gap=-5, border=-1).clamped()
        self.assertEqual(p.rows, 1)
        self.assertEqual(p.cols, 10)
        self.assertEqual(p.margin, 400)
        self.assertEqual(p.gap, 0)
        self.assertEqual(p.border, 0)

    def test_grid_and_spacing(self):
        p = SheetParams(rows=3, cols=2, margin=5, gap=6, border=7)
        self.assertEqual(p.grid().count, 6)
        self.assertEqual(p.spacing().border, 7)


class TestGeometry(unittest.TestCase):
    def test_a4_page(self):
        self.assertEqual((A4_PAGE.width, A4_PAGE.height), (2480, 3508))

    def test_round_half_up(self):
        self.assertEqual(round_half_up(21.5), 22)
        self.assertEqual(round_half_up(22.5), 23)
        self.assertEqual(round_half_up(587.57), 588)
        self.assertEqual(round_half_up(-2.5), -2)

    def test_crop_rejects_empty(self):
        with self.assertRaises(ValueError):
            CropRegion(x=0, y=0, width=0, height=10)
        self.assertEqual(CropRegion(1, 2, 3, 4).as_box(), (1, 2, 4, 6))

    def test_crop_within_image(self):
        self.assertTrue(CropRegion(0, 0, 70, 90).within(70, 90))
        self.assertFalse(CropRegion(1, 0, 70, 90).within(70, 90))
        self.assertFalse(CropRegion(-1, 0, 10, 10).within(70, 90))
        self.assertFalse(CropRegion(5000, 5000, 350, 450).within(350, 450))

    def test_rect_overlap_is_strict(self):
        a = Rect(0, 0, 10, 10)
        self.assertFalse(a.overlaps(Rect(10, 0, 10, 10)))
        self.assertTrue(a.overlaps(Rect(9, 9, 10, 10)))
        self.assertFalse(a.overlaps(Rect(5, 5, 0, 10)))

    def test_rect_inset_can_go_negative(self):
        r = Rect(10, 10, 30, 40).inset(20)
        self.assertEqual((r.x, r.y, r.width, r.height), (30, 30, -10, 0))
        self.assertTrue(r.is_empty)

    def test_contains(self):
        page = Rect(0, 0, 100, 100)
        self.assertTrue(page.contains(Rect(0, 0, 100, 100)))
        self.assertFalse(page.contains(Rect(-1, 0, 10, 10)))
