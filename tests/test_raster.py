import unittest

import numpy as np

from tests._test_path import SRC  # noqa: F401

from passportsheet.core.decode import SourceImage
from passportsheet.core.models import CropRegion, Rect
from passportsheet.core.raster import BLACK, WHITE, Raster


def _solid_source(w: int, h: int, color) -> SourceImage:
    return SourceImage(pixels=np.full((h, w, 3), color, dtype=np.uint8))


class TestRaster(unittest.TestCase):
    def test_blank(self):
        r = Raster.blank(20, 10)
        self.assertEqual(r.size, (20, 10))
        self.assertTrue((r.pixels == 255).all())
        with self.assertRaises(ValueError):
            Raster.blank(0, 10)

    def test_fill_rect_clips_to_buffer(self):
        r = Raster.blank(10, 10)
        r.fill_rect(Rect(-5, -5, 8, 8), (10, 20, 30))
        self.assertEqual(tuple(r.pixels[0, 0]), (10, 20, 30))
        self.assertEqual(tuple(r.pixels[2, 2]), (10, 20, 30))
        self.assertEqual(tuple(r.pixels[3, 3]), WHITE)

    def test_fill_ignores_empty_rect(self):
        r = Raster.blank(10, 10)
        r.fill_rect(Rect(2, 2, -3, 4), BLACK)
        self.assertTrue((r.pixels == 255).all())

    def test_stroke_blends_once_per_pixel(self):
        r = Raster.blank(10, 10)
        r.stroke_rect(Rect(2, 2, 5, 5), BLACK, alpha=0.25)
        # 255 * 0.75 = 191.25
        self.assertEqual(int(r.pixels[2, 2, 0]), 191)  # corner, not blended twice
        self.assertEqual(int(r.pixels[2, 4, 0]), 191)
        self.assertEqual(int(r.pixels[6, 6, 0]), 191)
        self.assertEqual(int(r.pixels[4, 4, 0]), 255)  # inside
        self.assertEqual(int(r.pixels[1, 1, 0]), 255)  # outside

    def test_stroke_width_two(self):
        r = Raster.blank(10, 10)
        r.stroke_rect(Rect(0, 0, 10, 10), BLACK, alpha=0.5, width=2)
        self.assertEqual(int(r.pixels[1, 5, 0]), 128)
        self.assertEqual(int(r.pixels[2, 5, 0]), 255)
        self.assertEqual(int(r.pixels[9, 8, 0]), 128)

    def test_blit_stretches_crop_into_dest(self):
        src = np.zeros((40, 40, 3), dtype=np.uint8)
        src[:, :20] = (200, 0, 0)
        src[:, 20:] = (0, 0, 200)
        source = SourceImage(pixels=src)
        r = Raster.blank(100, 100)

        drawn = r.blit(source, CropRegion(0, 0, 20, 40), Rect(10, 10, 50, 80))

        self.assertTrue(drawn)
        self.assertEqual(tuple(r.pixels[10, 10]), (200, 0, 0))
        self.assertEqual(tuple(r.pixels[89, 59]), (200, 0, 0))
        self.assertEqual(tuple(r.pixels[50, 60]), WHITE)
        self.assertEqual(tuple(r.pixels[9, 9]), WHITE)

    def test_blit_downscale_keeps_colour(self):
        source = _solid_source(400, 500, (12, 140, 90))
        r = Raster.blank(50, 50)
        r.blit(source, CropRegion(50, 50, 350, 450), Rect(5, 5, 35, 45))
        self.assertEqual(tuple(r.pixels[20, 20]), (12, 140, 90))
        self.assertEqual(tuple(r.pixels[4, 4]), WHITE)

    def test_blit_skips_empty_dest(self):
        r = Raster.blank(10, 10)
        self.assertFalse(r.blit(_solid_source(4, 4, (0, 0, 0)), CropRegion(0, 0, 4, 4), Rect(0, 0, 0, 5)))
        self.assertTrue((r.pixels == 255).all())

    def test_blit_partially_offscreen(self):
        r = Raster.blank(10, 10)
        self.assertTrue(r.blit(_solid_source(4, 4, (9, 9, 9)), CropRegion(0, 0, 4, 4), Rect(-5, -5, 10, 10)))
        self.assertEqual(tuple(r.pixels[0, 0]), (9, 9, 9))
        self.assertEqual(tuple(r.pixels[5, 5]), WHITE)

    def test_to_pil(self):
        img = Raster.blank(7, 3).to_pil()
        self.assertEqual(img.size, (7, 3))
        self.assertEqual(img.mode, "RGB")
