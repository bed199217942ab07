from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from PIL import Image

# OpenCV is used for resampling (fast, high-quality interpolation options)
import cv2

from passportsheet.core.decode import SourceImage
from passportsheet.core.models import CropRegion, Rect

Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)


class Raster:
    """
    An owned RGB pixel buffer with the few drawing operations the
    compositors need: fill, resampled blit and alpha-blended outline.

    Rectangles are in buffer pixels; anything outside the buffer is clipped
    and empty rectangles are ignored.
    """

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.dtype != np.uint8:
            raise ValueError(f"Expected an HxWx3 uint8 array, got {pixels.shape} {pixels.dtype}")
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int, color: Color = WHITE) -> "Raster":
        if width <= 0 or height <= 0:
            raise ValueError(f"Raster size must be positive, got {width}x{height}")
        return cls(np.full((height, width, 3), color, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def _clip(self, rect: Rect) -> Optional[Tuple[int, int, int, int]]:
        """(left, top, right, bottom) of `rect` inside the buffer, or None."""
        if rect.is_empty:
            return None
        left = max(0, rect.x)
        top = max(0, rect.y)
        right = min(self.width, rect.right)
        bottom = min(self.height, rect.bottom)
        if left >= right or top >= bottom:
            return None
        return left, top, right, bottom

    def fill_rect(self, rect: Rect, color: Color) -> None:
        box = self._clip(rect)
        if box is None:
            return
        left, top, right, bottom = box
        self.pixels[top:bottom, left:right] = color

    def blit(self, source: SourceImage, crop: CropRegion, dest: Rect) -> bool:
        """
        Resample the `crop` region of `source` into `dest`, stretching to fill.

        Returns False when nothing was drawn (empty destination or crop).
        """
        if dest.is_empty:
            return False
        x0, y0, x1, y1 = crop.as_box()
        region = source.pixels[max(0, y0):max(0, y1), max(0, x0):max(0, x1)]
        if region.size == 0:
            return False

        shrinking = dest.width < region.shape[1] or dest.height < region.shape[0]
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LANCZOS4
        scaled = cv2.resize(np.ascontiguousarray(region), (dest.width, dest.height), interpolation=interpolation)

        box = self._clip(dest)
        if box is None:
            return False
        left, top, right, bottom = box
        sx, sy = left - dest.x, top - dest.y
        self.pixels[top:bottom, left:right] = scaled[sy:sy + (bottom - top), sx:sx + (right - left)]
        return True

    def stroke_rect(self, rect: Rect, color: Color, alpha: float, width: int = 1) -> None:
        """Blend an outline `width` pixels thick along the inside edge of `rect`."""
        box = self._clip(rect)
        if box is None or width <= 0:
            return
        # Build the ring relative to the full rect so clipped edges stay unstroked
        mask = np.zeros((rect.height, rect.width), dtype=bool)
        w = min(width, rect.width, rect.height)
        mask[:w, :] = True
        mask[-w:, :] = True
        mask[:, :w] = True
        mask[:, -w:] = True

        left, top, right, bottom = box
        mask = mask[top - rect.y:bottom - rect.y, left - rect.x:right - rect.x]
        area = self.pixels[top:bottom, left:right]
        blended = area[mask].astype(np.float64) * (1.0 - alpha) + np.array(color, dtype=np.float64) * alpha
        area[mask] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels)
