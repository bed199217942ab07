from __future__ import annotations

import math

from passportsheet.core.models import PASSPORT_RATIO, CropRegion, round_half_up


def parse_crop(text: str) -> CropRegion:
    """Parse "x,y,width,height" (pixels) into a CropRegion."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Crop must be x,y,width,height; got {text!r}")
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"Crop values must be numbers; got {text!r}") from None
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"Crop values must be finite; got {text!r}")
    x, y, w, h = (round_half_up(v) for v in values)
    return CropRegion(x=x, y=y, width=w, height=h)


def centered_crop(image_w: int, image_h: int, ratio: float = PASSPORT_RATIO) -> CropRegion:
    """Largest `ratio` (w/h) crop centered on the image."""
    if image_w <= 0 or image_h <= 0:
        raise ValueError(f"Image size must be positive, got {image_w}x{image_h}")
    if image_w > image_h * ratio:
        h = image_h
        w = max(1, min(image_w, round_half_up(h * ratio)))
    else:
        w = image_w
        h = max(1, min(image_h, round_half_up(w / ratio)))
    return CropRegion(x=(image_w - w) // 2, y=(image_h - h) // 2, width=w, height=h)


def fit_crop_to_bounds(crop: CropRegion, image_w: int, image_h: int) -> CropRegion:
    """
    Move `crop` inside the image, shrinking it around its center (keeping its
    aspect ratio) only when it is larger than the image.
    """
    w, h = crop.width, crop.height
    shrink = min(1.0, image_w / w, image_h / h)
    if shrink < 1.0:
        cx = crop.x + w / 2.0
        cy = crop.y + h / 2.0
        w = max(1, min(image_w, int(w * shrink)))
        h = max(1, min(image_h, int(h * shrink)))
        x = round_half_up(cx - w / 2.0)
        y = round_half_up(cy - h / 2.0)
    else:
        x, y = crop.x, crop.y

    x = max(0, min(x, image_w - w))
    y = max(0, min(y, image_h - h))
    return CropRegion(x=x, y=y, width=w, height=h)
