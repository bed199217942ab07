from __future__ import annotations

import logging

from passportsheet.core.decode import SourceImage
from passportsheet.core.layout import interior_rect
from passportsheet.core.models import (
    A4_PAGE,
    PASSPORT_RATIO,
    SINGLE_PHOTO_HEIGHT,
    CropRegion,
    LayoutMode,
    LayoutPlan,
    PageSpec,
    Rect,
    SpacingSpec,
    round_half_up,
)
from passportsheet.core.raster import BLACK, WHITE, Raster

logger = logging.getLogger(__name__)

CUT_GUIDE_ALPHA = 0.25
CUT_GUIDE_WIDTH = 1
SINGLE_FRAME_ALPHA = 0.10
SINGLE_FRAME_WIDTH = 1


def compose_sheet(source: SourceImage, crop: CropRegion, plan: LayoutPlan, spacing: SpacingSpec) -> Raster:
    """
    Draw every cell of `plan` onto a white page.

    Each cell gets a white background, the cropped photo stretched into its
    border-inset interior, and a faint cut guide around the whole cell.
    Cells whose interior is empty keep their background and cut guide.
    """
    page = Raster.blank(plan.page.width, plan.page.height, WHITE)
    border = spacing.border if plan.mode is LayoutMode.UNIFORM_MAX else 0

    skipped = 0
    for cell in plan.cells:
        page.fill_rect(cell.rect, WHITE)

        interior = interior_rect(cell.photo, border)
        if interior.is_empty:
            skipped += 1
        else:
            page.blit(source, crop, interior)

        page.stroke_rect(cell.rect, BLACK, alpha=CUT_GUIDE_ALPHA, width=CUT_GUIDE_WIDTH)

    if skipped:
        logger.warning(
            "border %dpx leaves no room for the image in %d of %d cells (photo %dx%d)",
            border, skipped, len(plan.cells), plan.photo_width, plan.photo_height,
        )
    logger.debug("composed %s sheet with %d cells", plan.mode.value, len(plan.cells))
    return page


def single_photo_size(output_height: int = SINGLE_PHOTO_HEIGHT) -> tuple[int, int]:
    return (round_half_up(output_height * PASSPORT_RATIO), output_height)


def scaled_border(
    border: int,
    implied_rows: int,
    output_height: int = SINGLE_PHOTO_HEIGHT,
    page: PageSpec = A4_PAGE,
) -> int:
    """
    Rescale a sheet border (page pixels) to a single photo `output_height` tall.

    On the sheet a photo is roughly page.height / implied_rows tall, so the
    border grows by output_height over that height. A visual heuristic, not a
    physical measurement.
    """
    if implied_rows < 1:
        raise ValueError(f"implied_rows must be >= 1, got {implied_rows}")
    scale = output_height / (page.height / implied_rows)
    return round_half_up(border * scale)


def compose_single(
    source: SourceImage,
    crop: CropRegion,
    border: int,
    implied_rows: int,
    output_height: int = SINGLE_PHOTO_HEIGHT,
    page: PageSpec = A4_PAGE,
) -> Raster:
    """Render one full-frame passport photo with a proportionally scaled border."""
    width, height = single_photo_size(output_height)
    inset = scaled_border(border, implied_rows, output_height, page)

    photo = Raster.blank(width, height, WHITE)
    frame = Rect(0, 0, width, height)

    interior = interior_rect(frame, inset)
    if interior.is_empty:
        logger.warning("scaled border %dpx leaves no room for the image in a %dx%d photo", inset, width, height)
    else:
        photo.blit(source, crop, interior)

    photo.stroke_rect(frame, BLACK, alpha=SINGLE_FRAME_ALPHA, width=SINGLE_FRAME_WIDTH)
    logger.debug("composed single photo %dx%d, border %dpx", width, height, inset)
    return photo
