from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from passportsheet.core.errors import LayoutError
from passportsheet.core.models import (
    PASSPORT_RATIO,
    Cell,
    GridSpec,
    LayoutMode,
    LayoutPlan,
    PageSpec,
    Rect,
    SpacingSpec,
    round_half_up,
)

logger = logging.getLogger(__name__)


def layout_problem(page: PageSpec, grid: GridSpec, spacing: SpacingSpec) -> Optional[str]:
    """Describe why the inputs cannot be laid out, or return None if they can."""
    if grid.rows < 1 or grid.cols < 1:
        return f"Grid must have at least one row and one column, got {grid.rows}x{grid.cols}."
    if min(spacing.margin, spacing.gap, spacing.border) < 0:
        return "Margin, gap and border must not be negative."
    if page.width <= 2 * spacing.margin or page.height <= 2 * spacing.margin:
        return f"Margin {spacing.margin}px leaves no room on a {page.width}x{page.height} page."
    return None


def _check(page: PageSpec, grid: GridSpec, spacing: SpacingSpec) -> None:
    problem = layout_problem(page, grid, spacing)
    if problem is not None:
        raise LayoutError(problem)


def interior_rect(rect: Rect, border: int) -> Rect:
    """Area left for the image once `border` is taken from every side. May be empty."""
    return rect.inset(border)


def letterbox_fit(box_w: int, box_h: int, ratio: float = PASSPORT_RATIO) -> Tuple[int, int, int, int]:
    """
    Fit a `ratio` (w/h) rectangle inside a box, shrinking as needed.

    Returns (x, y, w, h) relative to the box. The fitted rectangle touches the
    box on the binding axis and is centered on the other.
    """
    if box_w <= 0 or box_h <= 0:
        return (0, 0, box_w, box_h)
    if box_w > box_h * ratio:
        h = box_h
        w = min(box_w, round_half_up(h * ratio))
    else:
        w = box_w
        h = min(box_h, round_half_up(w / ratio))
    return ((box_w - w) // 2, (box_h - h) // 2, w, h)


def plan_uniform_max(page: PageSpec, grid: GridSpec, spacing: SpacingSpec) -> LayoutPlan:
    """
    Largest 35:45 photo such that the grid fits inside the margins.

    The grid block is then centered on the full page. Cells are the photos
    themselves; the border is drawn inside each cell and takes no space.
    """
    _check(page, grid, spacing)
    rows, cols, gap = grid.rows, grid.cols, spacing.gap

    avail_w = page.width - 2 * spacing.margin
    avail_h = page.height - 2 * spacing.margin
    max_w = (avail_w - (cols - 1) * gap) / cols
    max_h = (avail_h - (rows - 1) * gap) / rows

    if max_w > max_h * PASSPORT_RATIO:
        # Height is the constraint
        photo_h = math.floor(max_h)
        photo_w = min(round_half_up(photo_h * PASSPORT_RATIO), math.floor(max_w))
    else:
        # Width is the constraint
        photo_w = math.floor(max_w)
        photo_h = min(round_half_up(photo_w / PASSPORT_RATIO), math.floor(max_h))

    grid_w = cols * photo_w + (cols - 1) * gap
    grid_h = rows * photo_h + (rows - 1) * gap

    # Ties resolve toward the top-left so the leftover is always 0 or 1px
    start_x = (page.width - grid_w) // 2
    start_y = (page.height - grid_h) // 2

    cells: List[Cell] = []
    for row in range(rows):
        for col in range(cols):
            rect = Rect(start_x + col * (photo_w + gap), start_y + row * (photo_h + gap), photo_w, photo_h)
            cells.append(Cell(row=row, col=col, rect=rect, photo=rect))

    logger.debug(
        "uniform-max plan %dx%d: photo %dx%d at (%d, %d)", rows, cols, photo_w, photo_h, start_x, start_y
    )
    return LayoutPlan(
        mode=LayoutMode.UNIFORM_MAX,
        page=page,
        grid=grid,
        photo_width=photo_w,
        photo_height=photo_h,
        cells=tuple(cells),
    )


def plan_letterbox(page: PageSpec, grid: GridSpec, spacing: SpacingSpec) -> LayoutPlan:
    """
    Split the area inside the margins into uniform cells, then letterbox a
    35:45 photo into each one.

    Cells are anchored at the margin, not re-centered on the page. There is
    no border in this mode.
    """
    _check(page, grid, spacing)
    rows, cols, gap = grid.rows, grid.cols, spacing.gap

    avail_w = page.width - 2 * spacing.margin
    avail_h = page.height - 2 * spacing.margin
    cell_w = (avail_w - (cols - 1) * gap) // cols
    cell_h = (avail_h - (rows - 1) * gap) // rows

    off_x, off_y, photo_w, photo_h = letterbox_fit(cell_w, cell_h)

    cells: List[Cell] = []
    for row in range(rows):
        for col in range(cols):
            x = spacing.margin + col * (cell_w + gap)
            y = spacing.margin + row * (cell_h + gap)
            rect = Rect(x, y, cell_w, cell_h)
            photo = Rect(x + off_x, y + off_y, photo_w, photo_h)
            cells.append(Cell(row=row, col=col, rect=rect, photo=photo))

    logger.debug(
        "letterbox plan %dx%d: cell %dx%d, photo %dx%d offset (%d, %d)",
        rows, cols, cell_w, cell_h, photo_w, photo_h, off_x, off_y,
    )
    return LayoutPlan(
        mode=LayoutMode.LETTERBOX,
        page=page,
        grid=grid,
        photo_width=photo_w,
        photo_height=photo_h,
        cells=tuple(cells),
    )


def plan_layout(
    page: PageSpec,
    grid: GridSpec,
    spacing: SpacingSpec,
    mode: LayoutMode = LayoutMode.UNIFORM_MAX,
) -> LayoutPlan:
    """Compute cell geometry for a sheet. Pure: same inputs, same plan."""
    mode = LayoutMode(mode)
    if mode is LayoutMode.LETTERBOX:
        return plan_letterbox(page, grid, spacing)
    return plan_uniform_max(page, grid, spacing)
