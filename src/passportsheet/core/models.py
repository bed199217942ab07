from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Passport photo: 35mm wide x 45mm tall
PASSPORT_RATIO = 35 / 45

# A4 at 300 DPI
A4_WIDTH_PX = 2480
A4_HEIGHT_PX = 3508

# Single photo export (roughly 35x45mm at ~680 DPI)
SINGLE_PHOTO_HEIGHT = 1200


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (not to even)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class PageSpec:
    """Fixed page size in pixels."""
    width: int = A4_WIDTH_PX
    height: int = A4_HEIGHT_PX


A4_PAGE = PageSpec()


@dataclass(frozen=True)
class CropRegion:
    """
    Crop rectangle in source-image pixel coordinates.

    The compositors trust the rectangle to lie inside the image; check with
    `within` before composing.
    """
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Crop size must be positive, got {self.width}x{self.height}")

    def as_box(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def within(self, image_w: int, image_h: int) -> bool:
        return self.x >= 0 and self.y >= 0 and self.x + self.width <= image_w and self.y + self.height <= image_h


@dataclass(frozen=True)
class GridSpec:
    rows: int
    cols: int

    @property
    def count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class SpacingSpec:
    """
    Spacing in page pixels.

    margin:
        Inset from every page edge.
    gap:
        Space between neighbouring cells.
    border:
        White band drawn inside each cell around the image. Does not take
        layout space.
    """
    margin: int = 0
    gap: int = 0
    border: int = 0


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, amount: int) -> "Rect":
        return Rect(self.x + amount, self.y + amount, self.width - 2 * amount, self.height - 2 * amount)

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def overlaps(self, other: "Rect") -> bool:
        if self.is_empty or other.is_empty:
            return False
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


class LayoutMode(str, Enum):
    # Largest 35:45 photo that fits, grid centered on the page
    UNIFORM_MAX = "uniform-max-photo"
    # Uniform cells from the margin, photo letterboxed inside each cell
    LETTERBOX = "cell-then-letterbox"


@dataclass(frozen=True)
class Cell:
    """
    One grid position.

    rect:
        Area allocated to the cell on the page.
    photo:
        Photo area inside the cell. Same as `rect` for UNIFORM_MAX.
    """
    row: int
    col: int
    rect: Rect
    photo: Rect


@dataclass(frozen=True)
class LayoutPlan:
    mode: LayoutMode
    page: PageSpec
    grid: GridSpec
    photo_width: int
    photo_height: int
    cells: Tuple[Cell, ...]

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.grid.rows and 0 <= col < self.grid.cols):
            raise IndexError(f"No cell at ({row}, {col}) in a {self.grid.rows}x{self.grid.cols} grid")
        return self.cells[row * self.grid.cols + col]

    def grid_bounds(self) -> Rect:
        """Bounding box of all cells (cells plus the gaps between them)."""
        first = self.cells[0].rect
        last = self.cells[-1].rect
        return Rect(first.x, first.y, last.right - first.x, last.bottom - first.y)


@dataclass(frozen=True)
class SheetParams:
    """
    User-facing sheet settings.

    rows, cols:
        Grid shape. The controls allow 1-10 each.
    margin:
        Page-edge inset in A4 pixels (0-400).
    gap:
        Space between photos in A4 pixels (0-200).
    border:
        White band inside each photo in A4 pixels. Also drives the border of
        the single photo export.
    mode:
        Which layout strategy places the photos.
    """
    rows: int = 5
    cols: int = 5
    margin: int = 20
    gap: int = 38
    border: int = 20
    mode: LayoutMode = LayoutMode.UNIFORM_MAX

    ROWS_RANGE = (1, 10)
    COLS_RANGE = (1, 10)
    GAP_RANGE = (0, 200)
    MARGIN_RANGE = (0, 400)

    def clamped(self) -> "SheetParams":
        """Return a copy with every value snapped into the control bounds."""
        def clamp(value: int, bounds: Tuple[int, int]) -> int:
            lo, hi = bounds
            return max(lo, min(hi, int(value)))

        return SheetParams(
            rows=clamp(self.rows, self.ROWS_RANGE),
            cols=clamp(self.cols, self.COLS_RANGE),
            margin=clamp(self.margin, self.MARGIN_RANGE),
            gap=clamp(self.gap, self.GAP_RANGE),
            border=max(0, int(self.border)),
            mode=self.mode,
        )

    def grid(self) -> GridSpec:
        return GridSpec(rows=self.rows, cols=self.cols)

    def spacing(self) -> SpacingSpec:
        return SpacingSpec(margin=self.margin, gap=self.gap, border=self.border)

