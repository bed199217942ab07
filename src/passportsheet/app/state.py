from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Optional, Union

from passportsheet.core.compositor import compose_sheet, compose_single
from passportsheet.core.decode import SourceImage, decode_image
from passportsheet.core.layout import layout_problem, plan_layout
from passportsheet.core.models import A4_PAGE, CropRegion, LayoutPlan, PageSpec, SheetParams
from passportsheet.core.raster import Raster

logger = logging.getLogger(__name__)

DecodeCallback = Callable[[int, Optional[SourceImage], Optional[Exception]], None]


@dataclass
class SessionState:
    """
    Mutable state for a single sheet-making session.

    The compositors are pure; this object owns everything that changes
    (source image, crop, params) and gates rendering until all of it is
    present. Every change bumps `revision` so results computed for an older
    revision can be recognised and dropped.
    """
    # Input
    source_path: Optional[str] = None
    source: Optional[SourceImage] = None
    crop: Optional[CropRegion] = None

    # User params
    params: SheetParams = field(default_factory=SheetParams)
    page: PageSpec = A4_PAGE

    revision: int = 0

    def _bump(self) -> int:
        self.revision += 1
        return self.revision

    def set_source(self, source: SourceImage, path: Optional[str] = None) -> None:
        """New image: the old crop no longer applies."""
        self.source = source
        self.source_path = path
        self.crop = None
        self._bump()

    def set_crop(self, crop: Optional[CropRegion]) -> None:
        self.crop = crop
        self._bump()

    def update_params(self, **changes) -> SheetParams:
        """Apply control changes, snapped into the control bounds."""
        self.params = replace(self.params, **changes).clamped()
        self._bump()
        return self.params

    def load_source(self, path: Union[str, Path]) -> SourceImage:
        """Decode `path` and make it the session's image. Raises ImageDecodeError."""
        image = decode_image(path)
        self.set_source(image, str(path))
        return image

    def load_source_async(self, path: Union[str, Path], on_done: DecodeCallback) -> threading.Thread:
        """
        Decode `path` on a worker thread.

        `on_done(revision, image, error)` is called from the worker thread once
        decoding finishes; exactly one of `image` / `error` is set. The
        revision is the one current when decoding started, so the caller can
        compare it to `self.revision` and ignore a superseded result. The
        state itself is not modified; call `set_source` with the image.
        """
        started_at = self.revision

        def worker() -> None:
            image: Optional[SourceImage] = None
            err: Optional[Exception] = None
            try:
                image = decode_image(path)
            except Exception as e:
                err = e
                logger.warning("decoding %s failed: %s", path, e)
            on_done(started_at, image, err)

        t = threading.Thread(target=worker, daemon=True)
        t.start()
        return t

    def problem(self) -> Optional[str]:
        """Why rendering is not possible right now, or None when it is."""
        if self.source is None:
            return "No image loaded."
        if self.crop is None:
            return "No crop selected."
        if not self.crop.within(self.source.width, self.source.height):
            return (
                f"Crop {self.crop.width}x{self.crop.height} at ({self.crop.x}, {self.crop.y}) "
                f"is outside the {self.source.width}x{self.source.height} image."
            )
        return layout_problem(self.page, self.params.grid(), self.params.spacing())

    def is_ready(self) -> bool:
        return self.problem() is None

    def plan(self) -> Optional[LayoutPlan]:
        if layout_problem(self.page, self.params.grid(), self.params.spacing()) is not None:
            return None
        return plan_layout(self.page, self.params.grid(), self.params.spacing(), self.params.mode)

    def render_sheet(self) -> Optional[Raster]:
        """Compose the full page, or return None while inputs are incomplete."""
        problem = self.problem()
        if problem is not None:
            logger.debug("sheet not rendered: %s", problem)
            return None
        plan = self.plan()
        return compose_sheet(self.source, self.crop, plan, self.params.spacing())

    def render_single(self) -> Optional[Raster]:
        """Compose the single photo export, or return None while inputs are incomplete."""
        problem = self.problem()
        if problem is not None:
            logger.debug("single photo not rendered: %s", problem)
            return None
        return compose_single(self.source, self.crop, self.params.border, self.params.rows, page=self.page)

    def reset(self) -> None:
        """Clear all session state and restore default params."""
        self.source_path = None
        self.source = None
        self.crop = None
        self.params = SheetParams()
        self._bump()
