from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from passportsheet.core.raster import Raster

logger = logging.getLogger(__name__)

SHEET_FILENAME = "passport_sheet_A4.png"


@dataclass(frozen=True)
class ExportPaths:
    """
    Where exported sheets and single photos are written.
    """
    base_dir: Path
    sheet_image: Path

    @staticmethod
    def default(base_dir: Optional[Union[str, Path]] = None) -> "ExportPaths":
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        base.mkdir(parents=True, exist_ok=True)
        return ExportPaths(base_dir=base, sheet_image=base / SHEET_FILENAME)

    def single_photo(self, timestamp_ms: Optional[int] = None) -> Path:
        """A fresh single-photo filename, stamped with epoch milliseconds."""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return self.base_dir / f"passport_photo_{timestamp_ms}.png"


def save_raster(raster: Raster, path: Union[str, Path]) -> Path:
    """Encode `raster` to `path`: JPEG (quality 95) for .jpg/.jpeg, otherwise by suffix (PNG by default)."""
    path = Path(path)
    img = raster.to_pil()
    if path.suffix.lower() in (".jpg", ".jpeg"):
        img.save(path, format="JPEG", quality=95, optimize=True)
    elif not path.suffix:
        img.save(path, format="PNG")
    else:
        img.save(path)
    logger.debug("saved %dx%d image to %s", raster.width, raster.height, path)
    return path
