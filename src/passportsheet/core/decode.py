from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image, ImageOps

from passportsheet.core.errors import ImageDecodeError

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, BinaryIO]


@dataclass(frozen=True, eq=False)
class SourceImage:
    """
    A fully decoded source photo (RGB, EXIF orientation applied).

    Only `decode_image` builds these from files, so anything holding one
    never sees a partially loaded image.
    """
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_pil(cls, img: Image.Image) -> "SourceImage":
        if img.mode != "RGB":
            img = img.convert("RGB")
        pixels = np.array(img, dtype=np.uint8)
        pixels.setflags(write=False)
        return cls(pixels=pixels)


def decode_image(source: ImageSource) -> SourceImage:
    """
    Open and fully decode an image from a path, raw bytes or a binary file.

    Raises ImageDecodeError for anything Pillow cannot read.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    try:
        with Image.open(source) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            decoded = SourceImage.from_pil(img)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    logger.debug("decoded source image %dx%d", decoded.width, decoded.height)
    return decoded
