from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

# MediaPipe for face landmarks
import mediapipe as mp

from passportsheet.core.crop import fit_crop_to_bounds
from passportsheet.core.decode import SourceImage
from passportsheet.core.errors import FaceNotFoundError
from passportsheet.core.models import PASSPORT_RATIO, CropRegion, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LandmarkPx:
    x: float
    y: float


def detect_face_landmarks(source: SourceImage) -> Tuple[LandmarkPx, LandmarkPx, LandmarkPx]:
    """
    Detect face mesh landmarks and return (nose_tip, forehead_top, chin) pixel coords.

    Uses MediaPipe FaceMesh landmark indices:
      - nose tip: 1
      - forehead/top: 10  (approx top of forehead)
      - chin: 152
    """
    mp_face_mesh = mp.solutions.face_mesh

    with mp_face_mesh.FaceMesh(
        static_image_mode=True,
        refine_landmarks=True,
        max_num_faces=1,
        min_detection_confidence=0.5,
    ) as face_mesh:
        results = face_mesh.process(np.ascontiguousarray(source.pixels))

    if not results.multi_face_landmarks:
        raise FaceNotFoundError("No face detected. Try a clearer, front-facing photo or pass --crop.")

    h, w = source.height, source.width
    lm = results.multi_face_landmarks[0].landmark

    def to_px(i: int) -> LandmarkPx:
        return LandmarkPx(x=lm[i].x * w, y=lm[i].y * h)

    nose_tip, forehead, chin = to_px(1), to_px(10), to_px(152)
    if chin.y <= forehead.y:
        raise FaceNotFoundError("Face landmarks looked inconsistent. Try a different image.")
    return nose_tip, forehead, chin


def crop_around_face(
    image_w: int,
    image_h: int,
    nose: LandmarkPx,
    forehead: LandmarkPx,
    chin: LandmarkPx,
    head_ratio: float = 0.62,
) -> CropRegion:
    """
    Frame a 35:45 crop where forehead-to-chin spans `head_ratio` of the height.

    Horizontally centered on the nose tip, vertically on the forehead/chin
    midpoint, then moved (or shrunk) to stay inside the image.
    """
    if not (0.0 < head_ratio < 1.0):
        raise ValueError(f"head_ratio must be between 0 and 1, got {head_ratio}")
    head_px = chin.y - forehead.y
    crop_h = max(1, round_half_up(head_px / head_ratio))
    crop_w = max(1, round_half_up(crop_h * PASSPORT_RATIO))
    center_y = (forehead.y + chin.y) / 2.0

    crop = CropRegion(
        x=round_half_up(nose.x - crop_w / 2.0),
        y=round_half_up(center_y - crop_h / 2.0),
        width=crop_w,
        height=crop_h,
    )
    return fit_crop_to_bounds(crop, image_w, image_h)


def face_crop(source: SourceImage, head_ratio: float = 0.62) -> CropRegion:
    """Suggest a passport crop for `source` from its detected face."""
    nose, forehead, chin = detect_face_landmarks(source)
    crop = crop_around_face(source.width, source.height, nose, forehead, chin, head_ratio=head_ratio)
    logger.debug("face crop %s (head %.0fpx)", crop, chin.y - forehead.y)
    return crop
