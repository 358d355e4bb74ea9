"""Geometric normalization of arbitrary images to the model input resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from .config import MODEL_INPUT_SIZE
from .errors import DimensionError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeometryTransform:
    """What `normalize_with_transform` did to reach the target size.

    A point ``(x, y)`` of the (possibly rotated) source maps to
    ``(x * scale - offset[0], y * scale - offset[1])`` in the normalized image.
    """

    rotated: bool = False
    scale: float = 1.0
    offset: Tuple[int, int] = (0, 0)


def _matches(image: np.ndarray, size: Tuple[int, int]) -> bool:
    height, width = image.shape[:2]
    return (width, height) == tuple(size)


def normalize_with_transform(
    image: np.ndarray, size: Tuple[int, int] = MODEL_INPUT_SIZE
) -> Tuple[np.ndarray, GeometryTransform]:
    """Rotate, scale-to-cover and center-crop ``image`` to ``size`` (width, height).

    The result is either ``image`` itself (already at size), a freshly resized
    array, or a crop view sharing storage with the resized array. Aspect ratio
    is always preserved.
    """

    target_width, target_height = size
    if target_width <= 0 or target_height <= 0:
        raise DimensionError("target dimensions must be positive integers")
    if image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
        raise DimensionError(f"cannot normalize an empty image of shape {image.shape}")

    transform = GeometryTransform()
    working = image
    while not _matches(working, size):
        height, width = working.shape[:2]
        if height > width and not transform.rotated:
            # Tall inputs are turned landscape once, then the size check restarts.
            working = cv2.rotate(working, cv2.ROTATE_90_CLOCKWISE)
            transform.rotated = True
            logger.debug("rotated %dx%d input clockwise", width, height)
            continue

        scale = max(target_width / width, target_height / height)
        scaled_width = max(target_width, int(round(width * scale)))
        scaled_height = max(target_height, int(round(height * scale)))
        working = cv2.resize(working, (scaled_width, scaled_height), interpolation=cv2.INTER_LINEAR)
        transform.scale = scale

        offset_x = (scaled_width - target_width) // 2
        offset_y = (scaled_height - target_height) // 2
        transform.offset = (offset_x, offset_y)
        if offset_x or offset_y or not _matches(working, size):
            working = working[offset_y : offset_y + target_height, offset_x : offset_x + target_width]
        logger.debug(
            "scaled %dx%d by %.4f to %dx%d, crop offset (%d, %d)",
            width,
            height,
            scale,
            scaled_width,
            scaled_height,
            offset_x,
            offset_y,
        )
        break

    return working, transform


def normalize(image: np.ndarray, size: Tuple[int, int] = MODEL_INPUT_SIZE) -> np.ndarray:
    """Return ``image`` normalized to ``size`` (width, height)."""

    normalized, _ = normalize_with_transform(image, size)
    return normalized
