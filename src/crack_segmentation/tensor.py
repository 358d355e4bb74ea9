"""Conversion of normalized BGR images into the model's input tensor."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .config import MODEL_INPUT_SIZE
from .errors import DimensionError

_SCALE = np.float32(255.0)
_MEAN = np.float32(0.5)
_STD = np.float32(0.5)


def normalize_values(values: np.ndarray) -> np.ndarray:
    """Map raw byte samples from ``[0, 255]`` linearly onto ``[-1, 1]``."""

    return ((values.astype(np.float32) / _SCALE) - _MEAN) / _STD


def to_tensor(image: np.ndarray, size: Tuple[int, int] = MODEL_INPUT_SIZE) -> np.ndarray:
    """Convert an interleaved BGR image into a planar RGB ``float32[1, 3, H, W]`` tensor.

    Channel 0 of the tensor holds red, 1 green and 2 blue. Each plane is
    contiguous and row-major, so the flat index of a sample is
    ``channel * H * W + row * W + col``.
    """

    width, height = size
    expected = (height, width, 3)
    if image.shape != expected:
        raise DimensionError(f"expected a BGR image of shape {expected}, got {image.shape}")

    rgb = image[..., ::-1]
    planar = np.transpose(rgb, (2, 0, 1))
    tensor = np.ascontiguousarray(normalize_values(planar)[np.newaxis], dtype=np.float32)
    return tensor
