"""Post-processing of raw model logits into a visible intensity map."""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .config import MODEL_INPUT_SIZE
from .errors import DimensionError, InferenceError

logger = logging.getLogger(__name__)


def sigmoid(values: np.ndarray) -> np.ndarray:
    """Logistic sigmoid that never overflows, whatever the magnitude of the input."""

    x = np.asarray(values, dtype=np.float64)
    out = np.empty_like(x)
    positive = x >= 0
    out[positive] = 1.0 / (1.0 + np.exp(-x[positive]))
    exp_x = np.exp(x[~positive])
    out[~positive] = exp_x / (1.0 + exp_x)
    return out


def to_intensity_image(raw: np.ndarray, size: Tuple[int, int] = MODEL_INPUT_SIZE) -> np.ndarray:
    """Turn a logit map into an 8-bit single channel image of shape ``(H, W)``.

    Probabilities are min-max rescaled so the least likely pixel becomes 0 and
    the most likely 255. A flat probability map has no range to rescale and
    yields an all-zero image.
    """

    width, height = size
    values = np.asarray(raw)
    if values.size != width * height:
        raise DimensionError(
            f"expected {width * height} logits for a {width}x{height} map, got {values.size}"
        )
    if np.isnan(values).any():
        raise InferenceError("model output contains NaN logits")

    probabilities = sigmoid(values.reshape(height, width))
    low = float(probabilities.min())
    high = float(probabilities.max())
    spread = high - low
    if not spread > 0.0 or not np.isfinite(spread):
        logger.debug("flat probability map (min=max=%.6f), emitting empty intensity image", low)
        return np.zeros((height, width), dtype=np.uint8)

    scaled = np.rint((probabilities - low) * (255.0 / spread))
    return np.clip(scaled, 0, 255).astype(np.uint8)
