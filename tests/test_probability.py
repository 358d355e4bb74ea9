"""Tests for sigmoid activation and min-max rescaling of model logits."""

import warnings

import numpy as np
import pytest

from crack_segmentation.errors import DimensionError, InferenceError
from crack_segmentation.probability import sigmoid, to_intensity_image

SIZE = (8, 4)


def test_sigmoid_is_stable_for_extreme_logits() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        values = sigmoid(np.array([-1000.0, -10.0, 0.0, 10.0, 1000.0, -np.inf, np.inf]))

    assert np.all(np.isfinite(values))
    assert values[0] == 0.0
    assert values[2] == 0.5
    assert values[4] == 1.0
    assert values[1] == pytest.approx(1.0 - values[3])
    assert (values[5], values[6]) == (0.0, 1.0)


def test_flat_logits_fall_back_to_empty_image() -> None:
    intensity = to_intensity_image(np.zeros((1, 1, 4, 8), dtype=np.float32), SIZE)

    assert intensity.shape == (4, 8)
    assert intensity.dtype == np.uint8
    assert not intensity.any()


def test_range_is_stretched_to_full_byte_scale() -> None:
    raw = np.zeros(32, dtype=np.float32)
    raw[3] = 10.0
    raw[17] = -10.0

    intensity = to_intensity_image(raw, SIZE)

    assert intensity.shape == (4, 8)
    assert intensity[0, 3] == 255
    assert intensity[2, 1] == 0
    assert intensity[0, 0] in (127, 128)


def test_intensity_is_monotonic_in_logits() -> None:
    raw = np.linspace(-6.0, 6.0, 32, dtype=np.float32)

    intensity = to_intensity_image(raw, SIZE).ravel()

    assert intensity[0] == 0
    assert intensity[-1] == 255
    assert np.all(np.diff(intensity.astype(int)) >= 0)


def test_flat_and_batched_layouts_agree() -> None:
    raw = np.random.default_rng(1).normal(size=32).astype(np.float32)

    np.testing.assert_array_equal(
        to_intensity_image(raw, SIZE), to_intensity_image(raw.reshape(1, 1, 4, 8), SIZE)
    )


def test_wrong_element_count_is_rejected() -> None:
    with pytest.raises(DimensionError):
        to_intensity_image(np.zeros(31, dtype=np.float32), SIZE)


def test_nan_logits_are_reported_as_inference_failure() -> None:
    raw = np.zeros(32, dtype=np.float32)
    raw[5] = np.nan

    with pytest.raises(InferenceError):
        to_intensity_image(raw, SIZE)


def test_min_max_matches_plain_scaling_for_confident_background() -> None:
    raw = np.full(32, -12.0, dtype=np.float32)
    raw[:4] = (-2.0, 0.0, 2.0, 8.0)

    intensity = to_intensity_image(raw, SIZE).ravel()

    probabilities = sigmoid(raw)
    spread = probabilities.max() - probabilities.min()
    plain = np.clip(np.rint(probabilities * 255.0 / spread), 0, 255).astype(np.uint8)
    np.testing.assert_array_equal(intensity, plain)
    np.testing.assert_array_equal(intensity[:4], [30, 128, 225, 255])
    assert not intensity[4:].any()
