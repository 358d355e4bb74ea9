"""Contour extraction, damage quantification and report rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import cv2
import numpy as np

from .config import AnnotationConfig
from .errors import DimensionError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DamageRegion:
    """A detected crack region that survived size filtering."""

    contour: np.ndarray
    area: float
    box: np.ndarray  # four (x, y) vertices of the minimum-area rectangle


@dataclass(slots=True)
class DetectionResult:
    """Annotated image and the measured share of damaged surface."""

    image: np.ndarray
    damage_percent: float
    regions: List[DamageRegion] = field(default_factory=list)


def binarize(intensity: np.ndarray, threshold: int) -> np.ndarray:
    """Return a 0/255 mask of the pixels at or above ``threshold``."""

    return np.where(intensity >= threshold, 255, 0).astype(np.uint8)


def find_damage_regions(intensity: np.ndarray, config: AnnotationConfig) -> List[DamageRegion]:
    """Extract the external contours of ``intensity`` longer than the size threshold."""

    if intensity.ndim != 2:
        raise DimensionError(f"intensity image must be single channel, got shape {intensity.shape}")
    mask = binarize(intensity, config.bin_threshold)
    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)

    regions = []
    for contour in contours:
        if len(contour) <= config.size_threshold:
            continue
        area = float(cv2.contourArea(contour))
        box = cv2.boxPoints(cv2.minAreaRect(contour)).astype(np.int32)
        regions.append(DamageRegion(contour=contour, area=area, box=box))
    logger.debug("kept %d of %d contours", len(regions), len(contours))
    return regions


def format_damage(percent: float) -> str:
    return f"Damage: {percent:.2f}%"


def _fill(image: np.ndarray, contour: np.ndarray, config: AnnotationConfig) -> None:
    if config.overlay_alpha >= 1.0:
        cv2.fillPoly(image, [contour], config.fill_color)
        return
    region = np.zeros(image.shape[:2], dtype=np.uint8)
    cv2.fillPoly(region, [contour], 255)
    inside = region.astype(bool)
    tint = np.array(config.fill_color, dtype=np.float32)
    blended = image[inside].astype(np.float32) * (1.0 - config.overlay_alpha) + tint * config.overlay_alpha
    image[inside] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def draw_report(image: np.ndarray, regions: List[DamageRegion], percent: float, config: AnnotationConfig) -> None:
    """Draw regions and the damage caption onto ``image`` in place.

    Layers are composited in order: fill, outline, bounding box, caption.
    """

    for region in regions:
        _fill(image, region.contour, config)
        cv2.polylines(image, [region.contour], True, config.outline_color, 1)
        for idx in range(4):
            start = tuple(int(v) for v in region.box[idx])
            end = tuple(int(v) for v in region.box[(idx + 1) % 4])
            cv2.line(image, start, end, config.box_color, 1)

    text = format_damage(percent)
    font = cv2.FONT_HERSHEY_SIMPLEX
    cv2.putText(
        image, text, config.text_origin, font, config.text_scale, config.text_outline_color, config.text_outline_thickness
    )
    cv2.putText(image, text, config.text_origin, font, config.text_scale, config.text_color, config.text_thickness)


def annotate(
    source: np.ndarray, intensity: np.ndarray, config: Optional[AnnotationConfig] = None
) -> DetectionResult:
    """Quantify the damage in ``intensity`` and render it over a copy of ``source``."""

    config = config or AnnotationConfig()
    config.validate()
    if source.shape[:2] != intensity.shape[:2]:
        raise DimensionError(
            f"source {source.shape[:2]} and intensity {intensity.shape[:2]} sizes differ"
        )

    regions = find_damage_regions(intensity, config)
    total_area = sum(region.area for region in regions)
    height, width = source.shape[:2]
    percent = 100.0 * total_area / (width * height)

    canvas = source.copy()
    draw_report(canvas, regions, percent, config)
    return DetectionResult(image=canvas, damage_percent=percent, regions=regions)
