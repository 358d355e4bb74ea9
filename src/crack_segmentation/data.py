"""Image decoding, encoding and dataset helpers for the crack segmentation pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

from .config import PipelineConfig
from .errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImageSample:
    """In-memory representation of an image and associated metadata."""

    path: Path
    image: np.ndarray


def read_image(path: Path) -> np.ndarray:
    """Decode ``path`` as a 3-channel BGR image."""

    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"image {path} does not exist")
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None or image.size == 0:
        raise DecodeError(f"image {path} could not be decoded")
    return image


def write_image(path: Path, image: np.ndarray) -> Path:
    """Encode ``image`` to ``path``, the format following the file extension."""

    path = Path(path)
    try:
        written = cv2.imwrite(str(path), image)
    except cv2.error as exc:
        raise EncodeError(f"image {path} could not be written: {exc}") from exc
    if not written:
        raise EncodeError(f"image {path} could not be written")
    return path


def processed_path(path: Path, suffix: str = ".processed") -> Path:
    """Return the output path ``<path><suffix><ext>`` next to the input."""

    path = Path(path)
    return path.with_name(path.name + suffix + path.suffix)


class ImageDataset:
    """Iterable dataset that streams image samples from disk."""

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config

    def __iter__(self) -> Iterator[ImageSample]:
        for image_path in self._config.iter_image_paths():
            try:
                image = read_image(image_path)
            except DecodeError as exc:
                logger.warning("skipping %s: %s", image_path, exc)
                continue
            yield ImageSample(path=image_path, image=image)
