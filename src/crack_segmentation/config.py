"""Configuration objects used across the crack segmentation package."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

# Model input resolution as (width, height).
MODEL_INPUT_SIZE: Tuple[int, int] = (544, 384)

BGR = Tuple[int, int, int]


def _default_model_path() -> Path:
    return Path(os.environ.get("CRACK_MODEL_PATH", str(Path("model") / "model.onnx")))


@dataclass(slots=True)
class ModelConfig:
    """Configuration of the ONNX segmentation model and its tensor slots."""

    model_path: Path = field(default_factory=_default_model_path)
    input_size: Tuple[int, int] = MODEL_INPUT_SIZE
    input_name: str = "input"
    output_name: str = "fused"
    providers: Sequence[str] = ("CPUExecutionProvider",)

    @property
    def input_shape(self) -> Tuple[int, int, int, int]:
        width, height = self.input_size
        return (1, 3, height, width)

    @property
    def output_shape(self) -> Tuple[int, int, int, int]:
        width, height = self.input_size
        return (1, 1, height, width)


@dataclass(slots=True)
class AnnotationConfig:
    """Thresholds and drawing style for the damage report overlay."""

    bin_threshold: int = 35
    size_threshold: int = 16
    fill_color: BGR = (0, 0, 255)
    overlay_alpha: float = 1.0
    outline_color: BGR = (0, 255, 0)
    box_color: BGR = (255, 255, 255)
    text_origin: Tuple[int, int] = (10, 40)
    text_scale: float = 1.0
    text_outline_color: BGR = (255, 0, 0)
    text_outline_thickness: int = 5
    text_color: BGR = (255, 255, 255)
    text_thickness: int = 1

    def validate(self) -> None:
        """Reject thresholds and blend factors outside their valid ranges."""

        if not 0 <= self.bin_threshold <= 255:
            raise ValueError("bin_threshold must be within [0, 255]")
        if self.size_threshold < 0:
            raise ValueError("size_threshold must be non-negative")
        if not 0.0 <= self.overlay_alpha <= 1.0:
            raise ValueError("overlay_alpha must be within [0, 1]")


@dataclass(slots=True)
class DatasetConfig:
    """Configuration for loading datasets from disk."""

    image_root: Path
    extensions: Sequence[str] = field(default_factory=lambda: (".jpg", ".jpeg", ".png", ".bmp"))

    def validate(self) -> None:
        """Ensure the dataset configuration points to a valid directory."""

        if not self.image_root.exists():
            msg = f"image_root {self.image_root} does not exist"
            raise FileNotFoundError(msg)
        if not self.image_root.is_dir():
            msg = f"image_root {self.image_root} is not a directory"
            raise NotADirectoryError(msg)


@dataclass(slots=True)
class PipelineConfig:
    """Top-level configuration passed to `CrackDetectionPipeline`."""

    dataset: Optional[DatasetConfig] = None
    model: ModelConfig = field(default_factory=ModelConfig)
    annotation: AnnotationConfig = field(default_factory=AnnotationConfig)
    output_suffix: str = ".processed"
    output_dir: Optional[Path] = None
    sample_limit: Optional[int] = None
    visualize: bool = False

    def iter_image_paths(self) -> Iterable[Path]:
        """Yield all image paths that match the configured extensions.

        Files produced by an earlier run (``name.ext.processed.ext``) are skipped.
        """

        if self.dataset is None:
            raise ValueError("PipelineConfig.dataset is required to iterate image paths")
        self.dataset.validate()
        count = 0
        for path in sorted(self.dataset.image_root.rglob("*")):
            if self.sample_limit is not None and count >= self.sample_limit:
                break
            if path.suffix.lower() not in self.dataset.extensions:
                continue
            if any(suffix.startswith(self.output_suffix) for suffix in path.suffixes):
                continue
            yield path
            count += 1
