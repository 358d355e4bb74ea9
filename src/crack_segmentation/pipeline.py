"""Pipeline orchestration for crack segmentation workflows."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np

from .config import PipelineConfig
from .contours import DetectionResult, annotate
from .data import ImageDataset, ImageSample, processed_path, read_image, write_image
from .errors import InferenceError
from .geometry import GeometryTransform, normalize_with_transform
from .inference import OnnxPredictor, Predictor
from .probability import to_intensity_image
from .tensor import to_tensor
from .visualization import save_visualization

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineArtifact:
    """Artifacts produced for each processed image."""

    normalized: np.ndarray
    transform: GeometryTransform
    intensity: np.ndarray
    result: DetectionResult
    source_path: Optional[Path] = None
    output_path: Optional[Path] = None
    visualization_path: Optional[Path] = None


class CrackDetectionPipeline:
    """Coordinate normalization, inference, post-processing and reporting.

    The pipeline keeps no state between calls; the predictor is the only
    shared resource and is expected to be loaded once by the caller.
    """

    def __init__(self, config: PipelineConfig, predictor: Optional[Predictor] = None) -> None:
        self._config = config
        self._predictor = predictor if predictor is not None else OnnxPredictor.from_config(config.model)

    def detect(self, image: np.ndarray) -> PipelineArtifact:
        """Run every stage on a decoded BGR image."""

        size = self._config.model.input_size
        normalized, transform = normalize_with_transform(image, size)
        tensor = to_tensor(normalized, size)
        logits = self._predict(tensor)
        intensity = to_intensity_image(logits, size)
        result = annotate(normalized, intensity, self._config.annotation)
        return PipelineArtifact(normalized=normalized, transform=transform, intensity=intensity, result=result)

    def detect_file(self, path: Path) -> Path:
        """Annotate the image at ``path`` and return the written report path.

        The report is written next to the input as ``<path>.processed<ext>``.
        It has the model input size (``config.model.input_size``, 544x384 by
        default), not the input's size: it is drawn on the rotated, scaled and
        cropped image the model saw.
        """

        path = Path(path)
        sample = ImageSample(path=path, image=read_image(path))
        return self._process_sample(sample, None).output_path

    async def detect_file_async(self, path: Path) -> Path:
        """Run `detect_file` on a worker thread so the caller's event loop stays free."""

        return await asyncio.to_thread(self.detect_file, path)

    def __iter__(self) -> Iterator[PipelineArtifact]:
        for sample in ImageDataset(self._config):
            yield self._process_sample(sample, self._batch_output_path(sample.path))

    def run(self) -> List[PipelineArtifact]:
        """Execute the pipeline over the dataset and log a summary per image."""

        artifacts = []
        for artifact in self:
            logger.info("%s", _format_summary(artifact))
            artifacts.append(artifact)
        return artifacts

    def _predict(self, tensor: np.ndarray) -> np.ndarray:
        logits = np.asarray(self._predictor.predict(tensor))
        expected = self._config.model.output_shape
        if logits.shape != expected:
            raise InferenceError(f"predictor returned shape {logits.shape}, expected {expected}")
        return logits

    def _process_sample(self, sample: ImageSample, destination: Optional[Path]) -> PipelineArtifact:
        artifact = self.detect(sample.image)
        artifact.source_path = sample.path
        if destination is None:
            destination = processed_path(sample.path, self._config.output_suffix)
        destination.parent.mkdir(parents=True, exist_ok=True)
        artifact.output_path = write_image(destination, artifact.result.image)
        artifact.visualization_path = self._maybe_save_visualization(artifact)
        logger.debug("wrote %s (%.2f%% damaged)", destination, artifact.result.damage_percent)
        return artifact

    def _batch_output_path(self, path: Path) -> Optional[Path]:
        if self._config.output_dir is None or self._config.dataset is None:
            return None
        relative = path.relative_to(self._config.dataset.image_root)
        return self._config.output_dir / processed_path(relative, self._config.output_suffix)

    def _maybe_save_visualization(self, artifact: PipelineArtifact) -> Optional[Path]:
        if not self._config.visualize or artifact.output_path is None:
            return None
        destination = artifact.output_path.with_name(artifact.output_path.stem + "_summary.png")
        title = artifact.source_path.name if artifact.source_path else None
        save_visualization(artifact.normalized, artifact.intensity, artifact.result, destination, title=title)
        return destination


def _format_summary(artifact: PipelineArtifact) -> str:
    name = artifact.source_path.name if artifact.source_path else "<memory>"
    result = artifact.result
    return f"{name}: damage={result.damage_percent:.2f}%, regions={len(result.regions)}"
