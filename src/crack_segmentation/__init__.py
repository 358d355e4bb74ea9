"""Top-level package for crack segmentation and damage reporting."""

from .contours import DetectionResult
from .pipeline import CrackDetectionPipeline, PipelineArtifact

__all__ = ["CrackDetectionPipeline", "DetectionResult", "PipelineArtifact"]
