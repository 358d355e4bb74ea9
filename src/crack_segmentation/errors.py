"""Exceptions raised by the crack segmentation pipeline."""

from __future__ import annotations


class CrackSegmentationError(Exception):
    """Base class for every pipeline failure."""


class DecodeError(CrackSegmentationError):
    """The input image is missing, unreadable or corrupt."""


class DimensionError(CrackSegmentationError, ValueError):
    """An image or tensor does not have the shape a stage requires."""


class InferenceError(CrackSegmentationError):
    """The predictor failed or produced an unusable output."""


class EncodeError(CrackSegmentationError):
    """The annotated image could not be written."""
