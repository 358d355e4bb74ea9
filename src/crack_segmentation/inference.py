"""Boundary to the pretrained segmentation model.

The rest of the package only relies on the `Predictor` protocol: a pure
function from a ``float32[1, 3, H, W]`` tensor to a ``float32[1, 1, H, W]``
logit map. `OnnxPredictor` implements it with ONNX Runtime. The runtime is
imported inside `OnnxPredictor.from_config` so the package can be used with
other predictors without onnxruntime installed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Protocol, Sequence, Tuple

import numpy as np

from .config import ModelConfig
from .errors import InferenceError

logger = logging.getLogger(__name__)


class Predictor(Protocol):
    """Protocol for crack segmentation model implementations."""

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        ...


def resolve_model_path(model_path: Path | str) -> Path:
    """Return an existing model file for ``model_path``, searching the working directory."""

    path = Path(model_path)
    if path.is_file():
        return path
    if not path.is_absolute():
        candidate = Path.cwd() / path
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"segmentation model not found: {model_path}")


class OnnxPredictor:
    """ONNX Runtime session bound to the model's named input and output slots.

    Calls to `predict` are serialized with a lock, so a single instance can be
    shared by pipelines running on several threads.
    """

    def __init__(
        self,
        session: Any,
        input_name: str = "input",
        output_name: str = "fused",
        output_shape: Tuple[int, ...] | None = None,
    ) -> None:
        self._session = session
        self._input_name = input_name
        self._output_name = output_name
        self._output_shape = output_shape
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ModelConfig) -> "OnnxPredictor":
        """Load the model once and return a ready-to-call predictor."""

        import onnxruntime as ort

        resolved = resolve_model_path(config.model_path)
        providers: Sequence[str] = list(config.providers)
        session = ort.InferenceSession(str(resolved), providers=providers)
        logger.info("loaded segmentation model %s (%s)", resolved, session.get_providers()[0])
        return cls(
            session,
            input_name=config.input_name,
            output_name=config.output_name,
            output_shape=config.output_shape,
        )

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        feed = {self._input_name: np.ascontiguousarray(tensor, dtype=np.float32)}
        try:
            with self._lock:
                outputs = self._session.run([self._output_name], feed)
        except Exception as exc:
            raise InferenceError(f"model inference failed: {exc}") from exc

        if not outputs:
            raise InferenceError(f"model returned no value for output {self._output_name!r}")
        output = np.asarray(outputs[0], dtype=np.float32)
        if self._output_shape is not None and output.shape != tuple(self._output_shape):
            raise InferenceError(
                f"model output {self._output_name!r} has shape {output.shape}, "
                f"expected {tuple(self._output_shape)}"
            )
        return output
