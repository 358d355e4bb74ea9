"""Visualization helpers for crack segmentation results."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np

from .contours import DetectionResult


def _to_rgb(image: np.ndarray) -> np.ndarray:
    """Return a float RGB copy in ``[0, 1]`` of a BGR or grayscale byte image."""

    if image.ndim == 2:
        normalized = np.clip(image, 0, 255).astype(np.float32) / 255.0
        return np.stack([normalized] * 3, axis=-1)
    return np.clip(image[..., ::-1], 0, 255).astype(np.float32) / 255.0


def save_visualization(
    normalized: np.ndarray,
    intensity: np.ndarray,
    result: DetectionResult,
    destination: Path,
    title: Optional[str] = None,
) -> None:
    """Persist a three-panel summary: model input, crack intensity and report."""

    import matplotlib.pyplot as plt  # Imported lazily to avoid hard dependency during tests.

    destination.parent.mkdir(parents=True, exist_ok=True)
    fig, axes = plt.subplots(1, 3, figsize=(12, 4))

    axes[0].imshow(_to_rgb(normalized))
    axes[0].set_title("Model input")
    axes[0].axis("off")

    axes[1].imshow(intensity, cmap="gray", vmin=0, vmax=255)
    axes[1].set_title("Crack intensity")
    axes[1].axis("off")

    axes[2].imshow(_to_rgb(result.image))
    axes[2].set_title(f"Damage {result.damage_percent:.2f}%")
    axes[2].axis("off")

    if title:
        fig.suptitle(title)

    fig.tight_layout()
    fig.savefig(destination, dpi=200)
    plt.close(fig)
