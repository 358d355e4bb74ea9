"""Command line entry points for the crack segmentation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import DatasetConfig, ModelConfig, PipelineConfig
from .pipeline import CrackDetectionPipeline

app = typer.Typer(help="Segment surface cracks and render damage reports.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _model_config(model_path: Optional[Path]) -> ModelConfig:
    if model_path is None:
        return ModelConfig()
    return ModelConfig(model_path=model_path)


@app.command()
def detect(
    image: Path = typer.Argument(..., help="Image to analyse."),
    model_path: Optional[Path] = typer.Option(None, help="ONNX model file (defaults to $CRACK_MODEL_PATH)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Annotate a single image and print where the report was written."""

    _configure_logging(verbose)
    pipeline = CrackDetectionPipeline(PipelineConfig(model=_model_config(model_path)))
    output = pipeline.detect_file(image)
    typer.echo(str(output))


@app.command()
def run(
    image_root: Path = typer.Option(..., help="Directory containing crack images to process."),
    output_dir: Optional[Path] = typer.Option(None, help="Directory where reports will be written."),
    sample_limit: Optional[int] = typer.Option(None, help="Limit the number of samples processed."),
    visualize: bool = typer.Option(False, help="Persist a summary panel for each image."),
    model_path: Optional[Path] = typer.Option(None, help="ONNX model file (defaults to $CRACK_MODEL_PATH)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Execute the crack segmentation pipeline over a directory."""

    _configure_logging(verbose)
    config = PipelineConfig(
        dataset=DatasetConfig(image_root=image_root),
        model=_model_config(model_path),
        output_dir=output_dir,
        sample_limit=sample_limit,
        visualize=visualize,
    )
    pipeline = CrackDetectionPipeline(config)
    for artifact in pipeline.run():
        typer.echo(f"{artifact.output_path}: {artifact.result.damage_percent:.2f}%")


def main() -> None:  # pragma: no cover - Typer handles invocation
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
