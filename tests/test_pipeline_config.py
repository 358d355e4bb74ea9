"""Unit tests validating configuration behavior."""

from pathlib import Path

import pytest

from crack_segmentation.config import AnnotationConfig, DatasetConfig, ModelConfig, PipelineConfig


def test_iter_image_paths_respects_extension_and_limit(tmp_path: Path) -> None:
    valid = tmp_path / "a.jpg"
    valid.write_bytes(b"test")
    invalid = tmp_path / "b.txt"
    invalid.write_text("noop", encoding="utf-8")
    (tmp_path / "c.jpg").write_bytes(b"test")

    config = PipelineConfig(dataset=DatasetConfig(image_root=tmp_path), sample_limit=1)
    paths = list(config.iter_image_paths())

    assert paths == [valid]


def test_iter_image_paths_handles_zero_limit(tmp_path: Path) -> None:
    (tmp_path / "a.jpg").write_bytes(b"test")

    config = PipelineConfig(dataset=DatasetConfig(image_root=tmp_path), sample_limit=0)

    assert list(config.iter_image_paths()) == []


def test_iter_image_paths_skips_previous_reports(tmp_path: Path) -> None:
    valid = tmp_path / "wall.png"
    valid.write_bytes(b"data")
    (tmp_path / "wall.png.processed.png").write_bytes(b"report")

    config = PipelineConfig(dataset=DatasetConfig(image_root=tmp_path))

    assert list(config.iter_image_paths()) == [valid]


def test_iter_image_paths_requires_dataset() -> None:
    with pytest.raises(ValueError):
        list(PipelineConfig().iter_image_paths())


def test_dataset_validate_rejects_missing_dir(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    dataset = DatasetConfig(image_root=missing)

    with pytest.raises(FileNotFoundError):
        dataset.validate()


def test_dataset_validate_rejects_file(tmp_path: Path) -> None:
    path = tmp_path / "a.jpg"
    path.write_bytes(b"test")

    with pytest.raises(NotADirectoryError):
        DatasetConfig(image_root=path).validate()


def test_model_config_shapes_follow_input_size() -> None:
    config = ModelConfig()

    assert config.input_size == (544, 384)
    assert config.input_shape == (1, 3, 384, 544)
    assert config.output_shape == (1, 1, 384, 544)
    assert (config.input_name, config.output_name) == ("input", "fused")


def test_model_path_can_come_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    model = tmp_path / "crack.onnx"
    monkeypatch.setenv("CRACK_MODEL_PATH", str(model))

    assert ModelConfig().model_path == model


@pytest.mark.parametrize(
    "kwargs",
    [{"bin_threshold": 256}, {"size_threshold": -1}, {"overlay_alpha": 1.5}],
)
def test_annotation_config_rejects_out_of_range_values(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        AnnotationConfig(**kwargs).validate()
