from __future__ import annotations

import json
from pathlib import Path

import pytest

from meanshift import ConfigurationError, DetectorConfig, load_config
from meanshift.config import DEFAULT_MIN_CONFIDENCE, DEFAULT_MIN_SAMPLE_SIZE


def test_defaults_are_valid() -> None:
    config = DetectorConfig().validate()
    assert config.min_confidence == DEFAULT_MIN_CONFIDENCE
    assert config.effective_min_sample_size == DEFAULT_MIN_SAMPLE_SIZE
    assert config.detector_options()["type"] == "scatter"


def test_from_mapping_flattens_sections() -> None:
    config = DetectorConfig.from_mapping(
        {
            "detector": {"type": "correlation"},
            "stream": {"window_size": "60", "block_size": 6},
            "correlation": {"marker_width": 5, "min_correlation": 0.4},
        }
    )
    assert config.window_size == 60
    assert config.block_size == 6
    assert config.detector_options() == {"type": "correlation", "marker_width": 5, "min_correlation": 0.4}


def test_from_mapping_ignores_unknown_keys(caplog: pytest.LogCaptureFixture) -> None:
    config = DetectorConfig.from_mapping({"min_sample_size": 8, "colour": "blue"})
    assert config.min_sample_size == 8
    assert "colour" in caplog.text


@pytest.mark.parametrize(
    "cfg",
    [
        {"window_size": 0},
        {"block_size": 500},
        {"min_confidence": 1.0},
        {"min_sample_size": -2},
        {"marker_width": 4},
        {"detector": "fourier"},
        {"window_size": "lots"},
    ],
)
def test_invalid_mappings_raise(cfg: dict) -> None:
    with pytest.raises(ConfigurationError):
        DetectorConfig.from_mapping(cfg)


def test_from_file_yaml_and_json(tmp_path: Path) -> None:
    yaml_path = tmp_path / "detector.yaml"
    yaml_path.write_text("detector:\n  min_confidence: 0.95\nstream:\n  window_size: 80\n", encoding="utf-8")
    json_path = tmp_path / "detector.json"
    json_path.write_text(json.dumps({"block_size": 4}), encoding="utf-8")

    assert DetectorConfig.from_file(yaml_path).min_confidence == 0.95
    assert DetectorConfig.from_file(yaml_path).window_size == 80
    assert DetectorConfig.from_file(json_path).block_size == 4


def test_from_file_requires_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        DetectorConfig.from_file(path)
    with pytest.raises(FileNotFoundError):
        DetectorConfig.from_file(tmp_path / "missing.yaml")


def test_load_config_uses_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "env.yaml"
    path.write_text("min_sample_size: 12\n", encoding="utf-8")
    monkeypatch.setenv("MEANSHIFT_CONFIG", str(path))
    assert load_config().min_sample_size == 12

    monkeypatch.delenv("MEANSHIFT_CONFIG")
    assert load_config() == DetectorConfig()
