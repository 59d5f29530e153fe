"""Tests for tcogen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from tcogen.config import ConfigError, TcogenConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TcogenConfig)
    assert config.root == tmp_path.resolve()
    assert config.exclude_paths == []
    assert config.skip_suffixes == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".tcogen.yml").write_text(
        """
exclude_paths:
  - "vendor/"
  - build
skip_suffixes: _pb2.py
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.exclude_paths == ["vendor/", "build"]
    assert config.skip_suffixes == ["_pb2.py"]


def test_load_config_accepts_explicit_file(tmp_path: Path) -> None:
    custom = tmp_path / "settings" / "codegen.yml"
    custom.parent.mkdir()
    custom.write_text("exclude_paths: [generated/]\n", encoding="utf-8")

    config = load_config(custom)

    assert config.exclude_paths == ["generated/"]
    assert config.root == custom.parent.resolve()


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".tcogen.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).exclude_paths == []


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".tcogen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".tcogen.yml").write_text("exclude_paths: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_requires_explicit_file_to_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yml", required=True)
