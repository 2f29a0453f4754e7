"""
Тесты загрузки ponyml.yaml.
"""

from pathlib import Path

import pytest

from ponyml.config import (
    DEFAULT_CONFIG,
    ParserConfig,
    config_from_mapping,
    find_config,
    load_config,
    max_depth_ceiling,
)
from ponyml.errors import ConfigError, PonymlUserError
from tests.infrastructure import write


def test_missing_file_gives_defaults(tmp_path: Path):
    cfg = load_config(tmp_path / "ponyml.yaml")
    assert cfg == DEFAULT_CONFIG
    assert cfg.max_depth == 128
    assert cfg.strict_closing_names is False


def test_empty_file_gives_defaults(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "")
    assert load_config(path) == ParserConfig()


def test_values_are_loaded(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "max_depth: 16\nstrict_closing_names: true\n")
    assert load_config(path) == ParserConfig(max_depth=16, strict_closing_names=True)


def test_partial_config_keeps_other_defaults(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "strict_closing_names: true\n")
    cfg = load_config(path)
    assert cfg.strict_closing_names is True
    assert cfg.max_depth == DEFAULT_CONFIG.max_depth


def test_unknown_keys(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "max_depth: 4\ncolour: blue\n")
    with pytest.raises(ConfigError, match="unknown keys: colour"):
        load_config(path)


@pytest.mark.parametrize("value", ["0", "-3", "deep", "true", "1.5"])
def test_invalid_max_depth(tmp_path: Path, value: str):
    path = write(tmp_path / "ponyml.yaml", f"max_depth: {value}\n")
    with pytest.raises(ConfigError, match="max_depth must be a positive integer"):
        load_config(path)


def test_invalid_strict_flag(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "strict_closing_names: sometimes\n")
    with pytest.raises(ConfigError, match="strict_closing_names must be a boolean"):
        load_config(path)


def test_top_level_must_be_mapping(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="top-level must be a mapping"):
        load_config(path)


def test_invalid_yaml(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "max_depth: [1\n")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(path)


def test_config_error_is_user_error():
    with pytest.raises(PonymlUserError):
        config_from_mapping({"max_depth": None})


def test_source_name_in_message():
    with pytest.raises(ConfigError, match="^custom.yaml: "):
        config_from_mapping({"nope": 1}, source="custom.yaml")


def test_find_config(tmp_path: Path):
    assert find_config(tmp_path) is None
    path = write(tmp_path / "ponyml.yaml", "max_depth: 8\n")
    assert find_config(tmp_path) == path


def test_max_depth_above_stack_capacity(tmp_path: Path):
    path = write(tmp_path / "ponyml.yaml", "max_depth: 100000\n")
    with pytest.raises(ConfigError, match="max_depth must not exceed"):
        load_config(path)


def test_max_depth_ceiling_is_accepted():
    ceiling = max_depth_ceiling()
    assert DEFAULT_CONFIG.max_depth <= ceiling
    assert config_from_mapping({"max_depth": ceiling}).max_depth == ceiling
