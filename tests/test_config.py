"""Tests for scripts/orchestra2md/config.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from orchestra2md.config import ConfigError, GeneratorConfig, config_from_mapping, load_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "orchestra2md.yaml"
    path.write_text(text)
    return path


class TestDefaults:
    def test_default_values(self) -> None:
        config = GeneratorConfig()
        assert config.paragraph_delimiter == "/P/"
        assert config.include_pedigree is False
        assert config.include_fixml is False


class TestLoadConfig:
    def test_all_settings(self, tmp_path: Path) -> None:
        path = _write(tmp_path, 'paragraph_delimiter: "<br>"\ninclude_pedigree: true\n'
                                "include_fixml: true\n")
        assert load_config(path) == GeneratorConfig("<br>", True, True)

    def test_partial_settings_keep_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "include_pedigree: true\n")
        assert load_config(path) == GeneratorConfig(include_pedigree=True)

    def test_empty_file_yields_defaults(self, tmp_path: Path) -> None:
        assert load_config(_write(tmp_path, "")) == GeneratorConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to parse YAML"):
            load_config(_write(tmp_path, "include_pedigree: [true\n"))

    def test_top_level_not_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(_write(tmp_path, "- include_pedigree\n"))


class TestConfigValidation:
    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown setting"):
            config_from_mapping({"include_pedigre": True})

    def test_wrong_type(self) -> None:
        with pytest.raises(ConfigError, match="'include_fixml' .* must be bool"):
            config_from_mapping({"include_fixml": "yes please"})

    def test_int_is_not_bool(self) -> None:
        with pytest.raises(ConfigError):
            config_from_mapping({"include_pedigree": 1})

    def test_empty_delimiter(self) -> None:
        with pytest.raises(ConfigError, match="must not be empty"):
            config_from_mapping({"paragraph_delimiter": ""})

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)
