"""Generator configuration.

GeneratorConfig holds the three settings the mapping algorithm consumes. A
config may be loaded from a YAML mapping:

    paragraph_delimiter: "/P/"
    include_pedigree: true
    include_fixml: false

Public API:
    GeneratorConfig      — frozen dataclass of generator settings
    ConfigError          — raised when a config file is unreadable or invalid
    load_config(path)    → GeneratorConfig
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from orchestra2md.document import DEFAULT_PARAGRAPH_DELIMITER


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for MarkdownGenerator.

    paragraph_delimiter: token standing for a paragraph break inside a table
        cell (tables are single-line in Markdown).
    include_pedigree: output provenance attributes (added, updated, ...).
    include_fixml: output FIXML attributes (abbreviated names, categories).
    """

    paragraph_delimiter: str = DEFAULT_PARAGRAPH_DELIMITER
    include_pedigree: bool = False
    include_fixml: bool = False


class ConfigError(ValueError):
    """Raised when a config file cannot be read or has invalid settings."""


_EXPECTED_TYPES: dict[str, type] = {
    "paragraph_delimiter": str,
    "include_pedigree": bool,
    "include_fixml": bool,
}


def config_from_mapping(data: dict[str, Any], source: str = "<mapping>") -> GeneratorConfig:
    """Build a GeneratorConfig from a mapping, rejecting unknown keys and bad types."""
    known = {f.name for f in fields(GeneratorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown setting(s) {unknown} in {source}. "
            f"Valid settings: {sorted(known)}. "
            f"Fix: remove or rename the setting."
        )
    for key, value in data.items():
        expected = _EXPECTED_TYPES[key]
        if not isinstance(value, expected):
            raise ConfigError(
                f"Setting '{key}' in {source} must be {expected.__name__}, "
                f"got {type(value).__name__} ({value!r})."
            )
    if data.get("paragraph_delimiter") == "":
        raise ConfigError(
            f"Setting 'paragraph_delimiter' in {source} must not be empty. "
            f"Fix: use a token that does not occur in ordinary prose, e.g. '/P/'."
        )
    return GeneratorConfig(**data)


def load_config(path: Path | str) -> GeneratorConfig:
    """Load a GeneratorConfig from a YAML file. An empty file yields the defaults."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config {path}: {e}") from e
    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ConfigError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )
    return config_from_mapping(data, str(path))
