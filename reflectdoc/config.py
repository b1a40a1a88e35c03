"""Configuration loading for reflectdoc (.reflectdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .git.revision import DEFAULT_FALLBACK_REVISION

CONFIG_FILENAME = ".reflectdoc.yml"
DEFAULT_INPUT = Path("scripts") / "generated" / "docs.json"
DEFAULT_OUTPUT = Path("scripts") / "generated" / "records.json"


@dataclass
class SourceConfig:
    """Where generated source links point."""

    repository_url: Optional[str] = None
    revision: Optional[str] = None
    fallback_revision: str = DEFAULT_FALLBACK_REVISION


@dataclass
class FlattenConfig:
    """Traversal switches."""

    expand_modules: bool = False


@dataclass
class ReflectDocConfig:
    """Represents the settings defined in .reflectdoc.yml."""

    root: Path
    input: Path
    output: Path
    source: SourceConfig = field(default_factory=SourceConfig)
    flatten: FlattenConfig = field(default_factory=FlattenConfig)


def load_config(config_path: Path) -> ReflectDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    defaults = ReflectDocConfig(root=root, input=root / DEFAULT_INPUT, output=root / DEFAULT_OUTPUT)

    if not config_file.exists():
        return defaults

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    input_path = _as_str(data.get("input"))
    output_path = _as_str(data.get("output"))

    source = SourceConfig()
    source_data = _as_dict(data.get("source"))
    if source_data:
        source.repository_url = _as_text(source_data, "repository_url")
        source.revision = _as_text(source_data, "revision")
        fallback = _as_text(source_data, "fallback_revision")
        if fallback is not None:
            if not fallback.strip():
                raise ConfigError("source.fallback_revision must not be empty")
            source.fallback_revision = fallback.strip()

    flatten = FlattenConfig()
    flatten_data = _as_dict(data.get("flatten"))
    if flatten_data:
        expand = _as_bool(flatten_data.get("expand_modules"))
        if expand is not None:
            flatten.expand_modules = expand

    return ReflectDocConfig(
        root=root,
        input=root / input_path if input_path else defaults.input,
        output=root / output_path if output_path else defaults.output,
        source=source,
        flatten=flatten,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_text(section: Dict[str, Any], key: str) -> Optional[str]:
    """Read a source.* value that must be written as a string in YAML."""
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(
            f"source.{key} must be a string, got {type(value).__name__} {value!r}"
        )
    return value


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FlattenConfig",
    "ReflectDocConfig",
    "SourceConfig",
    "load_config",
]
