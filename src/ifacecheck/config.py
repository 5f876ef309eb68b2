# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for the conformance engine."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = "ifacecheck.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "ifacecheck"

DEFAULT_IGNORED_DIRS: Final[frozenset[str]] = frozenset({".git", ".godot", ".import"})
DEFAULT_SOURCE_SUFFIXES: Final[tuple[str, ...]] = (".gd",)
DEFAULT_INTERFACE_PREFIX: Final[str] = "I"


class InterfaceConfig(BaseModel):
    """Options governing declaration resolution and validation.

    All options are fixed at construction; derive a modified copy with
    ``model_copy(update=...)`` instead of mutating an instance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_string_classes: bool = True
    strict_validation: bool = True
    strict_interface_name: bool = False
    interface_prefix: str = DEFAULT_INTERFACE_PREFIX
    project_root: Path = Field(default_factory=Path)
    ignored_dirs: frozenset[str] = DEFAULT_IGNORED_DIRS
    source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES

    @field_validator("source_suffixes")
    @classmethod
    def _normalise_suffixes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure every suffix carries a leading dot."""

        return tuple(suffix if suffix.startswith(".") else f".{suffix}" for suffix in value)

    @field_validator("interface_prefix")
    @classmethod
    def _require_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("interface_prefix must not be empty")
        return value

    def is_source(self, path: Path) -> bool:
        """Return whether ``path`` carries one of the configured source suffixes.

        Args:
            path: Candidate file path.

        Returns:
            bool: ``True`` when the suffix marks ``path`` as source.
        """

        return path.suffix in self.source_suffixes


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in payload.items()}


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def config_from_mapping(payload: Mapping[str, Any], *, base_dir: Path) -> InterfaceConfig:
    """Build an :class:`InterfaceConfig` from a raw configuration table.

    Args:
        payload: Table read from a configuration file.
        base_dir: Directory relative ``project_root`` values are resolved against.

    Returns:
        InterfaceConfig: Validated configuration.

    Raises:
        ConfigError: If the table holds unknown keys or invalid values.
    """

    data = _normalise_keys(payload)
    root = Path(data.get("project_root", "."))
    data["project_root"] = root if root.is_absolute() else (base_dir / root)
    try:
        return InterfaceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid ifacecheck configuration: {exc}") from exc


def load_config(root: Path, *, config_file: Path | None = None) -> InterfaceConfig:
    """Load configuration for the project rooted at ``root``.

    ``config_file`` takes precedence; otherwise ``ifacecheck.toml`` and then the
    ``[tool.ifacecheck]`` table of ``pyproject.toml`` are consulted. Without
    any configuration file the defaults apply with ``project_root`` set to
    ``root``.

    Args:
        root: Project root directory.
        config_file: Optional explicit configuration file.

    Returns:
        InterfaceConfig: Effective configuration.

    Raises:
        ConfigError: If a configuration file is missing, malformed or invalid.
    """

    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"Configuration file not found: {config_file}")
        document = _read_toml(config_file)
        if config_file.name == PYPROJECT_FILENAME:
            document = _pyproject_section(document)
        return config_from_mapping(document, base_dir=config_file.parent)

    standalone = root / CONFIG_FILENAME
    if standalone.is_file():
        return config_from_mapping(_read_toml(standalone), base_dir=root)

    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        section = _pyproject_section(_read_toml(pyproject))
        if section:
            return config_from_mapping(section, base_dir=root)

    return InterfaceConfig(project_root=root)


def _pyproject_section(document: Mapping[str, Any]) -> dict[str, Any]:
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return dict(section)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_IGNORED_DIRS",
    "DEFAULT_INTERFACE_PREFIX",
    "DEFAULT_SOURCE_SUFFIXES",
    "InterfaceConfig",
    "config_from_mapping",
    "load_config",
]
