"""Configuration file loading for markrun.

A markrun.yaml file looks like:

    default_namespace: core
    default_context: default
    default_color: "#ffffff"
    placeholders: true
    colors:
      brand: "#ff8800"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .aliases import ColorAliasTable
from .exceptions import ConfigError, MarkrunError
from .placeholders.context import DEFAULT_CONTEXT
from .style import DEFAULT_COLOR

DEFAULT_CONFIG_FILENAME = "markrun.yaml"


class MarkrunConfig(BaseModel):
    """Parser configuration."""

    model_config = ConfigDict(extra="forbid")

    default_namespace: str = "core"
    default_context: str = DEFAULT_CONTEXT
    default_color: str | None = DEFAULT_COLOR
    placeholders: bool = True
    colors: dict[str, str] = Field(default_factory=dict)

    @field_validator("default_namespace", "default_context")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Trim and lowercase; blank is rejected."""
        normalized = v.strip().lower()
        if not normalized:
            raise ValueError("must not be blank")
        return normalized

    @field_validator("default_color")
    @classmethod
    def check_default_color(cls, v: str | None) -> str | None:
        """Allow aliases and hex; validated against the alias table in build_alias_table()."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("must not be blank (use null for no color)")
        return v

    def build_alias_table(self) -> ColorAliasTable:
        """Create an alias table with the defaults plus configured colors.

        Raises:
            ConfigError: If a configured color is not a valid hex color or alias
        """
        try:
            return ColorAliasTable(self.colors)
        except MarkrunError as e:
            raise ConfigError(f"Invalid color alias in config: {e}") from e

    def parser_options(self, aliases: ColorAliasTable | None = None) -> dict[str, Any]:
        """Keyword arguments for MarkupParser (engine and contexts are supplied separately).

        Raises:
            ConfigError: If default_color does not resolve
        """
        table = aliases if aliases is not None else self.build_alias_table()
        color: str | None = None
        if self.default_color is not None:
            color = table.resolve(self.default_color)
            if color is None:
                raise ConfigError(f"Invalid default_color: {self.default_color!r}")
        return {
            "aliases": table,
            "default_context": self.default_context,
            "default_color": color,
            "placeholders_enabled": self.placeholders,
        }


def load_config(config_path: Path | str) -> MarkrunConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to markrun.yaml

    Returns:
        Validated configuration; an empty file yields the defaults

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the YAML or its structure is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config must contain a mapping at the root level")

    try:
        return MarkrunConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e
