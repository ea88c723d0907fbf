"""Configuration management for pixstash."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from pixstash.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

OUTPUT_FORMATS: tuple[str, ...] = ("table", "ids", "json")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "pixstash" / "config.toml"


def get_default_library_path() -> Path:
    """Get the default library database path."""
    return Path.home() / ".local" / "share" / "pixstash" / "library.db"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        library_db: Path to the SQLite image library.
        colored_output: Whether to use colored terminal output.
        default_limit: Maximum number of search results (None = unlimited).
        default_format: Output format for ``search`` (table, ids, json).
        config_path: Path where config was loaded from (None if defaults).
    """

    library_db: Path = field(default_factory=get_default_library_path)
    colored_output: bool = True
    default_limit: int | None = None
    default_format: str = "table"
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        self.library_db = self.library_db.expanduser().resolve()

        if not self.library_db.exists():
            warnings.append(f"Library database not found (created on first save): {self.library_db}")

        if self.default_limit is not None and self.default_limit <= 0:
            raise ConfigValidationError(
                "search.default_limit", self.default_limit, "must be a positive integer"
            )

        if self.default_format not in OUTPUT_FORMATS:
            raise ConfigValidationError(
                "search.default_format",
                self.default_format,
                f"must be one of {', '.join(OUTPUT_FORMATS)}",
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: pixstash init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "library_db" in paths:
        value = paths["library_db"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.library_db", value, "must be a string path")
        config.library_db = Path(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [search] section
    search = data.get("search", {})
    if "default_limit" in search:
        value = search["default_limit"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError("search.default_limit", value, "must be an integer")
        config.default_limit = value

    if "default_format" in search:
        value = search["default_format"]
        if not isinstance(value, str):
            raise ConfigValidationError("search.default_format", value, "must be a string")
        config.default_format = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "paths": {
            "library_db": str(config.library_db),
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    # Build [search] section (only if non-default values)
    search_data: dict[str, Any] = {}
    if config.default_limit is not None:
        search_data["default_limit"] = config.default_limit
    if config.default_format != "table":
        search_data["default_format"] = config.default_format
    if search_data:
        data["search"] = search_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
