"""Configuration management for the livevalid CLI.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .livevalidrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from livevalid.log import LOG_LEVELS
from livevalid.operators import OPERATORS, Operator, operator_from_name

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

OUTPUT_FORMATS = ("text", "json")


@dataclass
class LivevalidConfig:
    """Configuration for the livevalid CLI.

    Attributes:
        operator: Name of the operator combining rule results (default: "conjunction")
        log_level: Logging level name (default: "WARNING")
        output: Output format, "text" or "json" (default: "text")
    """

    operator: str = "conjunction"
    log_level: str = "WARNING"
    output: str = "text"

    def __post_init__(self) -> None:
        """Normalize and validate configuration after initialization."""
        if isinstance(self.output, str):
            self.output = self.output.strip().lower()
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not isinstance(self.operator, str) or self.operator.strip().lower() not in OPERATORS:
            raise ValueError(f"operator must be one of: {', '.join(sorted(OPERATORS))}")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

        if not isinstance(self.output, str) or self.output not in OUTPUT_FORMATS:
            raise ValueError(f"output must be one of: {', '.join(OUTPUT_FORMATS)}")

    def create_operator(self) -> Operator:
        """Create a new instance of the configured operator."""
        return operator_from_name(self.operator)


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names."""
    return {f.name for f in fields(LivevalidConfig)}


def find_config_file(filename: str = ".livevalidrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Searches for the specified file starting from start_dir (or current directory)
    and traversing up to the filesystem root.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _filter_fields(data: dict[str, Any]) -> dict[str, Any]:
    valid_fields = _get_config_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from a .livevalidrc file, or {} if there is none."""
    config_path = find_config_file(".livevalidrc", start_dir)
    if config_path is None:
        return {}

    try:
        return _filter_fields(_load_toml_file(config_path))
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the pyproject.toml [tool.livevalid] section."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
        section = data.get("tool", {}).get("livevalid", {})
        return _filter_fields(section)
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables.

    Environment variables are prefixed with LIVEVALID_ and use uppercase names:
    LIVEVALID_OPERATOR, LIVEVALID_LOG_LEVEL, LIVEVALID_OUTPUT
    """
    env_mapping = {
        "LIVEVALID_OPERATOR": "operator",
        "LIVEVALID_LOG_LEVEL": "log_level",
        "LIVEVALID_OUTPUT": "output",
    }

    result: dict[str, Any] = {}
    for env_var, config_key in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            result[config_key] = value

    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> LivevalidConfig:
    """Load configuration with full precedence chain.

    Loads configuration from multiple sources and merges them with the following
    precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (LIVEVALID_*)
    3. .livevalidrc file
    4. pyproject.toml [tool.livevalid] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved LivevalidConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    cli_config = {k: v for k, v in _filter_fields(cli_overrides or {}).items() if v is not None}

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_rc(start_dir),
        _load_from_env(),
        cli_config,
    )

    # Defaults are applied by the dataclass
    return LivevalidConfig(**merged)
