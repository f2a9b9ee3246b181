"""
avswap.config - Run configuration from CLI options, environment and YAML.

Precedence, highest first: CLI option, environment variable, YAML file,
built-in default. The resolved AvswapConfig is built once per run and handed
to the extract and merge handlers.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from avswap.exceptions import ConfigError
from avswap.formats import AUDIO_FORMATS, supported_formats
from avswap.logging import logger

VALID_MODES = ("extract", "merge")

DEFAULT_CONFIG_FILE = "avswap.yaml"

ENV_VARS: dict[str, str] = {
    "directory": "DIR",
    "mode": "MODE",
    "extract_format": "EXTRACT_FORMAT",
    "ffmpeg": "FFMPEG",
}


class AvswapConfig(BaseModel):
    """Resolved configuration for one avswap run."""

    model_config = ConfigDict(extra="forbid")

    directory: Path = Field(default_factory=Path.cwd)
    mode: str = "merge"
    extract_format: str = "mp3"
    ffmpeg: str = "ffmpeg"

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        if v not in VALID_MODES:
            valid = " or ".join(repr(m) for m in VALID_MODES)
            raise ValueError(f"Invalid MODE '{v}'. Valid modes: {valid}")
        return v

    @model_validator(mode="after")
    def validate_extract_format(self) -> AvswapConfig:
        # Only extract mode encodes audio; merge accepts whatever audio it finds.
        if self.mode == "extract" and self.extract_format not in AUDIO_FORMATS:
            raise ValueError(
                f"Unsupported format '{self.extract_format}'. "
                f"Supported formats: {supported_formats()}"
            )
        return self


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict.

    Raises:
        ConfigError: If the file is missing, unreadable, unparsable, or not a mapping
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def read_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Pick recognised settings out of an environment mapping. Empty values count as unset."""
    return {field: environ[var] for field, var in ENV_VARS.items() if environ.get(var)}


def load_config(
    overrides: Mapping[str, Any] | None = None,
    config_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AvswapConfig:
    """Resolve and validate the run configuration.

    Args:
        overrides: Values given on the command line; None values are ignored
        config_file: Explicit YAML file; defaults to ./avswap.yaml if present
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated AvswapConfig

    Raises:
        ConfigError: On an unreadable config file or invalid values
    """
    if environ is None:
        environ = os.environ

    merged: dict[str, Any] = {}
    if config_file is not None:
        merged.update(read_config_file(config_file))
    elif (Path.cwd() / DEFAULT_CONFIG_FILE).exists():
        merged.update(read_config_file(Path.cwd() / DEFAULT_CONFIG_FILE))

    merged.update(read_env(environ))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        config = AvswapConfig(**merged)
    except pydantic.ValidationError as e:
        fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
        raise ConfigError(format_validation_error(e), field=fields[0] if fields else None) from e

    logger.debug("Resolved config: %s", config.model_dump())
    return config


def format_validation_error(error: pydantic.ValidationError) -> str:
    """Flatten pydantic errors into one readable line per problem."""
    messages = []
    for err in error.errors():
        msg = err["msg"].removeprefix("Value error, ")
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "\n".join(messages)
