"""Configuration file loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ConfigurationError
from .models import ForgeConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "cloudforge.yaml"


def format_validation_error(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into ``field.path: message`` lines."""
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        lines.append(f"{location}: {error['msg']}")
    return lines


def parse_config(data: Any) -> ForgeConfig:
    """Validate a decoded configuration mapping.

    Raises:
        ConfigurationError: listing every failing field
    """
    try:
        return ForgeConfig.model_validate(data or {})
    except ValidationError as exc:
        lines = format_validation_error(exc)
        fields = [line.split(":", 1)[0] for line in lines]
        raise ConfigurationError(
            "Invalid configuration:\n  " + "\n  ".join(lines), fields
        ) from exc


def load_config(path: Path) -> ForgeConfig:
    """Load and validate a YAML configuration file."""
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}", ["config"])

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Configuration file {path} is not valid YAML: {exc}") from exc

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    logger.debug(f"Loaded configuration from {path}")
    return parse_config(data)
