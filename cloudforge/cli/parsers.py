"""CLI argument parsers and validators."""

from __future__ import annotations

import re
from typing import Any

import typer

_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?$")


def coerce_value(value: str) -> bool | int | float | str:
    """Coerce a string value to bool, int or float where it parses."""
    value_lower = value.lower()

    if value_lower in ("true", "false"):
        return value_lower == "true"

    if _INT_PATTERN.match(value):
        return int(value)

    if _FLOAT_PATTERN.match(value):
        return float(value)

    return value


def parse_define(value: str) -> tuple[str, Any]:
    """Parse a template dependency in format KEY=VALUE."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be KEY=VALUE, got: {value!r}")
    key, raw = value.split("=", 1)
    key = key.strip()
    if not key.isidentifier():
        raise typer.BadParameter(f"Invalid template dependency name: {key!r}")
    return key, coerce_value(raw)


def parse_defines(values: list[str]) -> dict[str, Any]:
    return dict(map(parse_define, values))
