"""Error taxonomy shared by every build stage."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class CloudForgeError(Exception):
    """Base class for all CloudForge failures."""


class ConfigurationError(CloudForgeError):
    """Raised when a required configuration field is missing or invalid."""

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        self.fields = tuple(fields)
        super().__init__(message)

    @classmethod
    def missing(cls, operation: str, fields: Iterable[str]) -> "ConfigurationError":
        names = list(fields)
        return cls(
            f"Cannot {operation}: missing required configuration {', '.join(names)}",
            names,
        )


class TemplateSyntaxError(CloudForgeError):
    """Raised when a template cannot be compiled."""

    def __init__(self, origin: Path | str, lineno: int | None, message: str) -> None:
        self.origin = origin
        self.lineno = lineno
        location = f"{origin}:{lineno}" if lineno else str(origin)
        super().__init__(f"Template syntax error in {location}: {message}")


class MissingLayoutError(CloudForgeError):
    """Raised when no layout exists between a content directory and the source root."""

    def __init__(self, directory: Path, root: Path) -> None:
        self.directory = directory
        self.root = root
        super().__init__(
            f"No layout found for {directory}: none of its directories up to {root} "
            "contains a layout template"
        )


class MetadataError(CloudForgeError):
    """Raised when a metadata sidecar exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid metadata in {path}: {reason}")


class ComponentNotFoundError(CloudForgeError):
    """Raised when a component template does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Component not found: {path}")


class PageCompileError(CloudForgeError):
    """Raised when a single content file fails to compile.

    The underlying failure is available as ``__cause__``.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to compile {path}: {reason}")


class StylesheetError(CloudForgeError):
    """Raised when the Sass compiler rejects a stylesheet."""

    def __init__(self, path: Path, diagnostic: str) -> None:
        self.path = path
        self.diagnostic = diagnostic
        super().__init__(f"Failed to compile stylesheet {path}:\n{diagnostic}")


class DeployError(CloudForgeError):
    """Raised when uploading or invalidating fails."""
