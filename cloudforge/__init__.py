"""CloudForge - static-site build pipeline.

Compiles HTML fragments through nested layouts, compiles Sass, copies
dependency trees and optionally syncs the result to S3.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.errors import (
    CloudForgeError,
    ComponentNotFoundError,
    ConfigurationError,
    DeployError,
    MetadataError,
    MissingLayoutError,
    PageCompileError,
    StylesheetError,
    TemplateSyntaxError,
)
from .core.models import ForgeConfig
from .pipeline import CloudForge

__all__ = [
    "CloudForge",
    "CloudForgeError",
    "ComponentNotFoundError",
    "ConfigurationError",
    "DeployError",
    "ForgeConfig",
    "MetadataError",
    "MissingLayoutError",
    "PageCompileError",
    "StylesheetError",
    "TemplateSyntaxError",
]
