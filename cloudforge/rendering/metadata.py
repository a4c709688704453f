"""Per-directory metadata sidecars."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..core.errors import MetadataError
from .io import read_text

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"


def load_metadata(directory: Path) -> dict[str, Any]:
    """Load the metadata sidecar of a directory.

    Args:
        directory: Directory that may contain ``metadata.json``

    Returns:
        Parsed JSON object, or an empty dict when the sidecar is absent

    Raises:
        MetadataError: when the sidecar exists but is not a JSON object
    """
    path = directory / METADATA_FILENAME
    if not path.is_file():
        return {}

    try:
        data = json.loads(read_text(path))
    except json.JSONDecodeError as exc:
        raise MetadataError(path, str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MetadataError(path, f"not UTF-8 text ({exc.reason})") from exc

    if not isinstance(data, dict):
        raise MetadataError(path, f"expected a JSON object, got {type(data).__name__}")

    logger.debug(f"Loaded metadata: {path} ({len(data)} key(s))")
    return data
