"""Build directory removal."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def remove_directory(path: Path) -> bool:
    """Delete ``path`` recursively. Missing paths are not an error.

    Returns:
        True when something was removed
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    else:
        return False
    logger.debug(f"Removed {path}")
    return True


def directories_to_clean(directories: list[Path], ignored: list[Path]) -> list[Path]:
    """Drop ignored entries and duplicates, keeping order."""
    ignored_resolved = {p.resolve() for p in ignored}
    selected: list[Path] = []
    seen: set[Path] = set()
    for directory in directories:
        resolved = directory.resolve()
        if resolved in ignored_resolved or resolved in seen:
            continue
        seen.add(resolved)
        selected.append(directory)
    return selected
