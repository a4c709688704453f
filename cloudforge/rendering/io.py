"""File I/O operations for rendering."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

IGNORED_NAMES = frozenset({".DS_Store"})


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, keeping its line endings as written."""
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file atomically using a temporary file.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
        os.replace(tmp_name, path)
        os.chmod(path, mode)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def copy_file(source: Path, destination: Path) -> None:
    """Copy a file, creating the destination's parent directories."""
    ensure_parent(destination)
    shutil.copy2(source, destination)


def mirror_path(path: Path, source_root: Path, build_root: Path) -> Path:
    """Map ``path`` under ``source_root`` to the same place under ``build_root``."""
    return build_root / path.relative_to(source_root)


def list_directory(directory: Path) -> tuple[list[Path], list[Path]]:
    """Return ``(files, directories)`` of a directory, sorted by name."""
    files: list[Path] = []
    directories: list[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.name in IGNORED_NAMES:
            continue
        if entry.is_dir():
            directories.append(entry)
        else:
            files.append(entry)
    return files, directories
