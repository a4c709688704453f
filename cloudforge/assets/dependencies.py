"""Dependency copying with post-copy text substitution."""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from ..core.models import DependencyInstruction, Replacement
from ..rendering.io import atomic_write_text, ensure_parent, read_text

logger = logging.getLogger(__name__)


def apply_replacements(root: Path, replacements: list[Replacement]) -> int:
    """Apply each replacement, in order, to every text file under ``root``.

    Patterns are regular expressions; replacement strings may use
    backreferences. Files that are not UTF-8 text are left untouched.

    Returns:
        Number of files rewritten
    """
    if not replacements:
        return 0

    compiled = [(re.compile(r.pattern), r.replacement) for r in replacements]
    files = [root] if root.is_file() else sorted(p for p in root.rglob("*") if p.is_file())

    rewritten = 0
    for path in files:
        try:
            original = read_text(path)
        except UnicodeDecodeError:
            logger.debug(f"Skipping substitution in binary file {path}")
            continue

        text = original
        for pattern, replacement in compiled:
            text = pattern.sub(replacement, text)

        if text != original:
            atomic_write_text(path, text, mode=path.stat().st_mode & 0o777)
            rewritten += 1

    return rewritten


def copy_dependency(instruction: DependencyInstruction) -> int:
    """Copy one dependency and apply its substitutions.

    Existing files at the destination are overwritten; others are kept.

    Returns:
        Number of files rewritten by substitutions
    """
    source, destination = instruction.source, instruction.destination
    if not source.exists():
        raise FileNotFoundError(f"Dependency source not found: {source}")

    ensure_parent(destination)
    if source.is_dir():
        shutil.copytree(source, destination, dirs_exist_ok=True)
    else:
        shutil.copy2(source, destination)

    rewritten = apply_replacements(destination, instruction.replacements)
    logger.debug(
        f"Copied {source} → {destination} ({rewritten} file(s) substituted)"
    )
    return rewritten
