"""Sass compilation."""

from __future__ import annotations

import logging
from pathlib import Path

import sass

from ..core.errors import StylesheetError
from ..core.models import StylesheetConfig
from ..rendering.io import IGNORED_NAMES, atomic_write_text, mirror_path

logger = logging.getLogger(__name__)

SASS_EXTENSIONS = (".scss", ".sass")
PARTIAL_MARKER = "_"
CSS_EXTENSION = ".css"


def is_partial(path: Path) -> bool:
    """Partials are only compiled when another stylesheet includes them."""
    return path.name.startswith(PARTIAL_MARKER)


def discover_stylesheets(source_root: Path) -> list[Path]:
    """Return every non-partial Sass file under ``source_root``, sorted."""
    return sorted(
        path
        for path in source_root.rglob("*")
        if path.is_file()
        and path.suffix.lower() in SASS_EXTENSIONS
        and not is_partial(path)
        and path.name not in IGNORED_NAMES
    )


def output_path_for(path: Path, source_root: Path, build_root: Path) -> Path:
    return mirror_path(path, source_root, build_root).with_suffix(CSS_EXTENSION)


def compile_stylesheet(path: Path, config: StylesheetConfig) -> Path:
    """Compile one stylesheet and write its CSS (and source map).

    Returns:
        Path of the written CSS file

    Raises:
        StylesheetError: with the compiler's diagnostic attached
    """
    output_path = output_path_for(path, config.source_directory, config.build_directory)
    map_path = output_path.with_name(output_path.name + ".map")
    options = {
        "filename": str(path),
        "output_style": config.output_style,
        "include_paths": [str(p) for p in config.include_paths],
    }
    if config.include_source_map:
        options["source_map_filename"] = str(map_path)
        options["output_filename_hint"] = str(output_path)

    try:
        result = sass.compile(**options)
    except sass.CompileError as exc:
        raise StylesheetError(path, str(exc)) from exc

    if config.include_source_map:
        css, source_map = result
        atomic_write_text(output_path, css)
        atomic_write_text(map_path, source_map)
    else:
        atomic_write_text(output_path, result)

    logger.debug(f"Compiled {path} → {output_path}")
    return output_path


def compile_stylesheets(config: StylesheetConfig) -> list[Path]:
    """Compile every stylesheet of the configured source tree."""
    if not config.source_directory.is_dir():
        raise FileNotFoundError(
            f"Stylesheet source directory not found: {config.source_directory}"
        )

    outputs = [
        compile_stylesheet(path, config)
        for path in discover_stylesheets(config.source_directory)
    ]
    logger.info(f"Compiled {len(outputs)} stylesheet(s)")
    return outputs
