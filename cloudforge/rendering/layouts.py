"""Nearest-ancestor layout registration and lookup."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import MissingLayoutError
from .engine import RenderFn, TemplateRenderer

logger = logging.getLogger(__name__)

LAYOUT_FILENAME = "template.html.dot"


class LayoutRegistry:
    """Layouts discovered during one compilation pass, keyed by directory.

    A registry belongs to a single traversal and must not be shared
    between passes.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._layouts: dict[Path, RenderFn] = {}

    def __contains__(self, directory: object) -> bool:
        return directory in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)

    def register(self, directory: Path, layout: RenderFn) -> None:
        self._layouts[directory] = layout

    def discover(self, directory: Path, renderer: TemplateRenderer) -> bool:
        """Compile and register the layout file of ``directory`` if it has one."""
        path = directory / LAYOUT_FILENAME
        if not path.is_file():
            return False
        self.register(directory, renderer.compile_file(path))
        logger.debug(f"Registered layout: {path}")
        return True

    def resolve(self, directory: Path) -> RenderFn:
        """Return the layout of the nearest directory at or above ``directory``.

        Raises:
            ValueError: when ``directory`` lies outside the registry root
            MissingLayoutError: when no directory up to the root has a layout
        """
        if directory != self.root and self.root not in directory.parents:
            raise ValueError(f"{directory} is not inside {self.root}")

        current = directory
        while True:
            layout = self._layouts.get(current)
            if layout is not None:
                return layout
            if current == self.root:
                raise MissingLayoutError(directory, self.root)
            current = current.parent
