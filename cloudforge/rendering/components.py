"""Re-entrant component loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from ..core.errors import ComponentNotFoundError
from .engine import TemplateRenderer

logger = logging.getLogger(__name__)

# Context key under which the loader is exposed to templates.
COMPONENT_KEY = "get_component"


class ComponentLoader:
    """Renders reusable fragments from inside other templates.

    The loader places itself in every context it builds, so a component
    can embed further components to any depth::

        <{= it.get_component("nav.html", {"active": "home"}) }>

    Args:
        renderer: Renderer used to compile component files
        base_directory: Directory relative component paths resolve against;
            the working directory when omitted
    """

    def __init__(
        self, renderer: TemplateRenderer, base_directory: Path | None = None
    ) -> None:
        self.renderer = renderer
        self.base_directory = base_directory

    def resolve(self, component_path: str | Path) -> Path:
        path = Path(component_path)
        if self.base_directory is not None and not path.is_absolute():
            return self.base_directory / path
        return path

    def render(
        self,
        component_path: str | Path,
        extra_context: Mapping[str, Any] | None = None,
    ) -> str:
        """Compile and render a component.

        Raises:
            ComponentNotFoundError: when the component file does not exist
            TemplateSyntaxError: when it does not compile
        """
        path = self.resolve(component_path)
        if not path.is_file():
            raise ComponentNotFoundError(path)

        template = self.renderer.compile_file(path)
        context = dict(extra_context or {})
        context[COMPONENT_KEY] = self
        return template(context)

    __call__ = render
