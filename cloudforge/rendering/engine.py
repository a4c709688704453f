"""Template rendering engine."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import jinja2
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined
from jinja2.ext import Extension

from ..core.errors import TemplateSyntaxError
from ..core.models import Delimiters
from .io import read_text

logger = logging.getLogger(__name__)

# Name under which the render context is visible inside templates.
CONTEXT_NAME = "it"

RenderFn = Callable[[Mapping[str, Any]], str]


class EscapedInterpolation(Extension):
    """Rewrite ``<{! expr }>`` into an escaped ``<{= (expr)|e }>`` before lexing."""

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(escaped_variable_start="<{!")

    def preprocess(
        self, source: str, name: str | None, filename: str | None = None
    ) -> str:
        env = self.environment
        pattern = re.compile(
            re.escape(env.escaped_variable_start)  # type: ignore[attr-defined]
            + r"(.*?)"
            + re.escape(env.variable_end_string),
            re.DOTALL,
        )
        return pattern.sub(
            lambda m: (
                f"{env.variable_start_string}({m.group(1)})|e"
                f"{env.variable_end_string}"
            ),
            source,
        )


class ContextEnvironment(Environment):
    """Environment whose dotted lookups prefer mapping keys over attributes.

    ``it.metadata.items`` must reach a metadata key named ``items``
    rather than the bound ``dict.items`` method.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                pass
        return super().getattr(obj, attribute)


def newline_convention(source: str) -> str:
    """Line terminator used by ``source``; ``\\n`` when it has none."""
    if "\r\n" in source:
        return "\r\n"
    if "\r" in source:
        return "\r"
    return "\n"


class CompiledTemplate:
    """A compiled template; call it with a context mapping to render."""

    def __init__(self, template: jinja2.Template, origin: Path | str) -> None:
        self._template = template
        self.origin = origin

    def __call__(self, context: Mapping[str, Any]) -> str:
        return self._template.render({CONTEXT_NAME: context})

    def __repr__(self) -> str:
        return f"CompiledTemplate({str(self.origin)!r})"


class TemplateRenderer:
    """Compiles template sources into reusable render functions.

    Args:
        delimiters: Syntax tokens; defaults to the ``<{ }>`` family
        search_path: Directories searched by ``include``/``import`` tags
        strict_undefined: Fail on undefined names instead of rendering empty
    """

    def __init__(
        self,
        delimiters: Delimiters | None = None,
        *,
        search_path: Sequence[Path] = (),
        strict_undefined: bool = False,
    ) -> None:
        delimiters = delimiters or Delimiters()
        loader = (
            FileSystemLoader([str(p) for p in search_path]) if search_path else None
        )
        self.environment = ContextEnvironment(
            loader=loader,
            block_start_string=delimiters.block_start,
            block_end_string=delimiters.block_end,
            variable_start_string=delimiters.variable_start,
            variable_end_string=delimiters.variable_end,
            comment_start_string=delimiters.comment_start,
            comment_end_string=delimiters.comment_end,
            undefined=StrictUndefined if strict_undefined else Undefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            extensions=[EscapedInterpolation],
        )
        self.environment.escaped_variable_start = delimiters.escaped_variable_start  # type: ignore[attr-defined]
        self._overlays: dict[str, Environment] = {"\n": self.environment}

    def _environment_for(self, newline: str) -> Environment:
        # Jinja2 rewrites literal line breaks to ``newline_sequence``.
        if newline not in self._overlays:
            self._overlays[newline] = self.environment.overlay(newline_sequence=newline)
        return self._overlays[newline]

    def compile(self, source: str, *, origin: Path | str = "<template>") -> RenderFn:
        """Compile template source text.

        Args:
            source: Template text
            origin: Path or label reported in syntax errors

        Returns:
            Render function taking a context mapping

        Raises:
            TemplateSyntaxError: when the source is malformed
        """
        try:
            environment = self._environment_for(newline_convention(source))
            template = environment.from_string(source)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(origin, exc.lineno, exc.message or str(exc)) from exc
        return CompiledTemplate(template, origin)

    def compile_file(self, path: Path) -> RenderFn:
        """Read and compile a template file."""
        logger.debug(f"Compiling template: {path}")
        return self.compile(read_text(path), origin=path)
