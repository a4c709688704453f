"""Page compilation: content rendered inside its resolved layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.errors import MetadataError, MissingLayoutError, PageCompileError
from ..core.models import HtmlConfig
from .components import COMPONENT_KEY, ComponentLoader
from .engine import TemplateRenderer
from .io import atomic_write_text, copy_file, list_directory, mirror_path
from .layouts import LAYOUT_FILENAME, LayoutRegistry
from .metadata import METADATA_FILENAME, load_metadata

logger = logging.getLogger(__name__)

CONTENT_EXTENSION = ".html"
RESERVED_NAMES = frozenset({LAYOUT_FILENAME, METADATA_FILENAME})


@dataclass
class CompileReport:
    """Files written by one compilation pass."""

    pages: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)


class PageCompiler:
    """Compiles every content file of an HTML source tree.

    The walk is depth-first pre-order: a directory registers its own
    layout before its content files are compiled, then recurses into
    its subdirectories. The first failing page aborts the pass; pages
    written before it are left in place.
    """

    def __init__(
        self, config: HtmlConfig, renderer: TemplateRenderer | None = None
    ) -> None:
        self.config = config
        search_path = [
            p for p in (config.components_directory, config.source_directory) if p
        ]
        self.renderer = renderer or TemplateRenderer(
            config.delimiters,
            search_path=search_path,
            strict_undefined=config.strict_undefined,
        )
        self.components = ComponentLoader(self.renderer, config.components_directory)

    @property
    def source_root(self) -> Path:
        return self.config.source_directory

    @property
    def build_root(self) -> Path:
        return self.config.build_directory

    def base_context(self, metadata: dict[str, Any]) -> dict[str, Any]:
        """Context shared by a content template and its layout.

        Later entries win: metadata, then the component loader, then
        the configured template dependencies.
        """
        context: dict[str, Any] = {"metadata": metadata, COMPONENT_KEY: self.components}
        context.update(self.config.template_dependencies)
        return context

    def compile_all(self) -> CompileReport:
        """Compile the whole source tree with a fresh layout registry."""
        if not self.source_root.is_dir():
            raise FileNotFoundError(
                f"HTML source directory not found: {self.source_root}"
            )

        registry = LayoutRegistry(self.source_root)
        report = CompileReport()
        self._walk(self.source_root, registry, report)
        logger.info(
            f"Compiled {len(report.pages)} page(s), copied {len(report.copied)} file(s)"
        )
        return report

    def compile_page(
        self,
        path: Path,
        registry: LayoutRegistry,
        metadata: dict[str, Any] | None = None,
    ) -> Path:
        """Render one content file inside its layout and write it.

        Args:
            path: Content file under the source root
            registry: Layouts registered so far in this pass
            metadata: Metadata of the file's directory; loaded when omitted

        Returns:
            Output file path

        Raises:
            MissingLayoutError: when no layout applies (fatal for the pass)
            PageCompileError: for any other failure, naming ``path``
        """
        try:
            if metadata is None:
                metadata = load_metadata(path.parent)
            context = self.base_context(metadata)
            content = self.renderer.compile_file(path)(context)
            layout = registry.resolve(path.parent)
            page = layout({**context, "content": content})
            output_path = mirror_path(path, self.source_root, self.build_root)
            atomic_write_text(output_path, page)
        except MissingLayoutError:
            raise
        except Exception as exc:
            raise PageCompileError(path, str(exc)) from exc

        logger.debug(f"Compiled {path} → {output_path}")
        return output_path

    def _walk(
        self, directory: Path, registry: LayoutRegistry, report: CompileReport
    ) -> None:
        files, subdirectories = list_directory(directory)
        registry.discover(directory, self.renderer)

        metadata: dict[str, Any] | None = None
        for path in files:
            if path.name in RESERVED_NAMES:
                continue
            suffix = path.suffix.lower()
            if suffix == CONTENT_EXTENSION:
                if metadata is None:
                    try:
                        metadata = load_metadata(directory)
                    except (MetadataError, OSError) as exc:
                        raise PageCompileError(path, str(exc)) from exc
                report.pages.append(self.compile_page(path, registry, metadata))
            elif suffix in self.config.copy_files_with_extensions:
                output_path = mirror_path(path, self.source_root, self.build_root)
                copy_file(path, output_path)
                report.copied.append(output_path)
                logger.debug(f"Copied {path} → {output_path}")

        for subdirectory in subdirectories:
            self._walk(subdirectory, registry, report)
