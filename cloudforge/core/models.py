"""Domain models for build configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OutputStyle = Literal["nested", "expanded", "compact", "compressed"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Delimiters(_Section):
    """Template syntax tokens.

    The defaults stay clear of ``{{ }}`` so compiled pages may carry
    double-curly syntax meant for a client-side template engine.
    """

    block_start: str = Field(default="<{%", min_length=1)
    block_end: str = Field(default="%}>", min_length=1)
    variable_start: str = Field(default="<{=", min_length=1)
    variable_end: str = Field(default="}>", min_length=1)
    escaped_variable_start: str = Field(default="<{!", min_length=1)
    comment_start: str = Field(default="<{#", min_length=1)
    comment_end: str = Field(default="#}>", min_length=1)

    @model_validator(mode="after")
    def _distinct_openers(self) -> "Delimiters":
        openers = [
            self.block_start,
            self.variable_start,
            self.escaped_variable_start,
            self.comment_start,
        ]
        if len(set(openers)) != len(openers):
            raise ValueError("block, variable, escaped and comment openers must differ")
        return self


class HtmlConfig(_Section):
    """HTML compilation settings."""

    source_directory: Path = Field(..., description="Root of the content tree")
    build_directory: Path = Field(..., description="Root of the compiled pages")
    copy_files_with_extensions: list[str] = Field(
        default_factory=list, description="Extensions copied through unchanged"
    )
    components_directory: Path | None = Field(
        default=None, description="Base directory for relative component paths"
    )
    template_dependencies: dict[str, Any] = Field(
        default_factory=dict, description="Values exposed to every template"
    )
    delimiters: Delimiters = Field(default_factory=Delimiters)
    strict_undefined: bool = False

    @field_validator("copy_files_with_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("extensions must not be empty")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized


class StylesheetConfig(_Section):
    """Sass compilation settings."""

    source_directory: Path
    build_directory: Path
    include_source_map: bool = False
    output_style: OutputStyle = "nested"
    include_paths: list[Path] = Field(default_factory=list)


class Replacement(_Section):
    """A regular-expression substitution applied after copying."""

    pattern: str = Field(..., min_length=1)
    replacement: str

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError("replacement pairs must be [pattern, replacement]")
            return {"pattern": data[0], "replacement": data[1]}
        return data


class DependencyInstruction(_Section):
    """Copy ``source`` to ``destination``, then apply ``replacements`` in order."""

    source: Path
    destination: Path
    replacements: list[Replacement] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_triple(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) not in (2, 3):
                raise ValueError(
                    "dependency instructions must be [source, destination, replacements?]"
                )
            source, destination, *rest = data
            return {
                "source": source,
                "destination": destination,
                "replacements": rest[0] if rest else [],
            }
        return data


class DevelopConfig(_Section):
    """Local development server settings."""

    directory: Path = Field(..., description="Directory served over HTTP")
    host: str = "localhost"
    port: int = Field(default=8080, ge=1, le=65535)
    browser: str | None = Field(
        default=None, description="Browser to open on start; None keeps it closed"
    )
    watch_directories: list[Path] = Field(default_factory=list)
    debounce_ms: int = Field(default=1250, ge=0)


class DeployConfig(_Section):
    """S3/CloudFront deployment target."""

    directory: Path | None = None
    bucket: str | None = None
    region: str | None = None
    distribution_id: str | None = None
    acl: str = "public-read"


class ForgeConfig(_Section):
    """Top-level configuration. Every section is optional."""

    html: HtmlConfig | None = None
    stylesheet: StylesheetConfig | None = None
    dependencies: list[DependencyInstruction] = Field(default_factory=list)
    develop: DevelopConfig | None = None
    deploy: DeployConfig | None = None
    clean_ignore_directories: list[Path] = Field(default_factory=list)

    def build_directories(self) -> list[Path]:
        """Directories produced by a build, in stage order."""
        directories: list[Path] = []
        if self.html:
            directories.append(self.html.build_directory)
        if self.stylesheet:
            directories.append(self.stylesheet.build_directory)
        directories.extend(dep.destination for dep in self.dependencies)
        return directories

    def source_directories(self) -> list[Path]:
        """Directories a build reads from, in stage order."""
        directories: list[Path] = []
        if self.html:
            directories.append(self.html.source_directory)
        if self.stylesheet:
            directories.append(self.stylesheet.source_directory)
        directories.extend(dep.source for dep in self.dependencies)
        return directories
