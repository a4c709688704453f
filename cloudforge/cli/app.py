"""Main CLI application."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Coroutine

import typer
from typing_extensions import Annotated

from ..core.errors import CloudForgeError
from ..core.loader import DEFAULT_CONFIG_FILE, load_config
from ..core.models import ForgeConfig
from ..pipeline import CloudForge
from .parsers import parse_defines

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cloudforge",
    help="Static-site builder: nested HTML layouts, Sass, dependency copies and S3 deploys.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file.",
        metavar="FILE",
    ),
]
DefineOption = Annotated[
    list[str],
    typer.Option(
        "--define",
        "-D",
        help="Template dependency exposed to every page (format: KEY=VALUE). Repeatable.",
        metavar="KEY=VALUE",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def _load(config_path: Path, defines: list[str]) -> ForgeConfig:
    overrides = parse_defines(defines)
    config = load_config(config_path)
    if overrides:
        if config.html is None:
            raise typer.BadParameter("--define requires an html section", param_hint="--define")
        config.html.template_dependencies.update(overrides)
        logger.debug(f"Template dependency overrides: {sorted(overrides)}")
    return config


def _run(
    config_path: Path,
    defines: list[str],
    verbose: bool,
    action: Callable[[CloudForge], Coroutine[Any, Any, Any]],
) -> None:
    _configure_logging(verbose)
    try:
        forge = CloudForge(_load(config_path, defines))
        asyncio.run(action(forge))
    except CloudForgeError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1) from exc


@app.command()
def build(
    config: ConfigOption = Path(DEFAULT_CONFIG_FILE),
    define: DefineOption = [],
    verbose: VerboseOption = False,
) -> None:
    """Clean, then compile HTML and stylesheets and copy dependencies."""
    _run(config, define, verbose, lambda forge: forge.build())


@app.command()
def clean(
    config: ConfigOption = Path(DEFAULT_CONFIG_FILE),
    verbose: VerboseOption = False,
) -> None:
    """Delete the build directories."""
    _run(config, [], verbose, lambda forge: forge.clean())


@app.command()
def deploy(
    config: ConfigOption = Path(DEFAULT_CONFIG_FILE),
    define: DefineOption = [],
    verbose: VerboseOption = False,
) -> None:
    """Build, sync the deploy directory to S3 and invalidate CloudFront."""
    _run(config, define, verbose, lambda forge: forge.deploy())


@app.command()
def develop(
    config: ConfigOption = Path(DEFAULT_CONFIG_FILE),
    define: DefineOption = [],
    verbose: VerboseOption = False,
) -> None:
    """Build, serve locally and rebuild on every change."""
    try:
        _run(config, define, verbose, lambda forge: forge.develop())
    except KeyboardInterrupt:
        logger.info("Stopped")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
