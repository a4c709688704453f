"""Build orchestration: clean → HTML → stylesheets → dependencies."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .assets import clean as clean_stage
from .assets.dependencies import copy_dependency
from .assets.stylesheets import compile_stylesheets
from .core.errors import ConfigurationError
from .core.models import ForgeConfig
from .core.settings import DeploySettings
from .deploy.invalidation import invalidate_distribution
from .deploy.storage import SyncResult, sync_directory
from .deploy.target import create_clients, resolve_target
from .rendering.pages import CompileReport, PageCompiler

logger = logging.getLogger(__name__)


@contextmanager
def stage(action: str) -> Iterator[None]:
    """Log the start, success or failure of a build stage."""
    logger.info(f"{action}...")
    try:
        yield
    except Exception:
        logger.error(f"{action} failed")
        raise
    logger.info(f"{action}: done")


class CloudForge:
    """Runs build passes for one configuration.

    Each coroutine is one stage; ``build`` awaits them in order so a
    failing stage stops the pass. Work inside a stage runs in worker
    threads: clean and dependency targets fan out concurrently, HTML and
    stylesheet compilation are single sequential walks.
    """

    def __init__(self, config: ForgeConfig) -> None:
        self.config = config

    async def build(self) -> None:
        with stage("Building"):
            await self.clean()
            if self.config.html:
                await self.compile_html()
            else:
                logger.debug("No html section configured; skipping HTML")
            if self.config.stylesheet:
                await self.compile_stylesheets()
            else:
                logger.debug("No stylesheet section configured; skipping stylesheets")
            if self.config.dependencies:
                await self.copy_dependencies()
            else:
                logger.debug("No dependencies configured; skipping copies")

    async def clean(self) -> list[Path]:
        """Delete every build directory not listed in ``clean_ignore_directories``."""
        directories = clean_stage.directories_to_clean(
            self.config.build_directories(), self.config.clean_ignore_directories
        )
        with stage("Cleaning build directories"):
            removed = await asyncio.gather(
                *(asyncio.to_thread(clean_stage.remove_directory, d) for d in directories)
            )
        return [d for d, was_removed in zip(directories, removed) if was_removed]

    async def compile_html(self) -> CompileReport:
        if self.config.html is None:
            raise ConfigurationError.missing("compile HTML", ["html"])
        compiler = PageCompiler(self.config.html)
        with stage("Compiling HTML"):
            return await asyncio.to_thread(compiler.compile_all)

    async def compile_stylesheets(self) -> list[Path]:
        if self.config.stylesheet is None:
            raise ConfigurationError.missing("compile stylesheets", ["stylesheet"])
        with stage("Compiling stylesheets"):
            return await asyncio.to_thread(compile_stylesheets, self.config.stylesheet)

    async def copy_dependencies(self) -> None:
        if not self.config.dependencies:
            raise ConfigurationError.missing("copy dependencies", ["dependencies"])
        with stage("Copying dependencies"):
            await asyncio.gather(
                *(
                    asyncio.to_thread(copy_dependency, instruction)
                    for instruction in self.config.dependencies
                )
            )

    async def deploy(self, settings: DeploySettings | None = None) -> SyncResult:
        """Build, upload the deploy directory, then invalidate the CDN."""
        target = resolve_target(self.config.deploy, settings or DeploySettings())
        await self.build()

        s3, cloudfront = create_clients(target)
        with stage(f"Deploying to s3://{target.bucket}"):
            result = await asyncio.to_thread(
                sync_directory, s3, target.directory, target.bucket, acl=target.acl
            )
        if target.distribution_id:
            with stage("Creating CloudFront invalidation"):
                await asyncio.to_thread(
                    invalidate_distribution, cloudfront, target.distribution_id
                )
        return result

    async def develop(self) -> None:
        """Build, serve and rebuild on changes until interrupted."""
        from .develop.session import run_development_session

        missing = [
            name
            for name, section in (("develop", self.config.develop), ("html", self.config.html))
            if section is None
        ]
        if missing:
            raise ConfigurationError.missing("start the development server", missing)
        await run_development_session(self)

    def watch_directories(self) -> list[Path]:
        """Sources, extra watch directories and the components directory."""
        directories = self.config.source_directories()
        if self.config.develop:
            directories.extend(self.config.develop.watch_directories)
        if self.config.html and self.config.html.components_directory:
            directories.append(self.config.html.components_directory)
        return list(dict.fromkeys(directories))
