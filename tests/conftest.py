from pathlib import Path

import pytest

from cloudforge.core.models import HtmlConfig


@pytest.fixture
def write_tree(tmp_path):
    """Write ``{relative path: text}`` under a root (``tmp_path/src`` by default)."""

    def _write(files: dict[str, str], root: Path | None = None) -> Path:
        base = root or tmp_path / "src"
        base.mkdir(parents=True, exist_ok=True)
        for relative, text in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return base

    return _write


@pytest.fixture
def html_config(tmp_path):
    def _config(**overrides) -> HtmlConfig:
        values = {
            "source_directory": tmp_path / "src",
            "build_directory": tmp_path / "build",
        }
        values.update(overrides)
        return HtmlConfig(**values)

    return _config
