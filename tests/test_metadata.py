"""Tests for metadata sidecar loading."""

import pytest

from cloudforge.core.errors import MetadataError
from cloudforge.rendering.metadata import METADATA_FILENAME, load_metadata


class TestLoadMetadata:
    def test_missing_sidecar_is_empty(self, tmp_path) -> None:
        assert load_metadata(tmp_path) == {}

    def test_parses_object(self, tmp_path) -> None:
        (tmp_path / METADATA_FILENAME).write_text('{"title": "Home", "tags": ["a"]}')
        assert load_metadata(tmp_path) == {"title": "Home", "tags": ["a"]}

    def test_malformed_sidecar_names_path(self, tmp_path) -> None:
        directory = tmp_path / "blog"
        directory.mkdir()
        (directory / METADATA_FILENAME).write_text('{"title": ')

        with pytest.raises(MetadataError) as exc_info:
            load_metadata(directory)

        assert exc_info.value.path == directory / METADATA_FILENAME
        assert str(directory) in str(exc_info.value)

    def test_non_object_is_rejected(self, tmp_path) -> None:
        (tmp_path / METADATA_FILENAME).write_text("[1, 2]")

        with pytest.raises(MetadataError, match="expected a JSON object"):
            load_metadata(tmp_path)
