"""Tests for page compilation through resolved layouts."""

import pytest

from cloudforge.core.errors import (
    MetadataError,
    MissingLayoutError,
    PageCompileError,
    TemplateSyntaxError,
)
from cloudforge.rendering.layouts import LAYOUT_FILENAME
from cloudforge.rendering.pages import PageCompiler


def _read(path) -> str:
    return path.read_text(encoding="utf-8")


class TestLayoutComposition:
    def test_root_layout_wraps_content(self, write_tree, html_config, tmp_path) -> None:
        write_tree({LAYOUT_FILENAME: "<html><{=it.content}></html>", "index.html": "Hello"})

        PageCompiler(html_config()).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "<html>Hello</html>"

    def test_single_root_layout_applies_everywhere(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "R(<{= it.content }>)",
                "index.html": "1",
                "a/index.html": "2",
                "a/b/c/page.html": "3",
            }
        )

        report = PageCompiler(html_config()).compile_all()

        build = tmp_path / "build"
        assert _read(build / "index.html") == "R(1)"
        assert _read(build / "a" / "index.html") == "R(2)"
        assert _read(build / "a" / "b" / "c" / "page.html") == "R(3)"
        assert len(report.pages) == 3

    def test_nearest_layout_wins(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "ROOT:<{= it.content }>",
                "a/" + LAYOUT_FILENAME: "A:<{= it.content }>",
                "a/index.html": "own",
                "a/b/index.html": "deep",
                "c/index.html": "sibling",
            }
        )

        PageCompiler(html_config()).compile_all()

        build = tmp_path / "build"
        assert _read(build / "a" / "index.html") == "A:own"
        assert _read(build / "a" / "b" / "index.html") == "A:deep"
        assert _read(build / "c" / "index.html") == "ROOT:sibling"

    def test_layout_can_nest_its_own_markup(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: (
                    "<{% if it.metadata.title %}><h1><{! it.metadata.title }></h1>"
                    "<{% endif %}><main><{= it.content }></main>"
                ),
                "blog/metadata.json": '{"title": "A & B"}',
                "blog/index.html": "post",
                "index.html": "home",
            }
        )

        PageCompiler(html_config()).compile_all()

        build = tmp_path / "build"
        assert _read(build / "blog" / "index.html") == "<h1>A &amp; B</h1><main>post</main>"
        assert _read(build / "index.html") == "<main>home</main>"

    def test_content_without_syntax_is_embedded_verbatim(
        self, write_tree, html_config, tmp_path
    ) -> None:
        content = "<p>Plain {{ client.side }} text</p>\n"
        write_tree({LAYOUT_FILENAME: "<main><{= it.content }></main>", "index.html": content})

        PageCompiler(html_config()).compile_all()

        assert _read(tmp_path / "build" / "index.html") == f"<main>{content}</main>"

    def test_content_line_endings_are_preserved(
        self, write_tree, html_config, tmp_path
    ) -> None:
        source = write_tree({LAYOUT_FILENAME: "[<{= it.content }>]"})
        (source / "index.html").write_bytes(b"Hello\r\nWorld\r\n")

        PageCompiler(html_config()).compile_all()

        assert (tmp_path / "build" / "index.html").read_bytes() == b"[Hello\r\nWorld\r\n]"

    def test_registry_is_rebuilt_each_pass(self, write_tree, html_config, tmp_path) -> None:
        source = write_tree(
            {
                LAYOUT_FILENAME: "ROOT:<{= it.content }>",
                "a/" + LAYOUT_FILENAME: "A:<{= it.content }>",
                "a/index.html": "x",
            }
        )
        compiler = PageCompiler(html_config())
        compiler.compile_all()
        (source / "a" / LAYOUT_FILENAME).unlink()

        compiler.compile_all()

        assert _read(tmp_path / "build" / "a" / "index.html") == "ROOT:x"

    def test_output_is_idempotent(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.site }>|<{= it.content }>",
                "metadata.json": '{"n": 3}',
                "index.html": "<{% for i in range(it.metadata.n) %}><{= i }><{% endfor %}>",
                "x/y/page.html": "<{! it.site }>",
            }
        )
        first = tmp_path / "first"
        second = tmp_path / "second"

        PageCompiler(
            html_config(build_directory=first, template_dependencies={"site": "S"})
        ).compile_all()
        PageCompiler(
            html_config(build_directory=second, template_dependencies={"site": "S"})
        ).compile_all()

        first_files = sorted(p.relative_to(first) for p in first.rglob("*") if p.is_file())
        second_files = sorted(p.relative_to(second) for p in second.rglob("*") if p.is_file())
        assert first_files == second_files
        for relative in first_files:
            assert (first / relative).read_bytes() == (second / relative).read_bytes()


class TestRenderContext:
    def test_metadata_and_dependencies_reach_content_and_layout(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<title><{= it.metadata.title }> - <{= it.site }></title><{= it.content }>",
                "metadata.json": '{"title": "T"}',
                "index.html": "<{= it.metadata.title }>/<{= it.site }>",
            }
        )

        PageCompiler(html_config(template_dependencies={"site": "S"})).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "<title>T - S</title>T/S"

    def test_metadata_keys_shadow_mapping_methods(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>|<{= it.keys }>",
                "metadata.json": '{"items": ["a", "b"]}',
                "index.html": "<{% for x in it.metadata.items %}><{= x }><{% endfor %}>",
            }
        )

        PageCompiler(html_config(template_dependencies={"keys": "K"})).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "ab|K"

    def test_content_template_has_no_content_field(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree({LAYOUT_FILENAME: "L<{= it.content }>", "index.html": "[<{= it.content }>]"})

        PageCompiler(html_config()).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "L[]"

    def test_rendered_content_overrides_dependency_named_content(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree({LAYOUT_FILENAME: "<{= it.content }>", "index.html": "page"})

        PageCompiler(html_config(template_dependencies={"content": "global"})).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "page"

    def test_dependencies_override_metadata_key(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "metadata.json": '{"title": "from sidecar"}',
                "index.html": "<{= it.metadata.title }>",
            }
        )

        PageCompiler(
            html_config(template_dependencies={"metadata": {"title": "from config"}})
        ).compile_all()

        assert _read(tmp_path / "build" / "index.html") == "from config"

    def test_metadata_is_per_directory(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "metadata.json": '{"title": "root"}',
                "index.html": "<{= it.metadata.title }>",
                "sub/index.html": "[<{= it.metadata.title }>]",
            }
        )

        PageCompiler(html_config()).compile_all()

        assert _read(tmp_path / "build" / "sub" / "index.html") == "[]"

    def test_components_from_content(self, write_tree, html_config, tmp_path) -> None:
        components = write_tree(
            {"nav.html": "<nav><{= it.active }></nav>"}, root=tmp_path / "components"
        )
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.get_component('nav.html', {'active': 'layout'}) }><{= it.content }>",
                "index.html": "<{= it.get_component('nav.html', {'active': 'home'}) }>",
            }
        )

        PageCompiler(html_config(components_directory=components)).compile_all()

        assert (
            _read(tmp_path / "build" / "index.html")
            == "<nav>layout</nav><nav>home</nav>"
        )


class TestFailures:
    def test_missing_root_layout_is_fatal(self, write_tree, html_config) -> None:
        write_tree({"a/" + LAYOUT_FILENAME: "<{= it.content }>", "index.html": "x"})

        with pytest.raises(MissingLayoutError):
            PageCompiler(html_config()).compile_all()

    def test_malformed_metadata_fails_with_path(
        self, write_tree, html_config, tmp_path
    ) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "news/metadata.json": "{broken",
                "news/index.html": "x",
            }
        )

        with pytest.raises(PageCompileError) as exc_info:
            PageCompiler(html_config()).compile_all()

        assert isinstance(exc_info.value.__cause__, MetadataError)
        assert str(tmp_path / "src" / "news") in str(exc_info.value)

    def test_first_failure_aborts_pass(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "a/index.html": "ok",
                "b/index.html": "<{% if it.x %}>unterminated",
                "c/index.html": "never",
            }
        )

        with pytest.raises(PageCompileError) as exc_info:
            PageCompiler(html_config()).compile_all()

        build = tmp_path / "build"
        assert exc_info.value.path == tmp_path / "src" / "b" / "index.html"
        assert isinstance(exc_info.value.__cause__, TemplateSyntaxError)
        assert (build / "a" / "index.html").exists()
        assert not (build / "c" / "index.html").exists()

    def test_missing_component_names_page(self, write_tree, html_config, tmp_path) -> None:
        write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "index.html": "<{= it.get_component('missing.html') }>",
            }
        )

        with pytest.raises(PageCompileError, match="index.html"):
            PageCompiler(html_config(components_directory=tmp_path)).compile_all()

    def test_missing_source_directory(self, html_config) -> None:
        with pytest.raises(FileNotFoundError):
            PageCompiler(html_config()).compile_all()


class TestCopyThrough:
    def test_copies_configured_extensions(self, write_tree, html_config, tmp_path) -> None:
        source = write_tree(
            {
                LAYOUT_FILENAME: "<{= it.content }>",
                "metadata.json": "{}",
                "index.html": "x",
                "notes.md": "not copied",
                "img/readme.TXT": "copied",
            }
        )
        (source / "img" / "logo.png").write_bytes(b"\x89PNG\r\n")
        (source / ".DS_Store").write_bytes(b"\x00")

        report = PageCompiler(
            html_config(copy_files_with_extensions=["png", ".txt", ".json", ".dot"])
        ).compile_all()

        build = tmp_path / "build"
        assert (build / "img" / "logo.png").read_bytes() == b"\x89PNG\r\n"
        assert _read(build / "img" / "readme.TXT") == "copied"
        assert not (build / "notes.md").exists()
        assert not (build / "metadata.json").exists()
        assert not (build / LAYOUT_FILENAME).exists()
        assert not (build / ".DS_Store").exists()
        assert len(report.copied) == 2
