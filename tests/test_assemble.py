"""Tests for reassembling an exploded directory."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mdtree.assemble import assemble_document, extract_section_entries, restore_section
from mdtree.exceptions import IndexNotFoundError, MissingMainTitleError
from mdtree.explode import explode_document
from mdtree.parser import list_headings, parse_markdown


def _heading_structure(text: str) -> list[tuple[int, str]]:
    return [(h.level, h.text) for h in list_headings(parse_markdown(text))]


class TestExtractSectionEntries:
    """Tests for extract_section_entries function."""

    def test_only_level_two_file_links(self) -> None:
        """Title, sub-heading and anchor rows are not section entries."""
        index = (
            "# T\n\n## Table of Contents\n\n"
            "- [T](#table-of-contents)\n"
            "  - [A](./a.md)\n"
            "    - [A.1](./a.md#a1)\n"
            "  - [Lost](#lost)\n"
            "  - [Web](https://example.com/b.md)\n"
            "  - [B](./b.md)\n"
        )
        assert extract_section_entries(index) == [("a.md", "A"), ("b.md", "B")]

    def test_deduplicates_by_filename(self) -> None:
        """A file linked twice is listed once."""
        index = "  - [A](./a.md)\n  - [A again](./a.md#top)\n"
        assert extract_section_entries(index) == [("a.md", "A")]

    def test_heading_text_with_brackets_and_parens(self) -> None:
        """Displayed text may contain punctuation."""
        index = "  - [Setup (Linux) [beta]](./setup-linux-beta.md)\n"
        assert extract_section_entries(index) == [("setup-linux-beta.md", "Setup (Linux) [beta]")]


class TestRestoreSection:
    """Tests for restore_section function."""

    def test_promotes_only_first_heading(self) -> None:
        """Nested headings keep their depth."""
        assert restore_section("# A\n\n### A.1\n\n# Odd\n") == "## A\n\n### A.1\n\n# Odd\n"

    def test_first_heading_not_level_one(self, caplog: pytest.LogCaptureFixture) -> None:
        """A section not starting at level 1 is included unchanged."""
        with caplog.at_level(logging.WARNING):
            assert restore_section("## A\ntext\n") == "## A\ntext\n"
        assert "not level 1" in caplog.text


class TestAssembleDocument:
    """Tests for assemble_document function."""

    @pytest.mark.asyncio
    async def test_round_trip_is_exact_for_simple_document(self, tmp_path: Path) -> None:
        """Explode then assemble reproduces a preamble-free document."""
        original = "# T\n\n## A\n\n### A.1\n\n## B\n"
        source = tmp_path / "doc.md"
        source.write_text(original, encoding="utf-8")

        await explode_document(source, tmp_path / "out")
        result = await assemble_document(tmp_path / "out")

        assert result.content == original
        assert result.title == "T"
        assert result.included == ["a.md", "b.md"]

    @pytest.mark.asyncio
    async def test_round_trip_preserves_heading_structure(
        self, sample_document: Path, tmp_path: Path
    ) -> None:
        """Heading levels and text survive the round trip."""
        await explode_document(sample_document, tmp_path / "out")
        result = await assemble_document(tmp_path / "out")

        original = sample_document.read_text(encoding="utf-8")
        assert _heading_structure(result.content) == _heading_structure(original)
        assert "```bash\nnpm install\n## not a heading\n```" in result.content

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "heading",
        [
            "[API](./api.md) Guide",
            "Q&amp;A",
            "Version <small>beta</small>",
            "The `run()` call",
            "Use \\*args\\* here",
            "**Bold** _move_",
            "C# \\#1",
        ],
    )
    async def test_round_trip_with_inline_markup(self, tmp_path: Path, heading: str) -> None:
        """Headings with links, entities, HTML, code or escapes survive the round trip."""
        original = f"# {heading}\n\n## {heading}\n\nBody.\n\n### Under {heading}\n\n## B\n"
        source = tmp_path / "doc.md"
        source.write_text(original, encoding="utf-8")

        await explode_document(source, tmp_path / "out")
        result = await assemble_document(tmp_path / "out")

        assert _heading_structure(result.content) == _heading_structure(original)
        assert f"## {heading}\n\nBody.\n" in result.content
        assert len(result.included) == 2

    @pytest.mark.asyncio
    async def test_round_trip_with_duplicate_headings(self, tmp_path: Path) -> None:
        """Disambiguated section files come back in order."""
        original = "# T\n\n## Notes\n\none\n\n## Notes\n\ntwo\n"
        source = tmp_path / "doc.md"
        source.write_text(original, encoding="utf-8")

        await explode_document(source, tmp_path / "out")
        result = await assemble_document(tmp_path / "out")

        assert result.content == original

    @pytest.mark.asyncio
    async def test_writes_output_file(self, sample_document: Path, tmp_path: Path) -> None:
        """Writes the document, creating parent directories."""
        await explode_document(sample_document, tmp_path / "out")
        output = tmp_path / "nested" / "rebuilt.md"

        result = await assemble_document(tmp_path / "out", output)

        assert result.output_path == output
        assert output.read_text(encoding="utf-8") == result.content

    @pytest.mark.asyncio
    async def test_missing_index(self, tmp_path: Path) -> None:
        """A directory without index.md is fatal."""
        with pytest.raises(IndexNotFoundError, match="index.md"):
            await assemble_document(tmp_path)

    @pytest.mark.asyncio
    async def test_missing_main_title(self, tmp_path: Path) -> None:
        """An index without a level 1 heading is fatal."""
        (tmp_path / "index.md").write_text("## Table of Contents\n\n  - [A](./a.md)\n", encoding="utf-8")
        with pytest.raises(MissingMainTitleError, match="index.md"):
            await assemble_document(tmp_path)

    @pytest.mark.asyncio
    async def test_missing_section_file_is_skipped(
        self, sample_document: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A missing section file is skipped with a warning."""
        output_dir = tmp_path / "out"
        await explode_document(sample_document, output_dir)
        (output_dir / "installation.md").unlink()

        with caplog.at_level(logging.WARNING):
            result = await assemble_document(output_dir)

        assert result.skipped == ["installation.md"]
        assert result.included == ["introduction.md", "usage.md"]
        assert "## Installation" not in result.content
        assert "## Usage" in result.content
        assert "Section file not found" in caplog.text

    @pytest.mark.asyncio
    async def test_ignores_links_outside_directory(self, tmp_path: Path) -> None:
        """Section links may not escape the exploded directory."""
        exploded = tmp_path / "out"
        exploded.mkdir()
        (tmp_path / "secret.md").write_text("# Secret\n", encoding="utf-8")
        (exploded / "index.md").write_text(
            "# T\n\n## Table of Contents\n\n- [T](#table-of-contents)\n  - [Secret](../secret.md)\n",
            encoding="utf-8",
        )

        result = await assemble_document(exploded)

        assert result.content == "# T\n"
        assert result.included == []
