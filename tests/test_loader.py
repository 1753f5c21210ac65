"""Tests for scholar.sectioning.loader and markdown export."""
from pathlib import Path

import docx
import pytest

from scholar.exceptions import DocumentLoadError
from scholar.sectioning import DocumentLoader, Sectionizer, export_markdown, join_as_markdown, sectionize


class TestDocumentLoader:
    def test_plain_text(self, tmp_path: Path) -> None:
        path = tmp_path / "paper.txt"
        path.write_text("# Abstract\nShort.", encoding="utf-8")
        assert DocumentLoader().load(path) == "# Abstract\nShort."

    def test_markdown_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "paper.md"
        path.write_text("# Abstract\nShort.\n# Methods\nLong.", encoding="utf-8")
        sections = DocumentLoader().load_sections(path)
        assert [s.title for s in sections] == ["Abstract", "Methods"]

    def test_custom_sectionizer(self, tmp_path: Path) -> None:
        path = tmp_path / "paper.txt"
        path.write_text("NOTE WELL\nbody", encoding="utf-8")
        sections = DocumentLoader().load_sections(path, Sectionizer(detect_uppercase_headings=False))
        assert [s.title for s in sections] == ["Introduction"]

    def test_word_headings_become_sections(self, tmp_path: Path) -> None:
        document = docx.Document()
        document.add_heading("A Study of Cats", level=0)
        document.add_paragraph("Jane Doe")
        document.add_heading("Methods", level=1)
        document.add_paragraph("We counted cats.")
        path = tmp_path / "paper.docx"
        document.save(str(path))

        loader = DocumentLoader()
        assert "# Methods" in loader.load(path).split("\n")
        sections = loader.load_sections(path)
        assert [(s.title, s.content) for s in sections] == [
            ("A Study of Cats", "Jane Doe"),
            ("Methods", "We counted cats."),
        ]

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "paper.pdf"
        path.write_bytes(b"%PDF-1.4")
        with pytest.raises(DocumentLoadError):
            DocumentLoader().load(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError):
            DocumentLoader().load(tmp_path / "missing.txt")


class TestExportMarkdown:
    def test_writes_full_document(self, tmp_path: Path) -> None:
        sections = sectionize("# A\none\n# B\ntwo")
        path = export_markdown(sections, tmp_path / "out" / "paper.md")
        assert path.read_text(encoding="utf-8") == join_as_markdown(sections)

    def test_export_reimports(self, tmp_path: Path) -> None:
        sections = sectionize("# A\none\n# B\ntwo")
        path = export_markdown(sections, tmp_path / "paper.md")
        again = DocumentLoader().load_sections(path)
        assert [(s.title, s.content) for s in again] == [(s.title, s.content) for s in sections]
