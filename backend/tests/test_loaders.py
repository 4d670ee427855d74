"""Tests for text extraction."""

import io

import fitz
import pytest
from docx import Document

from chunkwise.ingest.loaders import (
    DOCX_MIME,
    MARKDOWN_MIME,
    PDF_MIME,
    LoaderRegistry,
    NoTextExtractedError,
    UnsupportedFileTypeError,
    resolve_mime,
)


@pytest.fixture()
def registry() -> LoaderRegistry:
    return LoaderRegistry()


def test_plain_text(registry: LoaderRegistry) -> None:
    loaded = registry.load("Plain text with an accent: café.".encode("utf-8"), "note.txt", "text/plain")
    assert loaded.text == "Plain text with an accent: café."
    assert loaded.mime == "text/plain"
    assert loaded.metadata["loader"] == "TextLoader"


def test_markdown_keeps_one_block_per_line(registry: LoaderRegistry) -> None:
    raw = b"# Title\n\nSome paragraph text here.\n\n- item one\n"
    loaded = registry.load(raw, "readme.md", "text/plain")
    assert loaded.mime == MARKDOWN_MIME
    assert loaded.text.splitlines() == ["Title", "Some paragraph text here.", "item one"]


def test_docx(registry: LoaderRegistry) -> None:
    document = Document()
    document.add_paragraph("First paragraph of the memo.")
    document.add_paragraph("Second paragraph of the memo.")
    buffer = io.BytesIO()
    document.save(buffer)

    loaded = registry.load(buffer.getvalue(), "memo.docx", DOCX_MIME)
    assert "First paragraph of the memo." in loaded.text
    assert "Second paragraph of the memo." in loaded.text


def test_pdf(registry: LoaderRegistry) -> None:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Hello from a PDF page.")
    raw = doc.tobytes()
    doc.close()

    loaded = registry.load(raw, "hello.pdf", None)
    assert loaded.mime == PDF_MIME
    assert "Hello from a PDF page." in loaded.text


def test_unsupported_type(registry: LoaderRegistry) -> None:
    with pytest.raises(UnsupportedFileTypeError) as excinfo:
        registry.load(b"\x89PNG\r\n", "image.png", "image/png")
    assert excinfo.value.mime == "image/png"


def test_blank_text_is_rejected(registry: LoaderRegistry) -> None:
    with pytest.raises(NoTextExtractedError):
        registry.load(b"   \n\t ", "empty.txt", "text/plain")


@pytest.mark.parametrize(
    ("filename", "declared", "expected"),
    [
        ("notes.md", "text/plain", MARKDOWN_MIME),
        ("paper.pdf", None, PDF_MIME),
        ("notes.txt", "application/octet-stream", "text/plain"),
        ("table.csv", "text/csv; charset=utf-8", "text/csv"),
    ],
)
def test_resolve_mime(filename: str, declared: str | None, expected: str) -> None:
    assert resolve_mime(filename, declared) == expected
