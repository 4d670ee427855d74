"""Text extraction for supported upload formats."""

from __future__ import annotations

import io
import mimetypes
from pathlib import PurePath

import fitz
from docx import Document
from markdown_it import MarkdownIt

from chunkwise.ingest.types import LoadedDocument

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"
MARKDOWN_MIME = "text/markdown"
GENERIC_MIME = "application/octet-stream"

_SUFFIX_MIME = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
    ".txt": TEXT_MIME,
    ".text": TEXT_MIME,
    ".md": MARKDOWN_MIME,
    ".markdown": MARKDOWN_MIME,
}

_MD = MarkdownIt()


class ExtractionError(ValueError):
    """Raised when no text can be obtained from an upload."""


class UnsupportedFileTypeError(ExtractionError):
    def __init__(self, mime: str) -> None:
        super().__init__(f"Unsupported file type: {mime}")
        self.mime = mime


class NoTextExtractedError(ExtractionError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"No text extracted from {filename}")
        self.filename = filename


class BaseLoader:
    """Common loader interface."""

    mime_type: str = GENERIC_MIME

    def can_load(self, mime: str) -> bool:
        return mime == self.mime_type

    def extract(self, raw: bytes) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class TextLoader(BaseLoader):
    mime_type = TEXT_MIME

    def extract(self, raw: bytes) -> str:
        return raw.decode("utf-8", errors="ignore")


class MarkdownLoader(BaseLoader):
    """Keeps line structure so headings still drive partitioning."""

    mime_type = MARKDOWN_MIME

    def extract(self, raw: bytes) -> str:
        text = raw.decode("utf-8", errors="ignore")
        tokens = _MD.parse(text)
        parts = [token.content.strip() for token in tokens if token.content.strip()]
        return "\n".join(parts) if parts else text


class PDFLoader(BaseLoader):
    mime_type = PDF_MIME

    def extract(self, raw: bytes) -> str:
        with fitz.open(stream=raw, filetype="pdf") as doc:
            pages = [page.get_text("text", sort=True) for page in doc]
        return "\n\n".join(pages)


class DocxLoader(BaseLoader):
    mime_type = DOCX_MIME

    def extract(self, raw: bytes) -> str:
        document = Document(io.BytesIO(raw))
        return "\n".join(para.text for para in document.paragraphs)


class LoaderRegistry:
    """Registry that selects an extractor by declared MIME type."""

    def __init__(self) -> None:
        self._loaders: list[BaseLoader] = [
            PDFLoader(),
            DocxLoader(),
            TextLoader(),
            MarkdownLoader(),
        ]

    def for_mime(self, mime: str) -> BaseLoader | None:
        for loader in self._loaders:
            if loader.can_load(mime):
                return loader
        return None

    def load(self, raw: bytes, filename: str, mime: str | None = None) -> LoadedDocument:
        resolved = resolve_mime(filename, mime)
        loader = self.for_mime(resolved)
        if loader is None:
            raise UnsupportedFileTypeError(resolved)
        text = loader.extract(raw)
        if not text.strip():
            raise NoTextExtractedError(filename)
        return LoadedDocument(
            filename=filename,
            mime=resolved,
            text=text,
            size_bytes=len(raw),
            metadata={"loader": type(loader).__name__},
        )


def resolve_mime(filename: str, mime: str | None) -> str:
    """Prefer the declared MIME type, guessing from the suffix when it is generic."""
    declared = (mime or "").split(";", 1)[0].strip().lower()
    if declared and declared != GENERIC_MIME:
        # Browsers often label markdown uploads as plain text.
        if declared == TEXT_MIME and PurePath(filename).suffix.lower() in {".md", ".markdown"}:
            return MARKDOWN_MIME
        return declared
    suffix = PurePath(filename).suffix.lower()
    if suffix in _SUFFIX_MIME:
        return _SUFFIX_MIME[suffix]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or GENERIC_MIME


__all__ = [
    "ExtractionError",
    "UnsupportedFileTypeError",
    "NoTextExtractedError",
    "LoaderRegistry",
    "resolve_mime",
]
