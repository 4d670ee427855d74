"""Document structure analysis and chunking strategy selection."""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Literal, Mapping

from chunkwise.ingest.splitter import detect_chapters, detect_headers, detect_sections

DocumentType = Literal["book", "report", "document"]
Complexity = Literal["low", "medium", "high"]

BOOK_MIN_CHARS = 50_000
REPORT_MIN_CHARS = 20_000
CHARS_PER_PAGE = 3_000
LARGE_FILE_BYTES = 10 * 1024 * 1024
HIGH_COMPLEXITY_WORDS = 25
MEDIUM_COMPLEXITY_WORDS = 15

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_WORD_SPLIT_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ChunkingStrategy:
    """Size and overlap budget (in characters) for one chunking mode."""

    name: str
    min_chunk_size: int
    max_chunk_size: int
    overlap: int
    preserve_structure: bool = True
    chapter_aware: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_STRATEGIES: Mapping[str, ChunkingStrategy] = {
    "smart": ChunkingStrategy(name="smart", min_chunk_size=800, max_chunk_size=2000, overlap=200),
    "semantic": ChunkingStrategy(name="semantic", min_chunk_size=1000, max_chunk_size=3000, overlap=300),
    "book": ChunkingStrategy(
        name="book",
        min_chunk_size=1500,
        max_chunk_size=4000,
        overlap=400,
        chapter_aware=True,
    ),
}


@dataclass(frozen=True, slots=True)
class DocumentStructure:
    type: DocumentType
    has_chapters: bool
    has_sections: bool
    has_headers: bool
    estimated_pages: int
    complexity: Complexity

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def analyze_structure(text: str) -> DocumentStructure:
    """Classify a document and flag the structural markers it contains.

    Chapter detection only runs for book-sized text and section detection only
    for report-sized text; the other flag stays False.
    """
    has_chapters = False
    has_sections = False
    if len(text) > BOOK_MIN_CHARS:
        doc_type: DocumentType = "book"
        has_chapters = detect_chapters(text)
    elif len(text) > REPORT_MIN_CHARS:
        doc_type = "report"
        has_sections = detect_sections(text)
    else:
        doc_type = "document"

    return DocumentStructure(
        type=doc_type,
        has_chapters=has_chapters,
        has_sections=has_sections,
        has_headers=detect_headers(text),
        estimated_pages=math.ceil(len(text) / CHARS_PER_PAGE),
        complexity=assess_complexity(text),
    )


def assess_complexity(text: str) -> Complexity:
    sentences = len(_SENTENCE_SPLIT_RE.split(text))
    words = len(_WORD_SPLIT_RE.split(text))
    avg_words_per_sentence = words / sentences
    if avg_words_per_sentence > HIGH_COMPLEXITY_WORDS:
        return "high"
    if avg_words_per_sentence > MEDIUM_COMPLEXITY_WORDS:
        return "medium"
    return "low"


def select_strategy(
    structure: DocumentStructure,
    byte_length: int,
    strategies: Mapping[str, ChunkingStrategy] = DEFAULT_STRATEGIES,
) -> ChunkingStrategy:
    """Pick the chunking strategy; the first matching rule wins."""
    if structure.type == "book" or byte_length > LARGE_FILE_BYTES:
        name = "book"
    elif structure.has_sections or structure.complexity == "high":
        name = "semantic"
    else:
        name = "smart"
    strategy = strategies[name]
    if strategy.name != name:
        strategy = replace(strategy, name=name)
    return strategy


__all__ = [
    "BOOK_MIN_CHARS",
    "REPORT_MIN_CHARS",
    "CHARS_PER_PAGE",
    "LARGE_FILE_BYTES",
    "ChunkingStrategy",
    "DEFAULT_STRATEGIES",
    "DocumentStructure",
    "analyze_structure",
    "assess_complexity",
    "select_strategy",
]
