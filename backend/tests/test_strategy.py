"""Tests for structure analysis and strategy selection."""

from chunkwise.ingest.strategy import (
    DEFAULT_STRATEGIES,
    LARGE_FILE_BYTES,
    DocumentStructure,
    analyze_structure,
    assess_complexity,
    select_strategy,
)


def _structure(**overrides) -> DocumentStructure:
    values = {
        "type": "document",
        "has_chapters": False,
        "has_sections": False,
        "has_headers": False,
        "estimated_pages": 1,
        "complexity": "low",
    }
    values.update(overrides)
    return DocumentStructure(**values)


def test_default_strategies_are_fixed() -> None:
    smart = DEFAULT_STRATEGIES["smart"]
    semantic = DEFAULT_STRATEGIES["semantic"]
    book = DEFAULT_STRATEGIES["book"]
    assert (smart.min_chunk_size, smart.max_chunk_size, smart.overlap) == (800, 2000, 200)
    assert (semantic.min_chunk_size, semantic.max_chunk_size, semantic.overlap) == (1000, 3000, 300)
    assert (book.min_chunk_size, book.max_chunk_size, book.overlap) == (1500, 4000, 400)
    assert book.chapter_aware and not smart.chapter_aware


def test_book_sized_text_detects_chapters() -> None:
    text = "Chapter 1\n" + "Some sentence about things here. " * 2000
    structure = analyze_structure(text)
    assert structure.type == "book"
    assert structure.has_chapters
    assert not structure.has_sections
    assert structure.estimated_pages == -(-len(text) // 3000)
    assert select_strategy(structure, len(text)).name == "book"


def test_report_sized_text_detects_sections() -> None:
    text = "1.1 Overview of scope\n" + "the quick brown fox jumps over the lazy dog. " * 600
    structure = analyze_structure(text)
    assert structure.type == "report"
    assert structure.has_sections
    assert not structure.has_chapters
    assert select_strategy(structure, len(text)).name == "semantic"


def test_report_without_sections_uses_smart() -> None:
    text = "the quick brown fox jumps over the lazy dog. " * 600
    structure = analyze_structure(text)
    assert structure.type == "report"
    assert not structure.has_sections
    assert structure.complexity == "low"
    assert select_strategy(structure, len(text)).name == "smart"


def test_complexity_thresholds() -> None:
    assert assess_complexity(" ".join(["word"] * 30)) == "high"
    assert assess_complexity(" ".join(["word"] * 40) + ". ") == "medium"
    assert assess_complexity("short one. another one.") == "low"
    assert assess_complexity("") == "low"


def test_selection_precedence() -> None:
    assert select_strategy(_structure(), LARGE_FILE_BYTES + 1).name == "book"
    assert select_strategy(_structure(complexity="high"), 100).name == "semantic"
    assert select_strategy(_structure(has_sections=True, complexity="high"), 100).name == "semantic"
    assert select_strategy(_structure(type="book", has_sections=True), 100).name == "book"
    assert select_strategy(_structure(complexity="medium"), 100).name == "smart"
