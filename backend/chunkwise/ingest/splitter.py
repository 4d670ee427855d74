"""Sentence splitting and structural heading detection."""

from __future__ import annotations

import re
from typing import Iterator, Pattern, Sequence

MIN_SENTENCE_CHARS = 10

_SENTENCE_BODY_RE = re.compile(r"[^.!?]+")

Rule = tuple[str, Pattern[str]]

# Whole-text rules. Any match anywhere flips the corresponding signal.
CHAPTER_PATTERNS: Sequence[Rule] = (
    ("chapter_word", re.compile(r"^Chapter\s+\d+", re.IGNORECASE | re.MULTILINE)),
    ("chapter_caps", re.compile(r"^CHAPTER\s+\d+", re.MULTILINE)),
    ("numbered_title", re.compile(r"^\d+\.\s+[A-Z]", re.MULTILINE)),
    ("caps_line", re.compile(r"^[A-Z][A-Z\s]{3,}$", re.MULTILINE)),
)

SECTION_PATTERNS: Sequence[Rule] = (
    ("caps_line", re.compile(r"^[A-Z][A-Z\s]{2,}$", re.MULTILINE)),
    ("numbered_subsection", re.compile(r"^\d+\.\d+\s+[A-Z]", re.MULTILINE)),
    ("title_case_pair", re.compile(r"^[A-Z][a-z]+\s+[A-Z]", re.MULTILINE)),
)

HEADER_PATTERNS: Sequence[Rule] = (
    ("caps_line", re.compile(r"^[A-Z][A-Z\s]{3,}$", re.MULTILINE)),
    ("title_case_pair", re.compile(r"^[A-Z][a-z]+\s+[A-Z]", re.MULTILINE)),
    ("numbered_title", re.compile(r"^\d+\.\s+[A-Z]", re.MULTILINE)),
)

# Single-line rules used when partitioning a document.
CHAPTER_HEADING_PATTERNS: Sequence[Rule] = (
    ("chapter_word", re.compile(r"^Chapter\s+\d+", re.IGNORECASE)),
    ("chapter_caps", re.compile(r"^CHAPTER\s+\d+")),
    ("numbered_caps_title", re.compile(r"^\d+\.\s+[A-Z][A-Z\s]+")),
)

SECTION_HEADING_PATTERNS: Sequence[Rule] = (
    ("caps_line", re.compile(r"^[A-Z][A-Z\s]{2,}$")),
    ("numbered_subsection", re.compile(r"^\d+\.\d+\s+[A-Z][a-z]+")),
)


class Sentences:
    """Lazy, restartable view over the sentences of ``text``.

    Sentences are the runs between groups of ``.``, ``!`` or ``?``, stripped,
    keeping only those longer than ``MIN_SENTENCE_CHARS``. Every iteration
    rescans the text from the start.
    """

    __slots__ = ("text", "min_chars")

    def __init__(self, text: str, min_chars: int = MIN_SENTENCE_CHARS) -> None:
        self.text = text
        self.min_chars = min_chars

    def __iter__(self) -> Iterator[str]:
        for match in _SENTENCE_BODY_RE.finditer(self.text):
            sentence = match.group().strip()
            if len(sentence) > self.min_chars:
                yield sentence


def split_sentences(text: str) -> list[str]:
    """Return the sentences of ``text`` as a list."""
    return list(Sentences(text))


def first_match(rules: Sequence[Rule], text: str) -> str | None:
    """Return the label of the first rule matching ``text``."""
    for label, pattern in rules:
        if pattern.search(text):
            return label
    return None


def any_match(rules: Sequence[Rule], text: str) -> bool:
    return first_match(rules, text) is not None


def detect_chapters(text: str) -> bool:
    return any_match(CHAPTER_PATTERNS, text)


def detect_sections(text: str) -> bool:
    return any_match(SECTION_PATTERNS, text)


def detect_headers(text: str) -> bool:
    return any_match(HEADER_PATTERNS, text)


def is_chapter_heading(line: str) -> bool:
    return any(pattern.match(line) for _, pattern in CHAPTER_HEADING_PATTERNS)


def is_section_heading(line: str) -> bool:
    return any(pattern.match(line) for _, pattern in SECTION_HEADING_PATTERNS)


__all__ = [
    "CHAPTER_PATTERNS",
    "SECTION_PATTERNS",
    "HEADER_PATTERNS",
    "CHAPTER_HEADING_PATTERNS",
    "SECTION_HEADING_PATTERNS",
    "Sentences",
    "split_sentences",
    "first_match",
    "any_match",
    "detect_chapters",
    "detect_sections",
    "detect_headers",
    "is_chapter_heading",
    "is_section_heading",
]
