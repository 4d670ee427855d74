"""Heuristic document summaries: keyword frequency and business themes."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Pattern

from chunkwise.core.logging import get_logger
from chunkwise.ingest.strategy import BOOK_MIN_CHARS, DocumentStructure

logger = get_logger(__name__)

SCAN_EDGE_CHARS = 10_000
TRUNCATION_MARKER = "\n\n...\n\n"
TOP_KEYWORDS = 10
MIN_KEYWORD_CHARS = 3
MIN_THEME_MATCHES = 3

THEME_PATTERNS: Mapping[str, Pattern[str]] = {
    "strategy": re.compile(r"strategy|strategic|planning|vision|mission", re.IGNORECASE),
    "financial": re.compile(r"financial|revenue|profit|cost|budget", re.IGNORECASE),
    "technology": re.compile(r"technology|digital|software|platform|system", re.IGNORECASE),
    "market": re.compile(r"market|customer|competition|industry|sector", re.IGNORECASE),
}

_PUNCT_RE = re.compile(r"[^\w\s]", re.ASCII)
_WS_RE = re.compile(r"\s+")


@dataclass(slots=True)
class DocumentSummary:
    type: str
    estimated_pages: int
    complexity: str
    has_chapters: bool | None = None
    has_sections: bool | None = None
    key_topics: list[str] = field(default_factory=list)
    main_themes: list[str] = field(default_factory=list)
    degraded: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        if self.degraded:
            return {key: payload[key] for key in ("type", "estimated_pages", "complexity")}
        payload.pop("degraded")
        return payload


def summarize_document(text: str, structure: DocumentStructure) -> DocumentSummary:
    """Build a keyword/theme summary; never raises."""
    try:
        scanned = scan_window(text)
        return DocumentSummary(
            type=structure.type,
            estimated_pages=structure.estimated_pages,
            complexity=structure.complexity,
            has_chapters=structure.has_chapters,
            has_sections=structure.has_sections,
            key_topics=extract_key_topics(scanned),
            main_themes=extract_main_themes(scanned),
        )
    except Exception:
        logger.exception("Failed to summarize document; returning reduced summary")
        return DocumentSummary(
            type=structure.type,
            estimated_pages=structure.estimated_pages,
            complexity=structure.complexity,
            degraded=True,
        )


def scan_window(text: str) -> str:
    """Head and tail of very large documents, the whole text otherwise."""
    if len(text) <= BOOK_MIN_CHARS:
        return text
    return text[:SCAN_EDGE_CHARS] + TRUNCATION_MARKER + text[-SCAN_EDGE_CHARS:]


def extract_key_topics(text: str, limit: int = TOP_KEYWORDS) -> list[str]:
    """Most frequent words longer than three characters.

    Ties keep the order in which words were first seen.
    """
    cleaned = _PUNCT_RE.sub("", text.lower())
    words = [word for word in _WS_RE.split(cleaned) if len(word) > MIN_KEYWORD_CHARS]
    return [word for word, _ in Counter(words).most_common(limit)]


def extract_main_themes(
    text: str,
    patterns: Mapping[str, Pattern[str]] = THEME_PATTERNS,
) -> list[str]:
    return [
        theme
        for theme, pattern in patterns.items()
        if len(pattern.findall(text)) > MIN_THEME_MATCHES
    ]


__all__ = [
    "THEME_PATTERNS",
    "DocumentSummary",
    "summarize_document",
    "scan_window",
    "extract_key_topics",
    "extract_main_themes",
]
