"""Source diversity analysis and confidence scoring for retrieved sources.

A set of retrieved sources is bucketed into semantic categories by keyword
heuristics. The spread across categories yields a diversity score, and the
relevance/recency of the sources, minus penalties for scarcity and
concentration, yields a confidence estimate capped at 0.85.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Sequence

CATEGORIES = (
    "primary",
    "secondary",
    "regulatory",
    "competitive",
    "technical",
    "academic",
    "social",
)

# Evaluated in order; the first group with a keyword hit decides the category.
CATEGORY_KEYWORDS: Sequence[tuple[str, Sequence[str]]] = (
    ("regulatory", ("government", "regulatory", "legal", "compliance", "sec", "fed")),
    ("primary", ("official", "direct", "primary", "corporate")),
    ("competitive", ("competitor", "market", "industry", "analysis", "report")),
    ("technical", ("technical", "implementation", "api", "documentation", "code")),
    ("academic", ("research", "academic", "paper", "study", "journal")),
    ("social", ("social", "community", "forum", "discussion", "reddit")),
)

# Query keywords that call for a category when it is absent from the results.
QUERY_KEYWORDS: Sequence[tuple[str, Sequence[str]]] = (
    ("regulatory", ("regulation", "compliance", "legal", "policy")),
    ("competitive", ("competitor", "market", "industry", "strategy")),
    ("technical", ("implementation", "technical", "api", "integration")),
)

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.85
DEFAULT_SCORE = 0.5
RECENT_WINDOW = timedelta(days=30)
MAX_COUNTED_TYPES = 5
TARGET_SOURCES = 3
TARGET_TYPES = 3
SOURCE_COUNT_PENALTY = 0.15
TYPE_COUNT_PENALTY = 0.1
DOMINANCE_RATIO = 0.7
DOMINANCE_PENALTY = 0.3
LOW_CONFIDENCE = 0.3

NO_SOURCES_WARNING = "No sources available"
NO_SOURCES_RECOMMENDATION = "Add at least 2 sources for basic confidence"


@dataclass(slots=True)
class RetrievedSource:
    """A retrieved chunk with its relevance score and source attributes."""

    id: str
    content: str = ""
    score: float | None = None
    filename: str | None = None
    name: str | None = None
    type: str | None = None
    url: str | None = None
    summary: str | None = None
    timestamp: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "score": self.score,
            "filename": self.filename,
            "name": self.name,
            "type": self.type,
            "url": self.url,
            "summary": self.summary,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "metadata": dict(self.metadata),
        }


SourceBreakdown = dict[str, list[RetrievedSource]]


@dataclass(slots=True)
class DiversityAnalysis:
    confidence: float
    diversity: float
    source_breakdown: SourceBreakdown
    recommendations: list[str]
    warnings: list[str]
    metrics: dict[str, Any]

    @property
    def category_counts(self) -> dict[str, int]:
        return {category: len(items) for category, items in self.source_breakdown.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "confidence": self.confidence,
            "diversity": self.diversity,
            "source_breakdown": {
                category: [source.id for source in items]
                for category, items in self.source_breakdown.items()
            },
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
            "metrics": dict(self.metrics),
        }


class SourceDiversityAnalyzer:
    """Score how varied and trustworthy a set of retrieved sources is."""

    def __init__(
        self,
        category_keywords: Sequence[tuple[str, Sequence[str]]] = CATEGORY_KEYWORDS,
        query_keywords: Sequence[tuple[str, Sequence[str]]] = QUERY_KEYWORDS,
        recent_window: timedelta = RECENT_WINDOW,
    ) -> None:
        self.category_keywords = category_keywords
        self.query_keywords = query_keywords
        self.recent_window = recent_window

    def analyze(
        self,
        sources: Sequence[RetrievedSource],
        query: str,
        now: datetime | None = None,
    ) -> DiversityAnalysis:
        if not sources:
            return DiversityAnalysis(
                confidence=MIN_CONFIDENCE,
                diversity=0.0,
                source_breakdown={},
                recommendations=[NO_SOURCES_RECOMMENDATION],
                warnings=[NO_SOURCES_WARNING],
                metrics=_metrics({}, 0),
            )

        breakdown = self.categorize(sources)
        diversity = diversity_score(breakdown)
        base = self.base_confidence(sources, now=now)
        penalty = diversity_penalty(breakdown)
        confidence = min(max(MIN_CONFIDENCE, base - penalty), MAX_CONFIDENCE)

        return DiversityAnalysis(
            confidence=confidence,
            diversity=diversity,
            source_breakdown=breakdown,
            recommendations=self.recommendations(breakdown, query),
            warnings=build_warnings(breakdown, confidence),
            metrics=_metrics(breakdown, len(sources)),
        )

    def categorize(self, sources: Sequence[RetrievedSource]) -> SourceBreakdown:
        breakdown: SourceBreakdown = {}
        for source in sources:
            breakdown.setdefault(self.source_type(source), []).append(source)
        return breakdown

    def source_type(self, source: RetrievedSource) -> str:
        haystack = " ".join(
            (
                source.filename or source.name or "",
                source.content or source.summary or "",
                source.url or "",
            )
        ).lower()
        for category, keywords in self.category_keywords:
            if any(keyword in haystack for keyword in keywords):
                return category
        return "primary" if source.type == "local" else "secondary"

    def base_confidence(self, sources: Sequence[RetrievedSource], now: datetime | None = None) -> float:
        scores = [source.score if source.score is not None else DEFAULT_SCORE for source in sources]
        average = sum(scores) / len(scores)
        return average * 0.7 + self.recency(sources, now=now) * 0.3

    def recency(self, sources: Sequence[RetrievedSource], now: datetime | None = None) -> float:
        """Fraction of sources younger than the recent window; undated sources count as recent."""
        current = _as_aware(now) if now else datetime.now(timezone.utc)
        recent = 0
        for source in sources:
            stamp = _as_aware(source.timestamp) if source.timestamp else current
            if current - stamp < self.recent_window:
                recent += 1
        return recent / len(sources)

    def recommendations(self, breakdown: SourceBreakdown, query: str) -> list[str]:
        items = [
            f"Add {category} sources for comprehensive coverage"
            for category in self.missing_categories(breakdown, query)
        ]
        if _total(breakdown) < TARGET_SOURCES:
            items.append("Add at least 2-3 more sources for higher confidence")
        dominant = dominant_category(breakdown)
        if dominant:
            items.append(f"Consider adding sources from other perspectives beyond {dominant}")
        return items

    def missing_categories(self, breakdown: SourceBreakdown, query: str) -> list[str]:
        query_lower = query.lower()
        missing: list[str] = []
        for category, keywords in self.query_keywords:
            if any(keyword in query_lower for keyword in keywords) and category not in breakdown:
                missing.append(category)
        if len(breakdown) < 2:
            missing.append("secondary")
        return list(dict.fromkeys(missing))


def diversity_score(breakdown: SourceBreakdown) -> float:
    type_diversity = min(len(breakdown) / MAX_COUNTED_TYPES, 1.0)
    return type_diversity * 0.6 + distribution_balance(breakdown) * 0.4


def distribution_balance(breakdown: SourceBreakdown) -> float:
    """One minus the population variance of category counts over the squared mean."""
    total = _total(breakdown)
    if total == 0:
        return 0.0
    expected = total / len(breakdown)
    variance = sum((len(items) - expected) ** 2 for items in breakdown.values()) / len(breakdown)
    return max(0.0, 1 - variance / expected**2)


def diversity_penalty(breakdown: SourceBreakdown) -> float:
    total = _total(breakdown)
    count_penalty = max(0.0, (TARGET_SOURCES - total) * SOURCE_COUNT_PENALTY)
    type_penalty = max(0.0, (TARGET_TYPES - len(breakdown)) * TYPE_COUNT_PENALTY)
    return count_penalty + type_penalty + single_type_penalty(breakdown)


def single_type_penalty(breakdown: SourceBreakdown) -> float:
    total = _total(breakdown)
    if total == 0:
        return 0.0
    ratio = max(len(items) for items in breakdown.values()) / total
    return (ratio - DOMINANCE_RATIO) * DOMINANCE_PENALTY if ratio > DOMINANCE_RATIO else 0.0


def dominant_category(breakdown: SourceBreakdown) -> str | None:
    total = _total(breakdown)
    if total == 0:
        return None
    for category, items in breakdown.items():
        if len(items) / total > DOMINANCE_RATIO:
            return category
    return None


def build_warnings(breakdown: SourceBreakdown, confidence: float) -> list[str]:
    total = _total(breakdown)
    items: list[str] = []
    if confidence < LOW_CONFIDENCE:
        items.append("Low confidence - consider adding more diverse sources")
    if total == 1:
        items.append("Single source response - limited perspective")
    if total < TARGET_SOURCES:
        items.append("Limited source diversity may affect comprehensiveness")
    return items


def summarize_analysis(analysis: DiversityAnalysis) -> dict[str, Any]:
    """Condense an analysis into display-ready labels and percentages."""
    total = analysis.metrics["total_sources"]
    source_types = analysis.metrics["source_types"]
    return {
        "confidence": round(analysis.confidence * 100),
        "confidence_label": confidence_label(analysis.confidence),
        "source_count": total,
        "source_types": source_types,
        "diversity_label": diversity_label(source_types),
        "source_breakdown": [
            {
                "type": category,
                "count": len(items),
                "percentage": round(len(items) / total * 100) if total else 0,
            }
            for category, items in analysis.source_breakdown.items()
        ],
    }


def confidence_label(confidence: float) -> str:
    if confidence >= 0.8:
        return "High Confidence"
    if confidence >= 0.6:
        return "Medium Confidence"
    if confidence >= 0.4:
        return "Low Confidence"
    return "Very Low Confidence"


def diversity_label(source_types: int) -> str:
    if source_types >= 5:
        return "Excellent Diversity"
    if source_types >= 3:
        return "Good Diversity"
    if source_types >= 2:
        return "Limited Diversity"
    return "Poor Diversity"


def _metrics(breakdown: Mapping[str, Sequence[RetrievedSource]], total: int) -> dict[str, Any]:
    return {
        "total_sources": total,
        "source_types": len(breakdown),
        "category_counts": {category: len(breakdown.get(category, ())) for category in CATEGORIES},
    }


def _total(breakdown: Mapping[str, Sequence[RetrievedSource]]) -> int:
    return sum(len(items) for items in breakdown.values())


def _as_aware(stamp: datetime) -> datetime:
    return stamp if stamp.tzinfo else stamp.replace(tzinfo=timezone.utc)


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "QUERY_KEYWORDS",
    "RetrievedSource",
    "SourceBreakdown",
    "DiversityAnalysis",
    "SourceDiversityAnalyzer",
    "diversity_score",
    "distribution_balance",
    "diversity_penalty",
    "single_type_penalty",
    "dominant_category",
    "build_warnings",
    "summarize_analysis",
    "confidence_label",
    "diversity_label",
]
