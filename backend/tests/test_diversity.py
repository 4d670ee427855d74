"""Tests for source diversity analysis."""

from datetime import datetime, timedelta, timezone

import pytest

from chunkwise.retrieval.diversity import (
    CATEGORIES,
    RetrievedSource,
    SourceDiversityAnalyzer,
    summarize_analysis,
)


@pytest.fixture()
def analyzer() -> SourceDiversityAnalyzer:
    return SourceDiversityAnalyzer()


def _local(idx: int, content: str, score: float = 0.8, **extra) -> RetrievedSource:
    return RetrievedSource(id=f"src-{idx}", content=content, score=score, type="local", **extra)


def test_mostly_one_category(analyzer: SourceDiversityAnalyzer) -> None:
    sources = [
        _local(idx, "Notes on quarterly planning for the team", filename=f"notes{idx}.txt")
        for idx in range(4)
    ]
    sources.append(_local(4, "Summary of regulatory compliance obligations", filename="rules.txt"))

    analysis = analyzer.analyze(sources, "What changed this quarter?")

    assert analysis.category_counts == {"primary": 4, "regulatory": 1}
    assert analysis.diversity == pytest.approx(0.496)
    assert analysis.confidence == pytest.approx(0.73)
    assert analysis.recommendations == ["Consider adding sources from other perspectives beyond primary"]
    assert analysis.warnings == []


def test_single_source(analyzer: SourceDiversityAnalyzer) -> None:
    source = _local(0, "Quarterly planning notes for the team", score=0.9)

    analysis = analyzer.analyze([source], "Summarize the plan")

    assert analysis.confidence == pytest.approx(0.34)
    assert analysis.warnings == [
        "Single source response - limited perspective",
        "Limited source diversity may affect comprehensiveness",
    ]
    assert analysis.recommendations == [
        "Add secondary sources for comprehensive coverage",
        "Add at least 2-3 more sources for higher confidence",
        "Consider adding sources from other perspectives beyond primary",
    ]


def test_no_sources(analyzer: SourceDiversityAnalyzer) -> None:
    analysis = analyzer.analyze([], "anything")
    assert analysis.confidence == 0.1
    assert analysis.diversity == 0.0
    assert analysis.warnings == ["No sources available"]
    assert analysis.recommendations == ["Add at least 2 sources for basic confidence"]
    assert analysis.metrics["total_sources"] == 0


def test_confidence_is_capped(analyzer: SourceDiversityAnalyzer) -> None:
    contents = ["government rules", "market trends", "api guide", "research notes", "forum thread"]
    sources = [_local(idx, content, score=1.0) for idx, content in enumerate(contents)]

    analysis = analyzer.analyze(sources, "overview")

    assert set(analysis.source_breakdown) == {"regulatory", "competitive", "technical", "academic", "social"}
    assert analysis.confidence == pytest.approx(0.85)
    assert 0.0 <= analysis.diversity <= 1.0


def test_low_scores_are_floored(analyzer: SourceDiversityAnalyzer) -> None:
    old = datetime.now(timezone.utc) - timedelta(days=90)
    sources = [_local(0, "plain words", score=0.0, timestamp=old)]
    analysis = analyzer.analyze(sources, "query")
    assert analysis.confidence == 0.1
    assert "Low confidence - consider adding more diverse sources" in analysis.warnings


def test_every_source_lands_in_one_category(analyzer: SourceDiversityAnalyzer) -> None:
    sources = [
        _local(0, "official statement"),
        RetrievedSource(id="web-1", content="plain words", type="web"),
        RetrievedSource(id="web-2", content="community chatter"),
    ]
    breakdown = analyzer.categorize(sources)
    ids = [source.id for items in breakdown.values() for source in items]
    assert sorted(ids) == ["src-0", "web-1", "web-2"]
    assert set(breakdown) <= set(CATEGORIES)
    assert [source.id for source in breakdown["secondary"]] == ["web-1"]


def test_missing_categories_follow_query(analyzer: SourceDiversityAnalyzer) -> None:
    sources = [_local(idx, "plain words") for idx in range(3)]
    breakdown = analyzer.categorize(sources)
    missing = analyzer.missing_categories(breakdown, "Market compliance policy and API integration")
    assert missing == ["regulatory", "competitive", "technical", "secondary"]


def test_recency_uses_supplied_clock(analyzer: SourceDiversityAnalyzer) -> None:
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    sources = [
        _local(0, "plain words", timestamp=now - timedelta(days=60)),
        _local(1, "plain words", timestamp=datetime(2024, 5, 30)),
    ]
    assert analyzer.recency(sources, now=now) == pytest.approx(0.5)


def test_summary_labels(analyzer: SourceDiversityAnalyzer) -> None:
    sources = [
        _local(idx, "Notes on quarterly planning for the team", filename=f"notes{idx}.txt")
        for idx in range(4)
    ]
    sources.append(_local(4, "Summary of regulatory compliance obligations", filename="rules.txt"))
    summary = summarize_analysis(analyzer.analyze(sources, "What changed this quarter?"))

    assert summary["confidence"] == 73
    assert summary["confidence_label"] == "Medium Confidence"
    assert summary["diversity_label"] == "Limited Diversity"
    assert summary["source_breakdown"] == [
        {"type": "primary", "count": 4, "percentage": 80},
        {"type": "regulatory", "count": 1, "percentage": 20},
    ]


def test_metrics_report_every_category(analyzer: SourceDiversityAnalyzer) -> None:
    analysis = analyzer.analyze([_local(0, "plain words")], "query")
    assert set(analysis.metrics["category_counts"]) == set(CATEGORIES)
    assert analysis.to_dict()["source_breakdown"] == {"primary": ["src-0"]}
