"""Retrieval orchestration components."""

from .vector_index import SearchResult, VectorIndex
from .search import QueryService
from .diversity import DiversityAnalysis, RetrievedSource, SourceDiversityAnalyzer, summarize_analysis

__all__ = [
    "VectorIndex",
    "SearchResult",
    "QueryService",
    "DiversityAnalysis",
    "RetrievedSource",
    "SourceDiversityAnalyzer",
    "summarize_analysis",
]
