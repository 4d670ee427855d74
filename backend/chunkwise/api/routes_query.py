"""Query and source analysis routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chunkwise.api.dependencies import get_diversity_analyzer, get_query_service
from chunkwise.models.dto import AnalyzeRequest, AnalyzeResponse, QueryRequest, QueryResponse
from chunkwise.retrieval.diversity import RetrievedSource, SourceDiversityAnalyzer, summarize_analysis
from chunkwise.retrieval.search import QueryService

router = APIRouter()


@router.post("/query", response_model=QueryResponse, summary="Retrieve chunks and score their diversity")
async def run_query(
    request: QueryRequest,
    service: QueryService = Depends(get_query_service),
) -> QueryResponse:
    payload = service.query(
        query_text=request.query,
        k=request.k,
        document_ids=request.document_ids,
    )
    return QueryResponse(**payload)


@router.post("/analyze", response_model=AnalyzeResponse, summary="Score the diversity of supplied sources")
async def analyze_sources(
    request: AnalyzeRequest,
    analyzer: SourceDiversityAnalyzer = Depends(get_diversity_analyzer),
) -> AnalyzeResponse:
    sources = [RetrievedSource(**source.model_dump()) for source in request.sources]
    analysis = analyzer.analyze(sources, request.query)
    return AnalyzeResponse(analysis=analysis.to_dict(), summary=summarize_analysis(analysis))


__all__ = ["router"]
