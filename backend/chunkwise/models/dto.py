"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class ChunkModel(BaseModel):
    id: str
    content: str
    metadata: dict[str, Any]


class StrategyModel(BaseModel):
    name: str
    min_chunk_size: int
    max_chunk_size: int
    overlap: int
    preserve_structure: bool
    chapter_aware: bool


class StructureModel(BaseModel):
    type: Literal["book", "report", "document"]
    has_chapters: bool
    has_sections: bool
    has_headers: bool
    estimated_pages: int
    complexity: Literal["low", "medium", "high"]


class UploadResponse(BaseModel):
    document_id: str
    status: Literal["processed", "skipped"]
    filename: str
    chunk_count: int
    strategy: StrategyModel
    structure: StructureModel
    summary: dict[str, Any]
    replaced: list[str] = Field(default_factory=list)
    chunks: list[ChunkModel] | None = None


class DocumentResponse(BaseModel):
    id: str
    filename: str
    mime: str
    size_bytes: int
    strategy: str
    chunk_count: int
    summary: dict[str, Any]
    created_at: datetime


class DeleteResponse(BaseModel):
    status: Literal["ok"]
    deleted: int


class QueryRequest(BaseModel):
    query: str = Field(min_length=1)
    k: int | None = Field(default=None, ge=1, le=50)
    document_ids: list[str] | None = None


class SourceModel(BaseModel):
    """Retrieved source as supplied by clients or returned from a query."""

    id: str
    content: str = ""
    score: float | None = None
    filename: str | None = None
    name: str | None = None
    type: str | None = None
    url: str | None = None
    summary: str | None = None
    timestamp: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnalysisModel(BaseModel):
    confidence: float = Field(ge=0.1, le=0.85)
    diversity: float = Field(ge=0.0, le=1.0)
    source_breakdown: dict[str, list[str]]
    recommendations: list[str]
    warnings: list[str]
    metrics: dict[str, Any]


class QueryResponse(BaseModel):
    query_id: str
    results: list[SourceModel]
    analysis: AnalysisModel
    summary: dict[str, Any]


class AnalyzeRequest(BaseModel):
    query: str = ""
    sources: list[SourceModel] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    analysis: AnalysisModel
    summary: dict[str, Any]


__all__ = [
    "ChunkModel",
    "StrategyModel",
    "StructureModel",
    "UploadResponse",
    "DocumentResponse",
    "DeleteResponse",
    "QueryRequest",
    "SourceModel",
    "QueryResponse",
    "AnalysisModel",
    "AnalyzeRequest",
    "AnalyzeResponse",
]
