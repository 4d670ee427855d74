"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from chunkwise.core.config import Settings, get_settings
from chunkwise.db.repository import DocumentRepository
from chunkwise.db.sqlite import SQLiteDatabase
from chunkwise.ingest.embeddings import EmbeddingModel
from chunkwise.ingest.pipeline import DocumentProcessor
from chunkwise.retrieval import QueryService, SourceDiversityAnalyzer, VectorIndex

_DB: SQLiteDatabase | None = None
_VECTOR_INDEX: VectorIndex | None = None
_PROCESSOR: DocumentProcessor | None = None
_QUERY_SERVICE: QueryService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        db = SQLiteDatabase(get_app_settings().db_path)
        db.ensure_schema()
        _DB = db
    return _DB


def get_repository() -> DocumentRepository:
    return DocumentRepository(get_database())


def get_embedding_model() -> EmbeddingModel:
    settings = get_app_settings()
    return EmbeddingModel.get(settings.embedding_model, settings.embedding_dim)


def get_vector_index() -> VectorIndex:
    global _VECTOR_INDEX
    if _VECTOR_INDEX is None:
        embedding_model = get_embedding_model()
        index = VectorIndex(dim=embedding_model.dim)
        index.rebuild(get_repository(), embedding_model.model_name)
        _VECTOR_INDEX = index
    return _VECTOR_INDEX


def get_document_processor() -> DocumentProcessor:
    global _PROCESSOR
    if _PROCESSOR is None:
        _PROCESSOR = DocumentProcessor(
            settings=get_app_settings(),
            repository=get_repository(),
            embedding_model=get_embedding_model(),
            vector_index=get_vector_index(),
        )
    return _PROCESSOR


def get_diversity_analyzer() -> SourceDiversityAnalyzer:
    return SourceDiversityAnalyzer()


def get_query_service() -> QueryService:
    global _QUERY_SERVICE
    if _QUERY_SERVICE is None:
        _QUERY_SERVICE = QueryService(
            repository=get_repository(),
            settings=get_app_settings(),
            vector_index=get_vector_index(),
            embedding_model=get_embedding_model(),
            analyzer=get_diversity_analyzer(),
        )
    return _QUERY_SERVICE


def reset_state() -> None:
    """Drop cached singletons; used by tests and on shutdown."""
    global _DB, _VECTOR_INDEX, _PROCESSOR, _QUERY_SERVICE
    if _DB is not None:
        _DB.close()
    _DB = None
    _VECTOR_INDEX = None
    _PROCESSOR = None
    _QUERY_SERVICE = None
    get_app_settings.cache_clear()
    get_settings.cache_clear()


__all__ = [
    "get_app_settings",
    "get_database",
    "get_repository",
    "get_embedding_model",
    "get_vector_index",
    "get_document_processor",
    "get_diversity_analyzer",
    "get_query_service",
    "reset_state",
]
