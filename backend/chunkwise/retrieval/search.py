"""Search orchestration."""

from __future__ import annotations

import time
from typing import Any, Mapping, Sequence

from chunkwise.core.config import Settings
from chunkwise.core.logging import get_logger
from chunkwise.core.metrics import QUERY_CONFIDENCE, QUERY_LATENCY
from chunkwise.db.repository import ChunkRecord, DocumentRepository
from chunkwise.ingest.embeddings import EmbeddingModel
from chunkwise.retrieval.diversity import RetrievedSource, SourceDiversityAnalyzer, summarize_analysis
from chunkwise.retrieval.vector_index import SearchResult, VectorIndex
from chunkwise.utils.ids import new_id

logger = get_logger(__name__)

# Uploaded documents are local files as far as source categorization goes.
UPLOAD_SOURCE_TYPE = "local"


class QueryService:
    """Vector retrieval followed by source diversity scoring."""

    def __init__(
        self,
        repository: DocumentRepository,
        settings: Settings,
        vector_index: VectorIndex,
        embedding_model: EmbeddingModel,
        analyzer: SourceDiversityAnalyzer | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.vector_index = vector_index
        self.embedding_model = embedding_model
        self.analyzer = analyzer or SourceDiversityAnalyzer()

    def query(
        self,
        query_text: str,
        k: int | None = None,
        document_ids: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        start_time = time.perf_counter()
        top_k = k or self.settings.top_k
        vector = self.embedding_model.encode_one(query_text)
        allowed = set(document_ids or ())

        def in_scope(metadata: Mapping[str, Any]) -> bool:
            return metadata.get("document_id") in allowed

        hits = self.vector_index.search(vector, top_k=top_k, where=in_scope if allowed else None)

        sources = self._hydrate_sources(hits)
        analysis = self.analyzer.analyze(sources, query_text)

        duration = time.perf_counter() - start_time
        QUERY_LATENCY.observe(duration)
        QUERY_CONFIDENCE.observe(analysis.confidence)
        logger.info(
            "Query returned %s sources with confidence %.2f",
            len(sources),
            analysis.confidence,
            extra={"ctx_duration": round(duration, 4)},
        )
        return {
            "query_id": new_id("qry"),
            "results": [source.to_dict() for source in sources],
            "analysis": analysis.to_dict(),
            "summary": summarize_analysis(analysis),
        }

    def _hydrate_sources(self, hits: Sequence[SearchResult]) -> list[RetrievedSource]:
        records = self.repository.get_chunks([hit.id for hit in hits])
        sources: list[RetrievedSource] = []
        for hit in hits:
            record = records.get(hit.id)
            if record is None:
                logger.warning("Vector %s has no stored chunk", hit.id)
                continue
            sources.append(_to_source(hit, record))
        return sources


def _to_source(hit: SearchResult, record: ChunkRecord) -> RetrievedSource:
    metadata = {**record.metadata, **hit.metadata}
    return RetrievedSource(
        id=hit.id,
        content=record.text,
        score=hit.score,
        filename=metadata.get("filename"),
        type=UPLOAD_SOURCE_TYPE,
        timestamp=record.created_at,
        metadata=metadata,
    )


__all__ = ["QueryService"]
