"""Document processing orchestration."""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from chunkwise.core.config import Settings
from chunkwise.core.logging import get_logger
from chunkwise.core.metrics import CHUNKS_PRODUCED, DOCUMENTS_PROCESSED, INDEX_SIZE, PROCESSING_DURATION
from chunkwise.db.repository import DocumentRepository
from chunkwise.ingest.chunker import build_chunk_payloads, chunk_document
from chunkwise.ingest.embeddings import EmbeddingModel
from chunkwise.ingest.loaders import LoaderRegistry
from chunkwise.ingest.strategy import (
    DEFAULT_STRATEGIES,
    ChunkingStrategy,
    analyze_structure,
    select_strategy,
)
from chunkwise.ingest.summary import summarize_document
from chunkwise.ingest.types import ProcessedDocument
from chunkwise.retrieval.vector_index import VectorIndex
from chunkwise.utils.text import sanitize_filename

logger = get_logger(__name__)


class FileTooLargeError(ValueError):
    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(f"File of {size_bytes} bytes exceeds the {limit_bytes} byte limit")
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


@dataclass(slots=True)
class IndexResult:
    document_id: str
    status: str
    chunk_count: int
    replaced: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "status": self.status,
            "chunk_count": self.chunk_count,
            "replaced": list(self.replaced),
        }


class DocumentProcessor:
    """Extract, analyze, chunk and index uploaded documents."""

    def __init__(
        self,
        settings: Settings,
        repository: DocumentRepository | None = None,
        embedding_model: EmbeddingModel | None = None,
        vector_index: VectorIndex | None = None,
        strategies: Mapping[str, ChunkingStrategy] = DEFAULT_STRATEGIES,
        loader_registry: LoaderRegistry | None = None,
    ) -> None:
        self.settings = settings
        self.repository = repository
        self.embedding_model = embedding_model or EmbeddingModel.get(
            settings.embedding_model, settings.embedding_dim
        )
        self.vector_index = vector_index
        self.strategies = strategies
        self.loader_registry = loader_registry or LoaderRegistry()

    def process(self, raw: bytes, filename: str, mime: str | None = None) -> ProcessedDocument:
        """Turn raw upload bytes into chunks plus structure and summary metadata.

        Extraction failures propagate to the caller; nothing can be chunked
        without text.
        """
        limit = self.settings.max_file_size_bytes
        if len(raw) > limit:
            raise FileTooLargeError(len(raw), limit)

        started = time.perf_counter()
        logger.info(
            "Processing document %s (%.2fMB)",
            filename,
            len(raw) / 1024 / 1024,
            extra={"ctx_filename": filename},
        )
        try:
            loaded = self.loader_registry.load(raw, filename, mime)
            structure = analyze_structure(loaded.text)
            strategy = select_strategy(structure, len(raw), self.strategies)
            chunks = chunk_document(loaded.text, structure, strategy)
            summary = summarize_document(loaded.text, structure)
        except Exception as exc:
            logger.exception("Error processing document %s: %s", filename, exc)
            raise

        metadata = {
            "filename": filename,
            "file_type": loaded.mime,
            "file_size": len(raw),
            "structure": structure.to_dict(),
            "chunk_count": len(chunks),
            "strategy": strategy.name,
            "summary": summary.to_dict(),
            "processed_at": datetime.now(timezone.utc).isoformat(),
        }
        PROCESSING_DURATION.observe(time.perf_counter() - started)
        DOCUMENTS_PROCESSED.labels(strategy=strategy.name).inc()
        CHUNKS_PRODUCED.inc(len(chunks))
        logger.info(
            "Processed %s: %s chunks using %s strategy",
            filename,
            len(chunks),
            strategy.name,
            extra={"ctx_filename": filename, "ctx_strategy": strategy.name},
        )
        return ProcessedDocument(
            content=loaded.text,
            chunks=chunks,
            structure=structure,
            strategy=strategy,
            summary=summary,
            metadata=metadata,
        )

    def index(self, processed: ProcessedDocument, raw: bytes) -> IndexResult:
        """Embed chunks, persist them and upsert them into the vector index.

        Documents whose sanitized filename matches are replaced in the same
        transaction as the insert; their vectors leave the index only after
        the commit.
        """
        if self.repository is None:
            raise RuntimeError("A document repository is required to index documents")

        digest = hashlib.sha256(raw).hexdigest()
        existing = self.repository.find_by_digest(digest)
        if existing:
            logger.debug("Skipping duplicate document %s", processed.metadata["filename"])
            return IndexResult(document_id=existing, status="skipped", chunk_count=0, replaced=[])

        filename = processed.metadata["filename"]
        prefix = sanitize_filename(filename)
        replaced = self.repository.find_by_vector_prefix(prefix)
        stale_vectors = self.repository.vector_ids(replaced)

        payloads = build_chunk_payloads(filename, processed.chunks)
        if not payloads:
            logger.warning("Document %s produced no chunks", filename)
        batch = self.embedding_model.encode(payload["text"] for payload in payloads)
        document_id = self.repository.save(
            processed,
            digest,
            payloads,
            batch.vectors,
            batch.model,
            vector_prefix=prefix,
            replaces=replaced,
        )

        self._remove_vectors(stale_vectors)
        if self.vector_index is not None and payloads:
            self.vector_index.upsert(
                [payload["id"] for payload in payloads],
                batch.vectors,
                [{**payload["metadata"], "document_id": document_id} for payload in payloads],
            )
        if replaced:
            logger.info(
                "Replaced %s earlier version(s) of %s",
                len(replaced),
                filename,
                extra={"ctx_filename": filename},
            )
        self._update_index_metric()
        return IndexResult(
            document_id=document_id,
            status="processed",
            chunk_count=len(payloads),
            replaced=replaced,
        )

    def ingest(self, raw: bytes, filename: str, mime: str | None = None) -> tuple[ProcessedDocument, IndexResult]:
        processed = self.process(raw, filename, mime)
        return processed, self.index(processed, raw)

    def delete(self, document_id: str) -> bool:
        if self.repository is None or self.repository.get_document(document_id) is None:
            return False
        self._remove_vectors(self.repository.delete(document_id))
        self._update_index_metric()
        return True

    def _remove_vectors(self, vector_ids: list[str]) -> None:
        if self.vector_index is not None and vector_ids:
            self.vector_index.delete(vector_ids)

    def _update_index_metric(self) -> None:
        if self.vector_index is not None:
            INDEX_SIZE.set(self.vector_index.size)
        elif self.repository is not None:
            INDEX_SIZE.set(self.repository.count_chunks())


__all__ = ["DocumentProcessor", "FileTooLargeError", "IndexResult"]
