"""Persistence of processed documents, their chunks and embeddings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Sequence

import orjson

from chunkwise.db.sqlite import SQLiteDatabase
from chunkwise.ingest.embeddings import EmbeddingModel
from chunkwise.ingest.types import ProcessedDocument
from chunkwise.utils.ids import new_id
from chunkwise.utils.time import ms_to_datetime, now_ms


@dataclass(slots=True)
class DocumentRecord:
    id: str
    filename: str
    mime: str
    size_bytes: int
    strategy: str
    chunk_count: int
    structure: dict[str, Any]
    summary: dict[str, Any]
    created_at: datetime


@dataclass(slots=True)
class ChunkRecord:
    vector_id: str
    document_id: str
    chunk_id: str
    ordinal: int
    text: str
    metadata: dict[str, Any]
    created_at: datetime


@dataclass(slots=True)
class EmbeddingRecord:
    vector_id: str
    vector: list[float]
    metadata: dict[str, Any]


class DocumentRepository:
    """Document store backed by SQLite."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def find_by_digest(self, digest: str) -> str | None:
        row = self.db.execute("SELECT id FROM documents WHERE sha256 = ?", [digest]).fetchone()
        return row["id"] if row else None

    def find_by_vector_prefix(self, prefix: str) -> list[str]:
        """Documents whose chunks share vector ids with uploads sanitized to ``prefix``."""
        rows = self.db.query("SELECT id FROM documents WHERE vector_prefix = ?", [prefix])
        return [row["id"] for row in rows]

    def vector_ids(self, document_ids: Sequence[str]) -> list[str]:
        if not document_ids:
            return []
        placeholders = ",".join("?" for _ in document_ids)
        rows = self.db.query(
            f"SELECT id FROM chunks WHERE document_id IN ({placeholders}) ORDER BY document_id, ordinal",
            list(document_ids),
        )
        return [row["id"] for row in rows]

    def save(
        self,
        processed: ProcessedDocument,
        digest: str,
        payloads: Sequence[dict[str, Any]],
        vectors: Sequence[Sequence[float]],
        model: str,
        vector_prefix: str,
        replaces: Sequence[str] = (),
    ) -> str:
        """Persist a processed document; ``payloads`` and ``vectors`` align by position.

        Documents listed in ``replaces`` are deleted in the same transaction, so
        a failed insert leaves them in place.
        """
        document_id = new_id("doc")
        now = now_ms()
        meta = processed.metadata
        with self.db.transaction() as conn:
            conn.executemany("DELETE FROM documents WHERE id = ?", [(old,) for old in replaces])
            conn.execute(
                """
                INSERT INTO documents (
                  id, filename, mime, sha256, vector_prefix, size_bytes, strategy,
                  structure_json, summary_json, chunk_count, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    document_id,
                    meta["filename"],
                    meta["file_type"],
                    digest,
                    vector_prefix,
                    meta["file_size"],
                    processed.strategy.name,
                    _dumps(processed.structure.to_dict()),
                    _dumps(processed.summary.to_dict()),
                    len(processed.chunks),
                    now,
                ],
            )
            conn.executemany(
                """
                INSERT INTO chunks (id, document_id, chunk_id, ordinal, text, meta_json, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        payload["id"],
                        document_id,
                        payload["chunk_id"],
                        payload["ordinal"],
                        payload["text"],
                        _dumps({**payload["metadata"], "document_id": document_id}),
                        now,
                    )
                    for payload in payloads
                ],
            )
            conn.executemany(
                "INSERT INTO embeddings (chunk_id, model, dim, vector, created_at) VALUES (?, ?, ?, ?, ?)",
                [
                    (payload["id"], model, len(vectors[idx]), EmbeddingModel.as_bytes(vectors[idx]), now)
                    for idx, payload in enumerate(payloads)
                ],
            )
        return document_id

    def list_documents(self) -> list[DocumentRecord]:
        rows = self.db.query(
            """
            SELECT id, filename, mime, size_bytes, strategy, chunk_count,
                   structure_json, summary_json, created_at
            FROM documents ORDER BY created_at DESC
            """,
        )
        return [_row_to_document(row) for row in rows]

    def get_document(self, document_id: str) -> DocumentRecord | None:
        row = self.db.execute(
            """
            SELECT id, filename, mime, size_bytes, strategy, chunk_count,
                   structure_json, summary_json, created_at
            FROM documents WHERE id = ?
            """,
            [document_id],
        ).fetchone()
        return _row_to_document(row) if row else None

    def get_chunks(self, vector_ids: Sequence[str]) -> dict[str, ChunkRecord]:
        if not vector_ids:
            return {}
        placeholders = ",".join("?" for _ in vector_ids)
        rows = self.db.query(
            f"""
            SELECT id, document_id, chunk_id, ordinal, text, meta_json, created_at
            FROM chunks WHERE id IN ({placeholders})
            """,
            list(vector_ids),
        )
        return {
            row["id"]: ChunkRecord(
                vector_id=row["id"],
                document_id=row["document_id"],
                chunk_id=row["chunk_id"],
                ordinal=row["ordinal"],
                text=row["text"],
                metadata=orjson.loads(row["meta_json"]),
                created_at=ms_to_datetime(row["created_at"]),
            )
            for row in rows
        }

    def delete(self, document_id: str) -> list[str]:
        """Delete a document and return the vector ids that belonged to it."""
        doomed = self.vector_ids([document_id])
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM documents WHERE id = ?", [document_id])
        return doomed

    def iter_embeddings(self, model: str) -> Iterator[EmbeddingRecord]:
        rows = self.db.query(
            """
            SELECT embeddings.chunk_id, embeddings.vector, chunks.meta_json
            FROM embeddings JOIN chunks ON chunks.id = embeddings.chunk_id
            WHERE embeddings.model = ?
            ORDER BY chunks.document_id, chunks.ordinal
            """,
            [model],
        )
        for row in rows:
            yield EmbeddingRecord(
                vector_id=row["chunk_id"],
                vector=EmbeddingModel.from_bytes(row["vector"]),
                metadata=orjson.loads(row["meta_json"]),
            )

    def count_chunks(self) -> int:
        row = self.db.execute("SELECT COUNT(*) AS count FROM chunks").fetchone()
        return int(row["count"]) if row else 0


def _dumps(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


def _row_to_document(row: Any) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        filename=row["filename"],
        mime=row["mime"],
        size_bytes=row["size_bytes"],
        strategy=row["strategy"],
        chunk_count=row["chunk_count"],
        structure=orjson.loads(row["structure_json"]),
        summary=orjson.loads(row["summary_json"]),
        created_at=ms_to_datetime(row["created_at"]),
    )


__all__ = ["DocumentRepository", "DocumentRecord", "ChunkRecord", "EmbeddingRecord"]
