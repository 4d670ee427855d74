"""Vector index abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Sequence

if TYPE_CHECKING:
    from chunkwise.db.repository import DocumentRepository


@dataclass(slots=True)
class SearchResult:
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorIndex:
    """In-memory vector store of ``(id, vector, metadata)`` triples.

    Vectors are expected to be normalised, so the dot product is the cosine
    similarity. Upserting an existing id replaces its vector and metadata.
    """

    def __init__(self, dim: int) -> None:
        self.dim = dim
        self._positions: dict[str, int] = {}
        self._ids: list[str] = []
        self._vectors: list[list[float]] = []
        self._metadata: list[dict[str, Any]] = []

    @property
    def size(self) -> int:
        return len(self._vectors)

    def upsert(
        self,
        ids: Sequence[str],
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[Mapping[str, Any]] | None = None,
    ) -> None:
        if not ids:
            return
        if len(ids) != len(vectors):
            raise ValueError("ids and vectors must have the same length")
        if metadata is not None and len(metadata) != len(ids):
            raise ValueError("metadata must align with ids")
        for vector in vectors:
            if len(vector) != self.dim:
                raise ValueError("Vector dimension mismatch")
        for idx, identifier in enumerate(ids):
            meta = dict(metadata[idx]) if metadata is not None else {}
            position = self._positions.get(identifier)
            if position is None:
                self._positions[identifier] = len(self._ids)
                self._ids.append(identifier)
                self._vectors.append(list(vectors[idx]))
                self._metadata.append(meta)
            else:
                self._vectors[position] = list(vectors[idx])
                self._metadata[position] = meta

    def delete(self, ids: Iterable[str]) -> int:
        doomed = {identifier for identifier in ids if identifier in self._positions}
        if not doomed:
            return 0
        keep = [idx for idx, identifier in enumerate(self._ids) if identifier not in doomed]
        self._ids = [self._ids[idx] for idx in keep]
        self._vectors = [self._vectors[idx] for idx in keep]
        self._metadata = [self._metadata[idx] for idx in keep]
        self._positions = {identifier: idx for idx, identifier in enumerate(self._ids)}
        return len(doomed)

    def search(
        self,
        vector: Sequence[float],
        top_k: int = 5,
        where: Callable[[Mapping[str, Any]], bool] | None = None,
    ) -> list[SearchResult]:
        """Top ``top_k`` entries by cosine score, restricted to metadata accepted by ``where``."""
        if not self._vectors:
            return []
        if len(vector) != self.dim:
            raise ValueError("Query vector dimension mismatch")
        scores = [
            (idx, _dot(self._vectors[idx], vector))
            for idx in range(len(self._vectors))
            if where is None or where(self._metadata[idx])
        ]
        scores.sort(key=lambda item: item[1], reverse=True)
        return [
            SearchResult(id=self._ids[idx], score=score, metadata=dict(self._metadata[idx]))
            for idx, score in scores[:top_k]
        ]

    def rebuild(self, repository: "DocumentRepository", model: str) -> None:
        self._positions = {}
        self._ids = []
        self._vectors = []
        self._metadata = []
        ids: list[str] = []
        vectors: list[list[float]] = []
        metadata: list[dict[str, Any]] = []
        for record in repository.iter_embeddings(model):
            ids.append(record.vector_id)
            vectors.append(record.vector)
            metadata.append(record.metadata)
        if vectors:
            self.dim = len(vectors[0])
        self.upsert(ids, vectors, metadata)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


__all__ = ["VectorIndex", "SearchResult"]
