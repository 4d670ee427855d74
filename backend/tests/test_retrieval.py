"""Tests for retrieval utilities."""

import pytest

from chunkwise.core.config import Settings
from chunkwise.db.repository import DocumentRepository
from chunkwise.db.sqlite import SQLiteDatabase
from chunkwise.ingest.pipeline import DocumentProcessor
from chunkwise.retrieval.vector_index import VectorIndex


def test_vector_index_basic() -> None:
    index = VectorIndex(dim=3)
    index.upsert(["a", "b"], [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]], [{"doc": 1}, {"doc": 2}])
    results = index.search([1.0, 0.0, 0.0], top_k=1)
    assert results
    assert results[0].id == "a"
    assert results[0].metadata == {"doc": 1}


def test_upsert_replaces_existing_ids() -> None:
    index = VectorIndex(dim=2)
    index.upsert(["a"], [[1.0, 0.0]], [{"version": 1}])
    index.upsert(["a"], [[0.0, 1.0]], [{"version": 2}])
    assert index.size == 1
    result = index.search([0.0, 1.0], top_k=5)[0]
    assert result.score == pytest.approx(1.0)
    assert result.metadata == {"version": 2}


def test_delete_and_dimension_checks() -> None:
    index = VectorIndex(dim=2)
    index.upsert(["a", "b", "c"], [[1.0, 0.0], [0.0, 1.0], [0.6, 0.8]])
    assert index.delete(["b", "missing"]) == 1
    assert [result.id for result in index.search([0.0, 1.0], top_k=5)] == ["c", "a"]
    with pytest.raises(ValueError):
        index.upsert(["d"], [[1.0, 0.0, 0.0]])
    with pytest.raises(ValueError):
        index.search([1.0], top_k=1)


def test_search_filter_applies_before_top_k() -> None:
    index = VectorIndex(dim=2)
    index.upsert(
        ["a-0", "a-1", "a-2", "b-0"],
        [[1.0, 0.0], [0.99, 0.14], [0.98, 0.2], [0.0, 1.0]],
        [{"document_id": "a"}, {"document_id": "a"}, {"document_id": "a"}, {"document_id": "b"}],
    )
    results = index.search([1.0, 0.0], top_k=1, where=lambda metadata: metadata["document_id"] == "b")
    assert [result.id for result in results] == ["b-0"]
    assert index.search([1.0, 0.0], top_k=5, where=lambda metadata: False) == []


def test_rebuild_from_repository(tmp_path) -> None:
    db = SQLiteDatabase(tmp_path / "index.db")
    db.ensure_schema()
    repository = DocumentRepository(db)
    settings = Settings(db_path=tmp_path / "index.db")
    processor = DocumentProcessor(settings=settings, repository=repository)
    raw = b"Rivers carry water from the mountains to the sea. The sea holds many creatures of every size."
    _, result = processor.ingest(raw, "rivers.txt", "text/plain")

    index = VectorIndex(dim=settings.embedding_dim)
    index.rebuild(repository, processor.embedding_model.model_name)
    assert index.size == result.chunk_count == 1
    hit = index.search(processor.embedding_model.encode_one("rivers"), top_k=1)[0]
    assert hit.id == "rivers_txt-chunk-0"
    assert hit.metadata["document_id"] == result.document_id
    db.close()
