"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from chunkwise.ingest.strategy import ChunkingStrategy, DocumentStructure
    from chunkwise.ingest.summary import DocumentSummary


@dataclass(slots=True)
class LoadedDocument:
    """Plain text extracted from an uploaded file."""

    filename: str
    mime: str
    text: str
    size_bytes: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Chunk:
    """Unit of retrievable text produced by the chunker."""

    id: str
    content: str
    metadata: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "content": self.content, "metadata": dict(self.metadata)}


@dataclass(slots=True)
class Partition:
    """Chapter or section of a document prior to chunking."""

    title: str
    content: str = ""


@dataclass(slots=True)
class ProcessedDocument:
    """Outcome of running a document through extraction and chunking."""

    content: str
    chunks: Sequence[Chunk]
    structure: "DocumentStructure"
    strategy: "ChunkingStrategy"
    summary: "DocumentSummary"
    metadata: dict[str, Any]


__all__ = [
    "LoadedDocument",
    "Chunk",
    "Partition",
    "ProcessedDocument",
]
