"""Chunking utilities."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Sequence

from chunkwise.ingest.splitter import Sentences, is_chapter_heading, is_section_heading
from chunkwise.ingest.strategy import ChunkingStrategy, DocumentStructure
from chunkwise.ingest.types import Chunk, Partition
from chunkwise.utils.ids import vector_id

_TERMINAL_RE = re.compile(r"[.!?]+")
_SENTENCE_JOIN = ". "
DEFAULT_PARTITION_TITLE = "Introduction"


def build_semantic_chunks(text: str, strategy: ChunkingStrategy) -> list[Chunk]:
    """Greedily pack sentences into overlapping chunks.

    A chunk is closed only once it holds at least ``min_chunk_size`` characters
    and the next sentence would push it past ``max_chunk_size``. Sentences are
    never split, so one oversized sentence yields one oversized chunk.
    """
    chunks: list[Chunk] = []
    current: list[str] = []
    buffer = ""

    for sentence in Sentences(text):
        piece = sentence + _SENTENCE_JOIN
        candidate = (buffer + piece).rstrip()
        if len(candidate) > strategy.max_chunk_size and len(buffer.rstrip()) >= strategy.min_chunk_size:
            chunks.append(_finalize_chunk(buffer, len(chunks)))
            current = _apply_overlap(current, strategy.overlap)
            buffer = _render(current)
        current.append(sentence)
        buffer += piece

    if buffer.strip():
        chunks.append(_finalize_chunk(buffer, len(chunks)))

    return chunks


def split_into_chapters(text: str) -> list[Partition]:
    return _split_partitions(text, is_chapter_heading)


def split_into_sections(text: str) -> list[Partition]:
    return _split_partitions(text, is_section_heading)


def chunk_partitions(
    partitions: Sequence[Partition],
    strategy: ChunkingStrategy,
    label: str,
) -> list[Chunk]:
    """Chunk each partition independently and tag chunks with their origin.

    ``label`` names the metadata keys, e.g. ``chapter`` and ``chapter_index``.
    Chunk ids are renumbered so they stay unique across the whole document.
    """
    tagged: list[Chunk] = []
    for partition_index, partition in enumerate(partitions):
        for chunk_index, chunk in enumerate(build_semantic_chunks(partition.content, strategy)):
            metadata = dict(chunk.metadata)
            metadata.update(
                {
                    label: partition.title,
                    f"{label}_index": partition_index,
                    "chunk_index": chunk_index,
                }
            )
            tagged.append(Chunk(id=_chunk_id(len(tagged)), content=chunk.content, metadata=metadata))
    return tagged


def chunk_document(text: str, structure: DocumentStructure, strategy: ChunkingStrategy) -> list[Chunk]:
    """Chunk a whole document, partitioning by chapter or section when detected."""
    if strategy.chapter_aware and structure.has_chapters:
        return chunk_partitions(split_into_chapters(text), strategy, "chapter")
    if structure.has_sections:
        return chunk_partitions(split_into_sections(text), strategy, "section")
    return build_semantic_chunks(text, strategy)


def build_chunk_payloads(filename: str, chunks: Iterable[Chunk]) -> list[dict[str, Any]]:
    """Attach document metadata to chunks, keyed by their vector store id."""
    payloads = []
    for ordinal, chunk in enumerate(chunks):
        metadata = dict(chunk.metadata)
        metadata.update({"filename": filename, "chunk_id": chunk.id})
        payloads.append(
            {
                "id": vector_id(filename, chunk.id),
                "chunk_id": chunk.id,
                "ordinal": ordinal,
                "text": chunk.content,
                "metadata": metadata,
            }
        )
    return payloads


def _split_partitions(text: str, is_heading: Callable[[str], bool]) -> list[Partition]:
    partitions: list[Partition] = []
    current = Partition(title=DEFAULT_PARTITION_TITLE)
    for line in text.split("\n"):
        if is_heading(line):
            if current.content.strip():
                partitions.append(current)
            current = Partition(title=line.strip())
        else:
            current.content += line + "\n"
    if current.content.strip():
        partitions.append(current)
    return partitions


def _apply_overlap(sentences: Sequence[str], overlap: int) -> list[str]:
    """Return the trailing sentences whose rendered length fits ``overlap``."""
    if not sentences or overlap <= 0:
        return []
    retained: list[str] = []
    budget = 0
    for sentence in reversed(sentences):
        rendered = len(sentence) + len(_SENTENCE_JOIN)
        if budget + rendered > overlap:
            break
        retained.append(sentence)
        budget += rendered
    return list(reversed(retained))


def _render(sentences: Sequence[str]) -> str:
    if not sentences:
        return ""
    return _SENTENCE_JOIN.join(sentences) + _SENTENCE_JOIN


def _finalize_chunk(buffer: str, index: int) -> Chunk:
    content = buffer.strip()
    return Chunk(
        id=_chunk_id(index),
        content=content,
        metadata={
            "chunk_index": index,
            "chunk_type": "semantic",
            "word_count": len(content.split()),
            "sentence_count": len(_TERMINAL_RE.findall(content)),
        },
    )


def _chunk_id(index: int) -> str:
    return f"chunk-{index}"


__all__ = [
    "DEFAULT_PARTITION_TITLE",
    "build_semantic_chunks",
    "split_into_chapters",
    "split_into_sections",
    "chunk_partitions",
    "chunk_document",
    "build_chunk_payloads",
]
