"""ID helpers."""

from __future__ import annotations

import uuid

from chunkwise.utils.text import sanitize_filename


def new_id(prefix: str | None = None) -> str:
    """Generate a random UUID4 string with optional prefix."""
    base = uuid.uuid4().hex
    return f"{prefix}_{base}" if prefix else base


def vector_id(filename: str, chunk_id: str) -> str:
    """Build the vector store identifier for a chunk of ``filename``."""
    return f"{sanitize_filename(filename)}-{chunk_id}"
