"""Test fixtures for Chunkwise."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("CHKW_DB_PATH", str(tmp_path / "chunkwise.db"))
    monkeypatch.delenv("CHKW_CONFIG", raising=False)

    from chunkwise.api import dependencies as deps
    from chunkwise.ingest.embeddings import EmbeddingModel

    EmbeddingModel._instances.clear()
    deps.reset_state()
    yield
    EmbeddingModel._instances.clear()
    deps.reset_state()


@pytest.fixture(scope="session")
def numbered_sentences() -> list[str]:
    """One hundred distinct sentences of exactly 30 characters."""
    return [f"Sentence number {idx:03d} is here ok" for idx in range(100)]


@pytest.fixture(scope="session")
def chaptered_text() -> str:
    return "\n".join(
        [
            "Preface text that sets the stage for everything below.",
            "Chapter 1",
            "The first chapter talks about rivers and mountains at length.",
            "Chapter 2",
            "The second chapter discusses oceans and deserts in detail.",
        ]
    )
