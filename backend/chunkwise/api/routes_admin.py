"""Administrative routes for Chunkwise."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chunkwise.api.dependencies import get_app_settings, get_vector_index
from chunkwise.core.config import Settings
from chunkwise.core.metrics import metrics_response
from chunkwise.ingest.strategy import DEFAULT_STRATEGIES
from chunkwise.retrieval.vector_index import VectorIndex

router = APIRouter()


@router.get("/health", summary="Liveness check")
async def health(index: VectorIndex = Depends(get_vector_index)) -> dict[str, object]:
    return {"ok": True, "index_size": index.size}


@router.get("/strategies", summary="Chunking strategies and upload limits")
async def list_strategies(settings: Settings = Depends(get_app_settings)) -> dict[str, object]:
    return {
        "strategies": [strategy.to_dict() for strategy in DEFAULT_STRATEGIES.values()],
        "max_file_size_mb": settings.max_file_size_mb,
    }


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
