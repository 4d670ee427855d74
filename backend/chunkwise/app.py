"""FastAPI application setup for Chunkwise."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chunkwise.api.dependencies import (
    get_app_settings,
    get_database,
    get_document_processor,
    get_query_service,
    get_vector_index,
    reset_state,
)
from chunkwise.api.routes_admin import router as admin_router
from chunkwise.api.routes_documents import router as documents_router
from chunkwise.api.routes_query import router as query_router
from chunkwise.core.logging import configure_logging

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Warm up core singletons and rebuild the vector index on startup."""
    get_app_settings()
    get_database()
    get_vector_index()
    get_document_processor()
    get_query_service()
    yield
    reset_state()


app = FastAPI(
    title="Chunkwise",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router, prefix="/documents", tags=["documents"])
app.include_router(query_router, prefix="", tags=["query"])
app.include_router(admin_router, prefix="", tags=["admin"])
