"""Document upload and management routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from chunkwise.api.dependencies import get_document_processor, get_repository
from chunkwise.db.repository import DocumentRepository
from chunkwise.ingest.loaders import NoTextExtractedError, UnsupportedFileTypeError
from chunkwise.ingest.pipeline import DocumentProcessor, FileTooLargeError
from chunkwise.models.dto import ChunkModel, DeleteResponse, DocumentResponse, UploadResponse

router = APIRouter()


@router.post("", response_model=UploadResponse, summary="Upload, chunk and index a document")
async def upload_document(
    file: UploadFile = File(...),
    include_chunks: bool = Query(False, description="Return the produced chunks"),
    processor: DocumentProcessor = Depends(get_document_processor),
) -> UploadResponse:
    raw = await file.read()
    filename = file.filename or "upload"
    try:
        processed, result = await run_in_threadpool(processor.ingest, raw, filename, file.content_type)
    except FileTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except UnsupportedFileTypeError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except NoTextExtractedError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return UploadResponse(
        document_id=result.document_id,
        status=result.status,
        filename=filename,
        chunk_count=len(processed.chunks),
        strategy=processed.strategy.to_dict(),
        structure=processed.structure.to_dict(),
        summary=processed.summary.to_dict(),
        replaced=result.replaced,
        chunks=[ChunkModel(**chunk.to_dict()) for chunk in processed.chunks] if include_chunks else None,
    )


@router.get("", response_model=list[DocumentResponse], summary="List indexed documents")
async def list_documents(repository: DocumentRepository = Depends(get_repository)) -> list[DocumentResponse]:
    return [
        DocumentResponse(
            id=record.id,
            filename=record.filename,
            mime=record.mime,
            size_bytes=record.size_bytes,
            strategy=record.strategy,
            chunk_count=record.chunk_count,
            summary=record.summary,
            created_at=record.created_at,
        )
        for record in repository.list_documents()
    ]


@router.delete("/{document_id}", response_model=DeleteResponse, summary="Remove a document and its vectors")
async def delete_document(
    document_id: str,
    processor: DocumentProcessor = Depends(get_document_processor),
) -> DeleteResponse:
    if not processor.delete(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return DeleteResponse(status="ok", deleted=1)


__all__ = ["router"]
