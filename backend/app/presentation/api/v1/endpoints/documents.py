"""Document chunking and ingestion endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.schemas import (
    ChunkDocumentRequest,
    ChunkDocumentResponse,
    IngestDocumentRequest,
    IngestDocumentResponse,
)
from app.application.services import DocumentIngestionService
from app.domain.entities.ingestion import IngestionRequest
from app.domain.exceptions import (
    EmbeddingBatchError,
    EmptyChunkResultError,
    IngestionCancelledError,
    IngestionError,
    InputValidationError,
    PersistenceBatchError,
)
from app.infrastructure.dependencies import get_chunk_preview_service, get_document_ingestion_service

router = APIRouter(prefix="/documents", tags=["Documents"])

_STATUS_BY_ERROR: tuple[tuple[type[IngestionError], int], ...] = (
    (InputValidationError, status.HTTP_400_BAD_REQUEST),
    (EmptyChunkResultError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (IngestionCancelledError, status.HTTP_409_CONFLICT),
    (EmbeddingBatchError, status.HTTP_502_BAD_GATEWAY),
    (PersistenceBatchError, status.HTTP_502_BAD_GATEWAY),
)
_PROGRESS_FIELDS = ("batch_index", "completed_batches", "stored_count", "retryable")


def _http_error(exc: IngestionError) -> HTTPException:
    """Map an ingestion error to an HTTP error carrying phase and partial progress."""
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    detail: dict = {"phase": exc.phase, "message": exc.message}
    for field in _PROGRESS_FIELDS:
        if hasattr(exc, field):
            detail[field] = getattr(exc, field)
    return HTTPException(status_code=status_code, detail=detail)


@router.post("/chunks", response_model=ChunkDocumentResponse)
async def chunk_document(
    data: ChunkDocumentRequest,
    service: DocumentIngestionService = Depends(get_chunk_preview_service),
) -> ChunkDocumentResponse:
    """Chunk a document and return the chunks without embedding or storing them."""
    request = IngestionRequest(
        raw_text=data.raw_text,
        document_category=data.document_category.value,
        community_name=data.community_name,
    )
    try:
        outcome = service.chunk(request)
    except IngestionError as e:
        raise _http_error(e)
    return ChunkDocumentResponse.from_outcome(outcome)


@router.post("/ingest", response_model=IngestDocumentResponse, status_code=status.HTTP_201_CREATED)
async def ingest_document(
    data: IngestDocumentRequest,
    service: DocumentIngestionService = Depends(get_document_ingestion_service),
) -> IngestDocumentResponse:
    """Chunk, embed and store a document."""
    request = IngestionRequest(
        raw_text=data.raw_text,
        document_category=data.document_category.value,
        community_name=data.community_name,
        client_id=data.client_id,
        source_id=data.source_id,
    )
    try:
        result = await service.ingest(request)
    except IngestionError as e:
        raise _http_error(e)
    return IngestDocumentResponse.from_result(result)
