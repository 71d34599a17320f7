"""Domain-specific exceptions — framework-independent.

Every ingestion error names the ``phase`` in which it happened so callers
can tell what failed and how much partial progress was made.
"""


class IngestionError(Exception):
    """Base class for errors raised while ingesting a document."""

    phase = "ingestion"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputValidationError(IngestionError):
    """Raised when the request is rejected before any chunking work begins."""

    phase = "validation"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class EmptyChunkResultError(IngestionError):
    """Raised when every chunking path, fallbacks included, produced nothing."""

    phase = "chunking"

    def __init__(self, document_category: str):
        self.document_category = document_category
        super().__init__(f"No valid chunks created from {document_category} document")


class ExtractionError(IngestionError):
    """Raised when atomic or narrative extraction fails on a document.

    Only the chunk assembler catches this — it falls back to structural chunking.
    """

    phase = "extraction"

    def __init__(self, extractor: str, cause: Exception):
        self.extractor = extractor
        self.cause = cause
        super().__init__(f"{extractor} failed: {type(cause).__name__}: {cause}")


class EmbeddingProviderError(Exception):
    """Raised when the embedding service returns an error or times out.

    Provider-agnostic — ``retryable`` tells the caller whether resubmitting
    the same document later is worthwhile.
    """

    def __init__(self, provider: str, status_code: int | None, message: str, *, retryable: bool = False):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        self.retryable = retryable
        super().__init__(f"[{provider}] {status_code if status_code is not None else 'timeout'}: {message}")


class EmbeddingBatchError(IngestionError):
    """Fatal failure of one embedding batch; nothing is persisted afterwards."""

    phase = "embedding"

    def __init__(self, batch_index: int, completed_batches: int, message: str, *, retryable: bool = False):
        self.batch_index = batch_index
        self.completed_batches = completed_batches
        self.retryable = retryable
        super().__init__(f"Embedding batch {batch_index} failed: {message}")


class PersistenceBatchError(IngestionError):
    """Failure while writing one storage batch; earlier batches remain stored."""

    phase = "persistence"

    def __init__(self, batch_index: int, stored_count: int, message: str):
        self.batch_index = batch_index
        self.stored_count = stored_count
        super().__init__(f"Persistence batch {batch_index} failed after {stored_count} stored: {message}")


class IngestionCancelledError(IngestionError):
    """The caller aborted the run between batches."""

    def __init__(self, phase: str, stored_count: int, completed_batches: int):
        self.phase = phase
        self.stored_count = stored_count
        self.completed_batches = completed_batches
        super().__init__(
            f"Ingestion cancelled during {phase} after {completed_batches} batches "
            f"({stored_count} chunks stored)"
        )
