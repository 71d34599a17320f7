"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for one batch of chunk contents.

        Args:
            texts: Ordered chunk contents.

        Returns:
            Vectors in the same order as ``texts``. Implementations must not
            pad or truncate; callers treat a length mismatch as fatal.

        Raises:
            EmbeddingProviderError: on an error response or a timeout.
        """
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...
