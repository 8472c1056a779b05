"""Embedding backend interface.

Defines the narrow capability the provider depends on, independent of the
model-loading library behind it (sentence-transformers, a remote model
server, a test double, ...).

Methods are synchronous; the provider runs them in worker threads.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Sequence

from vectorizer.vectors.types import PoolingMode, Vector


class EmbeddingBackend(ABC):
    """Abstract base class for embedding backends.

    Implementations must return exactly one vector per input text, in input
    order, all of the model's native dimension.
    """

    @abstractmethod
    def embed(
        self,
        texts: Sequence[str],
        pooling: PoolingMode,
        normalize: bool
    ) -> List[Vector]:
        """Embed ``texts``.

        Parameters
        - texts: Input texts, non-empty
        - pooling: Reduction applied to token-level outputs
        - normalize: Whether each output vector is scaled to unit length
        """
        pass

    @abstractmethod
    def is_ready(self) -> bool:
        """Return ``True`` once the backend can serve ``embed`` calls."""
        pass


# Builds a backend bound to the given model name. May be slow and may raise.
BackendFactory = Callable[[str], EmbeddingBackend]
