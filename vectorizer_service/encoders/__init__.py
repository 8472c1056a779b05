"""Embedding backends and the provider that owns the shared one.

Exports the ``EmbeddingProvider`` and the ``EmbeddingBackend`` interface. The
sentence-transformers backend lives in its own module so importing the
provider does not pull in model libraries.
"""

from .base import BackendFactory, EmbeddingBackend
from .provider import EmbeddingProvider, ProviderState

__all__ = ["BackendFactory", "EmbeddingBackend", "EmbeddingProvider", "ProviderState"]
