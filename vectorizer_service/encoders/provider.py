"""Embedding provider owning the single shared embedding backend.

The backend is created lazily by the first embed request and then reused for
the rest of the process. Creation is single-flight: the first request starts
one shared load task and every concurrent first request awaits that same task,
so exactly one backend is built even when callers are cancelled mid-load.

Notes
- Once a backend exists, the ``model_name`` of later requests is ignored and
  the loaded model keeps serving. A warning is logged whenever a request asks
  for a different model so the mismatch is visible to operators.
- A failed load leaves the provider uninitialized; the next request retries.
- Loading and inference run in worker threads. The lock only guards starting
  the load task; inference calls run concurrently.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from vectorizer.common.config import DEFAULT_MODEL_NAME
from vectorizer.common.errors import BackendError
from vectorizer.common.logging import log_performance
from vectorizer.common.metrics import MetricsCollector
from vectorizer.vectors.types import EmbeddingOptions, Vector

from .base import BackendFactory, EmbeddingBackend

logger = structlog.get_logger("vectorizer_service.embedding_provider")


@dataclass(frozen=True)
class ProviderState:
    """Read-only snapshot of the provider lifecycle."""

    is_initialized: bool
    model_name: Optional[str] = None


class EmbeddingProvider:
    """Produces vectors for texts through one memoized backend.

    Parameters
    - backend_factory: Callable building a backend for a model name
    - default_model_name: Model used when options do not name one
    - metrics_collector: Optional collector for load and embedding metrics
    """

    def __init__(
        self,
        backend_factory: BackendFactory,
        default_model_name: str = DEFAULT_MODEL_NAME,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        self.backend_factory = backend_factory
        self.default_model_name = default_model_name
        self.metrics_collector = metrics_collector
        self._backend: Optional[EmbeddingBackend] = None
        self._model_name: Optional[str] = None
        self._init_lock = asyncio.Lock()
        self._load_task: Optional[asyncio.Task] = None

    async def initialize(self, model_name: Optional[str] = None) -> EmbeddingBackend:
        """Return the shared backend, creating it on first use.

        ``model_name`` only matters for the call that actually starts the
        load. The load runs in its own task and every caller awaits it through
        ``asyncio.shield``, so cancelling a caller never abandons or repeats it.
        """
        if self._backend is None:
            async with self._init_lock:
                if self._backend is None and self._load_task is None:
                    self._load_task = asyncio.create_task(
                        self._load_backend(model_name or self.default_model_name)
                    )
                load_task = self._load_task

            if load_task is not None:
                await asyncio.shield(load_task)

        if model_name and model_name != self._model_name:
            logger.warning(
                "Requested model differs from loaded model, reusing loaded model",
                requested_model=model_name,
                loaded_model=self._model_name
            )
        return self._backend

    async def _load_backend(self, model_name: str) -> None:
        try:
            await self._create_backend(model_name)
        finally:
            # Cleared on success too: from then on _backend answers.
            self._load_task = None

    async def _create_backend(self, model_name: str) -> None:
        start_time = time.time()
        logger.info("Loading embedding backend", model_name=model_name)

        try:
            backend = await asyncio.to_thread(self.backend_factory, model_name)
        except BackendError:
            self._record_load(model_name, "failure", time.time() - start_time)
            raise
        except Exception as e:
            self._record_load(model_name, "failure", time.time() - start_time)
            logger.error("Failed to load embedding backend", model_name=model_name, error=str(e))
            raise BackendError(
                f"Failed to load embedding model {model_name}: {e}",
                model_name=model_name
            ) from e

        self._backend = backend
        self._model_name = model_name

        duration = time.time() - start_time
        self._record_load(model_name, "success", duration)
        log_performance("model_load", duration * 1000, model_name=model_name)

    def _record_load(self, model_name: str, status: str, duration: float) -> None:
        if self.metrics_collector is None:
            return
        self.metrics_collector.record_model_load(model_name, status, duration)
        self.metrics_collector.set_models_loaded(1 if self._backend is not None else 0)

    async def embed_one(self, text: str, options: Optional[EmbeddingOptions] = None) -> Vector:
        """Embed a single text."""
        vectors = await self._embed([text], options or EmbeddingOptions(), "embed_one")
        return vectors[0]

    async def embed_many(
        self,
        texts: Sequence[str],
        options: Optional[EmbeddingOptions] = None
    ) -> List[Vector]:
        """Embed ``texts`` in one batched backend call, keeping input order."""
        return await self._embed(list(texts), options or EmbeddingOptions(), "embed_many")

    async def _embed(
        self,
        texts: List[str],
        options: EmbeddingOptions,
        operation: str
    ) -> List[Vector]:
        backend = await self.initialize(options.model_name)
        if not texts:
            return []

        start_time = time.time()
        try:
            vectors = await asyncio.to_thread(
                backend.embed,
                texts,
                options.pooling,
                options.normalize
            )
        except BackendError:
            raise
        except Exception as e:
            logger.error(
                "Embedding inference failed",
                model_name=self._model_name,
                operation=operation,
                count=len(texts),
                error=str(e)
            )
            raise BackendError(f"Embedding inference failed: {e}", model_name=self._model_name) from e

        if len(vectors) != len(texts):
            raise BackendError(
                f"Backend returned {len(vectors)} vectors for {len(texts)} texts",
                model_name=self._model_name
            )

        if self.metrics_collector is not None:
            self.metrics_collector.record_embedding(
                model_name=self._model_name,
                operation=operation,
                duration=time.time() - start_time
            )

        return [[float(x) for x in vector] for vector in vectors]

    def get_state(self) -> ProviderState:
        """Report whether a backend has been created, and for which model."""
        return ProviderState(
            is_initialized=self._backend is not None,
            model_name=self._model_name
        )

    async def health_check(self) -> bool:
        """Healthy when no backend exists yet, or the loaded one is ready."""
        try:
            return self._backend is None or self._backend.is_ready()
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return False

    async def cleanup(self) -> None:
        """Drop the backend at shutdown."""
        async with self._init_lock:
            self._backend = None
            self._model_name = None
        if self.metrics_collector is not None:
            self.metrics_collector.set_models_loaded(0)
        logger.info("Embedding provider cleanup completed")
