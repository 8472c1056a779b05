"""Shared fixtures: a deterministic fake backend and an app wired to it."""

import threading
import time
from typing import List, Sequence

import pytest
from fastapi.testclient import TestClient

from vectorizer.common.config import VectorizerConfig
from vectorizer.vectors.ops import normalize_vector
from vectorizer.vectors.types import PoolingMode, Vector
from vectorizer_service.encoders.base import EmbeddingBackend
from vectorizer_service.main import create_app


class FakeBackend(EmbeddingBackend):
    """Three-dimensional embeddings derived from simple text statistics."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        self.calls = []

    def embed(self, texts: Sequence[str], pooling: PoolingMode, normalize: bool) -> List[Vector]:
        self.calls.append((list(texts), pooling, normalize))
        vectors = []
        for text in texts:
            vowels = sum(1 for c in text.lower() if c in "aeiou")
            first = 1.0 if pooling == PoolingMode.CLS else float(len(text))
            vector = [first, float(vowels), 1.0]
            vectors.append(normalize_vector(vector) if normalize else vector)
        return vectors

    def is_ready(self) -> bool:
        return True


class CountingFactory:
    """Backend factory recording every model it was asked to build."""

    def __init__(self, delay: float = 0.0, failures: int = 0):
        self.delay = delay
        self.failures = failures
        self.created: List[str] = []
        self.backends: List[FakeBackend] = []
        self._lock = threading.Lock()

    def __call__(self, model_name: str) -> FakeBackend:
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            if self.failures > 0:
                self.failures -= 1
                raise OSError(f"{model_name} is not a valid model identifier")
            self.created.append(model_name)
            backend = FakeBackend(model_name)
            self.backends.append(backend)
            return backend


@pytest.fixture
def backend_factory():
    return CountingFactory()


@pytest.fixture
def config():
    return VectorizerConfig(ml_log_format="console", ml_embedding_preload=False)


@pytest.fixture
def client(config, backend_factory):
    app = create_app(config=config, backend_factory=backend_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_factory():
    """Build a ``CountingFactory`` with custom delay/failure settings."""
    return CountingFactory
