"""Vectorizer HTTP service package.

Layout:
- ``api``: FastAPI route handlers and request/response models.
- ``encoders``: ``EmbeddingProvider`` and the embedding backends it drives.
- ``batching``: device detection and batch sizing for inference.
- ``runtime``: service-local metrics facade.

Import convenience:
- from vectorizer_service.main import create_app
"""
