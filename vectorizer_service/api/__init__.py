"""API subpackage for the vectorizer service.

Contains the FastAPI router exposing:
- Single and batch vectorization (``/vectorize``, ``/vectorize-batch``)
- Text similarity (``/similarity``)
- Model state (``/info``)
"""
