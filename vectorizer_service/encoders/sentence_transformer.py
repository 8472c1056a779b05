"""sentence-transformers embedding backend.

Loads a model once and turns token-level outputs into one vector per text
using the requested pooling. Xenova model repositories ship only ONNX weights
(``onnx/model.onnx``), hence the ``onnx`` runtime default.
"""

import time
from typing import List, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer
import structlog

from vectorizer.common.config import VectorizerConfig
from vectorizer.vectors.ops import normalize_vector
from vectorizer.vectors.types import PoolingMode, Vector

from ..batching.gpu_detector import detect_optimal_device, optimize_batch_size_for_device
from .base import EmbeddingBackend

logger = structlog.get_logger("vectorizer_service.sentence_transformer")


def pool_token_embeddings(token_embeddings: np.ndarray, pooling: PoolingMode) -> np.ndarray:
    """Reduce a ``[tokens, dim]`` matrix of non-padding tokens to one vector."""
    if pooling == PoolingMode.CLS:
        return token_embeddings[0]
    return token_embeddings.mean(axis=0)


class SentenceTransformerBackend(EmbeddingBackend):
    """Backend wrapping a ``SentenceTransformer`` model.

    Parameters
    - model_name: Hugging Face model identifier
    - device: ``cpu``, ``cuda:N`` or ``mps``
    - runtime: sentence-transformers backend, ``onnx`` or ``torch``
    - batch_size: Encode batch size; larger inputs are processed in chunks
    """

    def __init__(self, model_name: str, device: str = "cpu", runtime: str = "onnx", batch_size: int = 32):
        self.model_name = model_name
        self.device = device
        self.batch_size = batch_size
        self.model = SentenceTransformer(model_name, device=device, backend=runtime)
        self.dimension = self.model.get_sentence_embedding_dimension()
        self.max_length = self.model.max_seq_length

    def embed(
        self,
        texts: Sequence[str],
        pooling: PoolingMode,
        normalize: bool
    ) -> List[Vector]:
        # Padding is already stripped from each per-text token matrix.
        token_outputs = self.model.encode(
            list(texts),
            batch_size=self.batch_size,
            output_value="token_embeddings",
            convert_to_numpy=False,
            show_progress_bar=False
        )

        vectors = []
        for tokens in token_outputs:
            pooled = pool_token_embeddings(tokens.float().cpu().numpy(), pooling)
            vectors.append(normalize_vector(pooled) if normalize else pooled.tolist())
        return vectors

    def is_ready(self) -> bool:
        return self.model is not None


def create_sentence_transformer_backend(
    model_name: str,
    config: VectorizerConfig
) -> SentenceTransformerBackend:
    """Load ``model_name`` on the device picked for this host."""
    start_time = time.time()
    device = detect_optimal_device(config.ml_gpu_preference)
    batch_size = optimize_batch_size_for_device(device, config.ml_max_batch_size)

    backend = SentenceTransformerBackend(
        model_name,
        device=device,
        runtime=config.ml_embedding_backend,
        batch_size=batch_size
    )

    logger.info(
        "Loaded embedding model",
        model_name=model_name,
        device=device,
        runtime=config.ml_embedding_backend,
        dimension=backend.dimension,
        max_length=backend.max_length,
        batch_size=batch_size,
        load_seconds=time.time() - start_time
    )
    return backend
