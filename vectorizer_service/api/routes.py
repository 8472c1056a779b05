"""API routes for the vectorizer service."""

import time
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field
import structlog

from vectorizer.common.errors import VectorizerError
from vectorizer.common.validation import InputValidator
from vectorizer.vectors.ops import cosine_similarity, interpret_similarity
from vectorizer.vectors.types import EmbeddingOptions

from ..encoders.provider import EmbeddingProvider

logger = structlog.get_logger("vectorizer_service.api")

router = APIRouter()

_validator = InputValidator()


class VectorizeRequest(BaseModel):
    """Request model for single-text vectorization.

    ``text`` is typed loosely so type errors are reported by the validator
    with a 400 rather than by FastAPI with a 422.
    """
    text: Any = Field(None, description="Text to embed")
    options: Optional[EmbeddingOptions] = Field(None, description="Embedding options")


class VectorizeResponse(BaseModel):
    """Response model for single-text vectorization."""
    text: str = Field(..., description="Input text")
    vector: List[float] = Field(..., description="Embedding vector")
    dimensions: int = Field(..., description="Vector length")


class VectorizeBatchRequest(BaseModel):
    """Request model for batch vectorization."""
    texts: Any = Field(None, description="Texts to embed")
    options: Optional[EmbeddingOptions] = Field(None, description="Embedding options")


class VectorizeBatchResponse(BaseModel):
    """Response model for batch vectorization."""
    texts: List[str] = Field(..., description="Input texts")
    vectors: List[List[float]] = Field(..., description="One vector per input text, same order")
    count: int = Field(..., description="Number of vectors")
    dimensions: int = Field(..., description="Vector length, 0 for an empty batch")


class SimilarityRequest(BaseModel):
    """Request model for text similarity."""
    model_config = ConfigDict(populate_by_name=True)

    text_a: Any = Field(None, alias="textA")
    text_b: Any = Field(None, alias="textB")
    options: Optional[EmbeddingOptions] = Field(None, description="Embedding options")


class SimilarityResponse(BaseModel):
    """Response model for text similarity."""
    model_config = ConfigDict(populate_by_name=True)

    text_a: str = Field(..., alias="textA")
    text_b: str = Field(..., alias="textB")
    similarity: float = Field(..., description="Cosine similarity in [-1, 1]")
    interpretation: str = Field(..., description="Human-readable similarity label")


class ModelInfo(BaseModel):
    """Embedding backend state."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    is_initialized: bool = Field(..., alias="isInitialized")
    model_name: Optional[str] = Field(None, alias="modelName")


def get_embedding_provider(request: Request) -> EmbeddingProvider:
    """Get the embedding provider from application state."""
    return request.app.state.embedding_provider


@router.get("/info", response_model=ModelInfo)
async def info(
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider)
):
    """Report whether the embedding backend has been loaded."""
    state = embedding_provider.get_state()
    return ModelInfo(is_initialized=state.is_initialized, model_name=state.model_name)


@router.post("/vectorize", response_model=VectorizeResponse)
async def vectorize(
    request: VectorizeRequest,
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider)
):
    """Generate the embedding for one text."""
    start_time = time.time()
    text = _validator.validate_text(request.text)

    try:
        vector = await embedding_provider.embed_one(text, request.options)
    except VectorizerError:
        raise
    except Exception as e:
        logger.error("Vectorization failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Vectorization failed: {str(e)}")

    logger.info(
        "Text vectorized",
        dimensions=len(vector),
        latency_ms=(time.time() - start_time) * 1000
    )
    return VectorizeResponse(text=text, vector=vector, dimensions=len(vector))


@router.post("/vectorize-batch", response_model=VectorizeBatchResponse)
async def vectorize_batch(
    request: VectorizeBatchRequest,
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider)
):
    """Generate embeddings for several texts in one backend call."""
    start_time = time.time()
    texts = _validator.validate_texts(request.texts)

    try:
        vectors = await embedding_provider.embed_many(texts, request.options)
    except VectorizerError:
        raise
    except Exception as e:
        logger.error("Batch vectorization failed", count=len(texts), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to vectorize texts")

    dimensions = len(vectors[0]) if vectors else 0
    logger.info(
        "Texts vectorized",
        count=len(vectors),
        dimensions=dimensions,
        latency_ms=(time.time() - start_time) * 1000
    )
    return VectorizeBatchResponse(
        texts=texts,
        vectors=vectors,
        count=len(vectors),
        dimensions=dimensions
    )


@router.post("/similarity", response_model=SimilarityResponse)
async def similarity(
    request: SimilarityRequest,
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider)
):
    """Embed two texts and compare them with cosine similarity."""
    text_a, text_b = _validator.validate_text_pair(request.text_a, request.text_b)

    try:
        vector_a, vector_b = await embedding_provider.embed_many([text_a, text_b], request.options)
        score = cosine_similarity(vector_a, vector_b).unwrap()
    except VectorizerError:
        raise
    except Exception as e:
        logger.error("Similarity calculation failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate similarity")

    interpretation = interpret_similarity(score)
    logger.info("Similarity calculated", similarity=score, interpretation=interpretation)
    return SimilarityResponse(
        text_a=text_a,
        text_b=text_b,
        similarity=score,
        interpretation=interpretation
    )
