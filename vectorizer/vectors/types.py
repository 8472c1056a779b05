"""Shared option and result types for embeddings and vector math."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, List, Optional, Sequence, TypeVar, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..common.errors import VectorMathError

Vector = List[float]
VectorLike = Union[Sequence[float], np.ndarray]

T = TypeVar("T")


class PoolingMode(str, Enum):
    """How token-level model outputs are reduced to one vector."""

    MEAN = "mean"
    CLS = "cls"


class EmbeddingOptions(BaseModel):
    """Per-request embedding options.

    JSON bodies use ``modelName``; Python callers may pass ``model_name``.
    A missing ``model_name`` means "the configured default model".
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )

    model_name: Optional[str] = Field(default=None, alias="modelName")
    pooling: PoolingMode = PoolingMode.MEAN
    normalize: bool = True


@dataclass(frozen=True)
class SimilarityResult:
    """Position of a candidate vector and its cosine similarity to a query."""

    index: int
    similarity: float


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a vector math call: either a value or an error, never both.

    ``unwrap()`` hands back the value or raises the carried error, for callers
    that prefer exception flow.
    """

    value: Optional[T] = None
    error: Optional[VectorMathError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: VectorMathError) -> "Result[T]":
        return cls(error=error)
