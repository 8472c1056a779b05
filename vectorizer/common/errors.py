"""Error taxonomy for the vectorizer service.

- ``ValidationError``: malformed input, raised before any backend call.
- ``DimensionMismatchError``: vectors of unequal length handed to vector math.
- ``BackendError``: the embedding backend failed to load or to run inference.

None of these are retried inside the service; they reach the immediate caller
as-is.
"""

from typing import Optional


class VectorizerError(Exception):
    """Base class for all service errors."""


class ValidationError(VectorizerError):
    """Request input is missing or has the wrong type."""


class VectorMathError(VectorizerError):
    """A vector math operation received unusable input."""


class DimensionMismatchError(VectorMathError):
    """Two vectors that must be combined have different lengths."""

    def __init__(self, expected: int, actual: int, index: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.index = index
        if index is None:
            message = f"Vectors must have the same length (got {expected} and {actual})"
        else:
            message = (
                f"Vectors must have the same length "
                f"(query has {expected}, candidate {index} has {actual})"
            )
        super().__init__(message)


class NonFiniteVectorError(VectorMathError):
    """A vector holds NaN or infinite values, so no similarity can be computed."""

    def __init__(self, index: Optional[int] = None):
        self.index = index
        if index is None:
            message = "Vectors must contain only finite values"
        else:
            message = f"Vectors must contain only finite values (candidate {index})"
        super().__init__(message)



class BackendError(VectorizerError):
    """The embedding backend could not be created or failed during inference."""

    def __init__(self, message: str, model_name: Optional[str] = None):
        self.model_name = model_name
        super().__init__(message)