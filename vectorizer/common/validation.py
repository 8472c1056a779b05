"""Request input validation.

Checks run before the embedding provider is touched, so malformed requests
never trigger a model load or an inference call.
"""

from typing import Any, List, Tuple

import structlog

from .errors import ValidationError

logger = structlog.get_logger("validation")

TEXT_REQUIRED = "Text is required and must be a string"
TEXTS_REQUIRED = "Texts must be an array of strings"
TEXT_PAIR_REQUIRED = "Both textA and textB are required and must be strings"


class InputValidator:
    """Validates text payloads for the embedding routes."""

    def validate_text(self, text: Any) -> str:
        """Return ``text`` if it is a non-empty string."""
        if not isinstance(text, str) or not text:
            logger.warning("Rejected text input", value_type=type(text).__name__)
            raise ValidationError(TEXT_REQUIRED)
        return text

    def validate_texts(self, texts: Any) -> List[str]:
        """Return ``texts`` if it is a list whose every element is a string.

        Empty strings and an empty list are accepted; only the container and
        element types are checked.
        """
        if not isinstance(texts, list):
            logger.warning("Rejected texts input", value_type=type(texts).__name__)
            raise ValidationError(TEXTS_REQUIRED)

        for index, text in enumerate(texts):
            if not isinstance(text, str):
                logger.warning(
                    "Rejected texts input",
                    index=index,
                    value_type=type(text).__name__
                )
                raise ValidationError(TEXTS_REQUIRED)

        return texts

    def validate_text_pair(self, text_a: Any, text_b: Any) -> Tuple[str, str]:
        """Return both texts if each is a non-empty string."""
        for text in (text_a, text_b):
            if not isinstance(text, str) or not text:
                logger.warning("Rejected text pair input", value_type=type(text).__name__)
                raise ValidationError(TEXT_PAIR_REQUIRED)
        return text_a, text_b
