"""Common utilities shared by the vectorizer service.

Includes:
- ``config``: pydantic-settings configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers.
- ``errors``: the error taxonomy surfaced to callers.
- ``validation``: request text validation.

Import pattern:
- from vectorizer.common.config import VectorizerConfig
- from vectorizer.common.logging import configure_logging
"""
