"""Configuration management for the vectorizer service.

Centralizes environment-driven configuration on top of
``pydantic_settings.BaseSettings`` so settings can come from environment
variables, a ``.env`` file, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover the ``ML_*`` environment variables the service reads

Usage
- Build the config in the service entrypoint: ``config = VectorizerConfig()``
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_NAME = "Xenova/all-MiniLM-L6-v2"


class VectorizerConfig(BaseSettings):
    """Configuration for the vectorizer service.

    Field names map one-to-one onto upper-case environment variables
    (``ml_embedding_model`` is read from ``ML_EMBEDDING_MODEL``).

    Notes
    - ``ml_embedding_model`` only picks the model used when a request does not
      name one; the first model loaded keeps serving for the process lifetime.
    - ``ml_embedding_preload`` warms the backend at startup instead of on the
      first embed request.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ml_env: str = Field(default="local", description="Deployment environment name")

    # Logging
    ml_log_level: str = Field(default="INFO")
    ml_log_format: str = Field(default="json", description="json or console")

    # HTTP
    ml_embedding_host: str = Field(default="0.0.0.0")
    ml_embedding_port: int = Field(default=3000)

    # Embedding backend
    ml_embedding_model: str = Field(default=DEFAULT_MODEL_NAME)
    ml_embedding_backend: str = Field(default="onnx", description="onnx or torch runtime")
    ml_embedding_preload: bool = Field(default=False)

    # Performance
    ml_gpu_preference: str = Field(default="auto", description="auto, cpu or gpu")
    ml_max_batch_size: int = Field(default=256, gt=0)
