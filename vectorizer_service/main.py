"""Vectorizer service main application."""

import functools
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from vectorizer.common.config import VectorizerConfig
from vectorizer.common.errors import ValidationError, VectorizerError
from vectorizer.common.logging import configure_logging

from .api.routes import router as api_router
from .encoders.base import BackendFactory
from .encoders.provider import EmbeddingProvider
from .encoders.sentence_transformer import create_sentence_transformer_backend
from .runtime.metrics import get_metrics_collector

SERVICE_NAME = "vectorizer-service"

logger = structlog.get_logger("vectorizer_service")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def vectorizer_error_handler(request: Request, exc: VectorizerError) -> JSONResponse:
    logger.error(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc)
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the same ``{"error": ...}`` shape."""
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"error": "; ".join(messages)})


def create_app(
    config: Optional[VectorizerConfig] = None,
    backend_factory: Optional[BackendFactory] = None
) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    - config: Service configuration; read from the environment when omitted
    - backend_factory: Builds the embedding backend for a model name; defaults
      to the sentence-transformers backend
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        service_config = config or VectorizerConfig()
        configure_logging(SERVICE_NAME, service_config.ml_log_level, service_config.ml_log_format)
        app.state.config = service_config
        app.state.startup_time = time.time()

        logger.info("Starting vectorizer service", env=service_config.ml_env)

        app.state.metrics_collector = get_metrics_collector(SERVICE_NAME)

        factory = backend_factory or functools.partial(
            create_sentence_transformer_backend,
            config=service_config
        )
        app.state.embedding_provider = EmbeddingProvider(
            factory,
            default_model_name=service_config.ml_embedding_model,
            metrics_collector=app.state.metrics_collector
        )

        if service_config.ml_embedding_preload:
            try:
                await app.state.embedding_provider.initialize()
            except VectorizerError as e:
                # Still lazily retried by the first embed request.
                logger.error("Embedding backend preload failed", error=str(e))

        logger.info("Vectorizer service started successfully")

        yield

        logger.info("Shutting down vectorizer service")
        await app.state.embedding_provider.cleanup()
        logger.info("Vectorizer service shutdown complete")

    app = FastAPI(
        title="Vectorizer Service",
        description="Text embedding generation and vector similarity",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(VectorizerError, vectorizer_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(api_router)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("Unhandled request error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)}
            )

        if hasattr(app.state, "metrics_collector"):
            app.state.metrics_collector.record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status=status_code,
                duration=time.time() - start_time
            )

        return response

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint."""
        return "Vector Embeddings Generator API"

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        provider: Optional[EmbeddingProvider] = getattr(app.state, "embedding_provider", None)
        if provider is not None and await provider.health_check():
            return {"status": "healthy", "service": SERVICE_NAME}
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": SERVICE_NAME}
        )

    @app.get("/live")
    async def liveness():
        """Liveness probe. Returns quickly if process is responsive."""
        return {
            "status": "alive",
            "service": SERVICE_NAME,
            "uptime_seconds": time.time() - getattr(app.state, "startup_time", time.time())
        }

    @app.get("/ready")
    async def readiness():
        """Readiness probe. A backend that is not loaded yet still counts as ready."""
        provider: Optional[EmbeddingProvider] = getattr(app.state, "embedding_provider", None)
        if provider is None or not await provider.health_check():
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "service": SERVICE_NAME}
            )

        state = provider.get_state()
        return {
            "status": "ready",
            "service": SERVICE_NAME,
            "models_loaded": 1 if state.is_initialized else 0
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        if hasattr(app.state, "metrics_collector"):
            return Response(content=app.state.metrics_collector.get_metrics(), media_type="text/plain")
        return Response(content="# No metrics available\n", media_type="text/plain")

    return app


app = create_app()


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    config = VectorizerConfig()
    uvicorn.run(
        "vectorizer_service.main:app",
        host=config.ml_embedding_host,
        port=config.ml_embedding_port,
        log_level=config.ml_log_level.lower()
    )


if __name__ == "__main__":
    run()
