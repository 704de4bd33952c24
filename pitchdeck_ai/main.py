"""
FastAPI application entry point for PitchDeck AI.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pitchdeck_ai import __version__
from pitchdeck_ai.api.v1 import v1_router
from pitchdeck_ai.application.services.backend_order import LOCAL_BACKEND
from pitchdeck_ai.infra.config.dependencies import get_orchestrator
from pitchdeck_ai.infra.config.logging_config import get_logger, setup_logging
from pitchdeck_ai.infra.config.settings import get_settings
from pitchdeck_ai.infra.llm import OllamaBackend
from pitchdeck_ai.infra.middleware.request_context import RequestContextMiddleware
from pitchdeck_ai.infra.observability import start_metrics_server

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger = get_logger("app")
    logger.info(
        "app.startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    if settings.prometheus_metrics_enabled and not settings.is_testing():
        start_metrics_server(settings.prometheus_metrics_port)

    # Builds every backend and logs configuration warnings once
    orchestrator = get_orchestrator()

    local = orchestrator.backends.get(LOCAL_BACKEND)
    if settings.ollama_auto_pull and isinstance(local, OllamaBackend) and local.enabled:
        await local.ensure_model_available()

    yield

    # Shutdown
    logger.info("app.shutdown", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Multi-backend pitch deck content generation service",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request context + logging middleware
    app.add_middleware(RequestContextMiddleware)

    # Include routers
    app.include_router(v1_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Liveness check; backend health is reported by /api/v1/ai/providers."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": __version__,
        }

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pitchdeck_ai.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )
