#!/usr/bin/env python3
"""
Startup Ecosystem Graph API Server

This is the main entry point for the graph API. It wires the graph service
during startup, registers routes, middleware and error handlers, and starts
the server when run directly.
"""
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from startup_graph import __version__
from startup_graph.api import graph
from startup_graph.config.config import Settings, settings as default_settings
from startup_graph.config.logs import LogManager, get_logger
from startup_graph.exceptions import SourceDisabledError, StartupGraphError
from startup_graph.schemas import ErrorResponse
from startup_graph.services.graph_service import GraphService, build_graph_service

# Setup logging
LogManager.setup_logging()
logger = get_logger(__name__)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump()
    )


def create_app(
    settings: Optional[Settings] = None,
    graph_service: Optional[GraphService] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (defaults to the global settings)
        graph_service: Prebuilt service; built from settings at startup if omitted

    Returns:
        The configured application
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifecycle manager:
        - Build the graph service and its HTTP clients
        - Close the clients at shutdown
        """
        service = graph_service or build_graph_service(settings)
        app.state.graph_service = service
        logger.info(f"Starting {settings.PROJECT_NAME} in {settings.ENV} mode")

        yield

        logger.info(f"Shutting down {settings.PROJECT_NAME}")
        await service.aclose()

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        description="Queryable graph of startups, founders and their relationships",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time to response headers."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    app.include_router(graph.router, prefix=f"{settings.API_PREFIX}/graph")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        error = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "http_error"
        return _error(exc.status_code, error, str(exc.detail))

    @app.exception_handler(SourceDisabledError)
    async def source_disabled_handler(request: Request, exc: SourceDisabledError):
        logger.warning(f"Refresh rejected: {exc}")
        return _error(status.HTTP_400_BAD_REQUEST, "source_disabled", str(exc))

    @app.exception_handler(StartupGraphError)
    async def pipeline_error_handler(request: Request, exc: StartupGraphError):
        logger.error(f"Pipeline error: {exc}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, type(exc).__name__, str(exc))

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """
        Basic health check endpoint.

        Returns:
            Dict[str, Any]: Health status
        """
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.ENV,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "startup_graph.app:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
    )
