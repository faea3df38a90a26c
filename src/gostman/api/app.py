"""
Gostman FastAPI Application

HTTP surface over the send pipeline and the request store.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.config import GostmanConfig, get_config
from ..core.exceptions import (
    GostmanException,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..core.logging import get_logger, setup_logging
from ..request.builder import RequestBuilder
from ..request.executor import HTTPExecutor
from ..storage.json_store import JSONRequestStore

logger = get_logger(__name__)

_ERROR_STATUS = {
    NotFoundError: 404,
    ValidationError: 422,
    StorageError: 500,
}


def error_status(error: GostmanException) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return 400


def create_app(
    config: Optional[GostmanConfig] = None,
    store: Optional[JSONRequestStore] = None,
    executor: Optional[HTTPExecutor] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Optional configuration (global configuration if None)
        store: Request store (opened on the configured path if None)
        executor: Transport executor (built from config if None)

    Returns:
        Configured FastAPI application
    """
    config = config or get_config()

    app = FastAPI(
        title="Gostman API",
        description="Send HTTP requests and manage saved request definitions",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.store = store or JSONRequestStore(config.store_path)
    app.state.executor = executor or HTTPExecutor.from_config(config)
    app.state.builder = RequestBuilder()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GostmanException)
    async def gostman_exception_handler(request: Request, exc: GostmanException):
        status_code = error_status(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"label": exc.label, "message": exc.message},
        )

    from .routes import environment, proxy, requests, send

    app.include_router(proxy.router, prefix="/api/proxy", tags=["proxy"])
    app.include_router(send.router, prefix="/api/v1/send", tags=["send"])
    app.include_router(requests.router, prefix="/api/v1/requests", tags=["requests"])
    app.include_router(
        environment.router, prefix="/api/v1/environment", tags=["environment"]
    )

    @app.get("/api/health", tags=["health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    store: Optional[JSONRequestStore] = None,
) -> None:
    """
    Run the Gostman API server.

    Args:
        host: Server host address (config if None)
        port: Server port number (config if None)
        store: Request store (configured path if None)
    """
    import uvicorn

    config = get_config()
    setup_logging()
    app = create_app(config, store=store)
    logger.info(f"Serving Gostman API, store at {app.state.store.path}")
    uvicorn.run(
        app,
        host=host or config.api.host,
        port=port or config.api.port,
    )
