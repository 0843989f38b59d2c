"""
Main FastAPI application creation and configuration.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..config import get_settings
from ..config.settings import configure_logging
from ..utils.logging import log_event, set_correlation_id, set_operation_context
from .api.dependencies import set_service_container
from .api.error_formatting import validation_error_response
from .api.router import get_api_router
from .service_container import ServiceConfig, ServiceContainer

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    # Startup
    configure_logging(level=settings.log_level)
    container = ServiceContainer(ServiceConfig.from_settings(settings))
    await container.initialize()
    set_service_container(container)
    log_event(
        "server_started",
        {"store": settings.store_backend, "port": settings.port},
    )
    yield
    # Shutdown
    set_service_container(None)
    await container.cleanup()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Chat Relay",
        description="Relays browser chat to an LLM and keeps per-uid history",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return validation_error_response(exc)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        set_operation_context(method=request.method, path=request.url.path)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    app.include_router(get_api_router())

    # Browser client, mounted last so it never shadows /api
    static_dir = settings.static_dir
    if static_dir and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def main() -> None:
    """Run the relay with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "chatrelay.server.main:create_app",
        host=settings.host,
        port=settings.port,
        factory=True,
    )


if __name__ == "__main__":
    main()
