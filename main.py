import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backoffice.config import get_settings
from backoffice.infrastructure.database import engine, initialize_database
from backoffice.infrastructure.notifications import (
    NotificationConnectionManager,
    WebsocketBroadcaster,
)
from backoffice.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database on startup and release resources on shutdown."""

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    initialize_database()
    yield
    engine.dispose()


async def _unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body: dict[str, str] = {"detail": "Server error. Please try again later."}
    if get_settings().is_development:
        body["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title=f"{settings.site_name} back-office", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, _unhandled_exception)

    manager = NotificationConnectionManager()
    app.state.connection_manager = manager
    app.state.broadcaster = WebsocketBroadcaster(manager)

    register_routes(app)
    return app


app = create_app()
