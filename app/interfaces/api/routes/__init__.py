from fastapi import FastAPI

from .auth import router as auth_router
from .chat import router as chat_router
from .favorites import router as favorites_router
from .notifications import router as notifications_router
from .push import router as push_router
from .scan import router as scan_router
from .weather import router as weather_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(favorites_router)
    app.include_router(scan_router)
    app.include_router(chat_router)
    app.include_router(notifications_router)
    app.include_router(weather_router)
    app.include_router(push_router)
