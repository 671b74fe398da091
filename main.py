from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases.session import AppServices, build_services
from app.config import Settings, get_settings
from app.infrastructure.database import engine, initialize_database
from app.interfaces.api.routes import register_routes

ServicesBuilder = Callable[[Settings], AppServices]


def create_app(services_builder: ServicesBuilder = build_services) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initialize_database()
        services = services_builder(get_settings())
        app.state.services = services
        services.start()
        try:
            yield
        finally:
            services.shutdown()
            engine.dispose()

    app = FastAPI(title="LeafLens AI", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[get_settings().app_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
