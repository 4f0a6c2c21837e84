# backend/slotwise/main.py
import logging
from contextlib import asynccontextmanager

import requests
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .core.errors import InvalidInputError, InvalidPolicyError
from .database import Base, make_engine, make_sessionmaker
from .logging_setup import configure_logging
from .routers import availability as availability_router
from .routers import booking_links as booking_links_router
from .routers import bookings as bookings_router
from .routers import settings as settings_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        engine = make_engine(settings.DB_URL, settings.APP_ENV)
        if settings.APP_ENV != "prod":
            # prod schema is managed by migrations
            Base.metadata.create_all(engine)
        app.state.engine = engine
        app.state.sessionmaker = make_sessionmaker(engine)
        app.state.http = requests.Session()
        logger.info("slotwise started (env=%s)", settings.APP_ENV)
        try:
            yield
        finally:
            app.state.http.close()
            engine.dispose()

    app = FastAPI(title="Slotwise", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(availability_router.router)
    app.include_router(booking_links_router.router)
    app.include_router(bookings_router.router)
    app.include_router(settings_router.router)

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.warning("invalid input on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(InvalidPolicyError)
    async def invalid_policy_handler(request: Request, exc: InvalidPolicyError):
        logger.error("stored availability policy is invalid on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/ping")
    def ping():
        return {"ok": True}

    return app


app = create_app()
