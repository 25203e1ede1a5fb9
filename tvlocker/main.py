# tvlocker/main.py
"""
TV Locker server: FastAPI application entry point.

Run with:
    uvicorn tvlocker.main:app --host 0.0.0.0 --port 8000
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tvlocker.database import create_db_engine, make_session_factory
from tvlocker.errors import LifecycleError
from tvlocker.models import Base
from tvlocker.routes import devices as devices_router
from tvlocker.routes import locks as locks_router
from tvlocker.routes import status as status_router

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def lifecycle_error_handler(request: Request, exc: LifecycleError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def validation_error_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return PlainTextResponse("Invalid request body", status_code=400)


def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def database_error_handler(request: Request, exc: SQLAlchemyError) -> PlainTextResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse("Database error", status_code=500)


def unexpected_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Panic recovered on %s %s", request.method, request.url.path)
    return PlainTextResponse("Internal server error", status_code=500)


def create_app(engine: Engine | None = None) -> FastAPI:
    """Build the application around *engine* (from DATABASE_URL when omitted)."""
    if engine is None:
        engine = create_db_engine()

    # create tables if not present
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="TV Locker Server")
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Request received: %s %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(LifecycleError, lifecycle_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(status_router.router)
    app.include_router(devices_router.router)
    app.include_router(locks_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tvlocker.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
