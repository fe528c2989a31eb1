"""Главный модуль FastAPI приложения."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import yaml
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from starlette.exceptions import HTTPException as StarletteHTTPException

from pr_reviewer.api.v1 import health, pull_requests, stats, teams, users
from pr_reviewer.core.config import settings
from pr_reviewer.core.database import close_db, init_db
from pr_reviewer.core.deadline import DeadlineMiddleware
from pr_reviewer.core.exceptions import (
    ServiceException,
    http_exception_handler,
    internal_exception_handler,
    service_exception_handler,
    validation_exception_handler,
)
from pr_reviewer.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

OPENAPI_PATH = Path(__file__).parent.parent / "openapi.yml"

ROUTERS = (health.router, teams.router, users.router, pull_requests.router, stats.router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    logger.info("Service started, request timeout %.1fs", settings.REQUEST_TIMEOUT)
    yield
    await close_db()
    logger.info("Service stopped")


def load_openapi_schema(app: FastAPI) -> dict:
    """Схема из openapi.yml рядом с пакетом; без файла генерируется по роутам."""
    if app.openapi_schema:
        return app.openapi_schema

    if OPENAPI_PATH.exists():
        with OPENAPI_PATH.open(encoding="utf-8") as f:
            app.openapi_schema = yaml.safe_load(f)
    else:
        logger.warning("%s not found, generating schema from routes", OPENAPI_PATH)
        app.openapi_schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
    return app.openapi_schema


def create_app() -> FastAPI:
    app = FastAPI(
        title="PR Reviewer Assignment Service",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.openapi = lambda: load_openapi_schema(app)
    app.add_middleware(DeadlineMiddleware, timeout=settings.REQUEST_TIMEOUT)

    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Всё, что не классифицировано выше, отдаётся как INTERNAL_ERROR
    app.add_exception_handler(Exception, internal_exception_handler)

    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
