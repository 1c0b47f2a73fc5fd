from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from orgtrack.core.config import Settings, get_settings
from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso
from orgtrack.db.create_tables import init_database
from orgtrack.db.session import create_db_engine
from orgtrack.repositories.sql_storage import SQLStorage, StorageError
from orgtrack.routers import assets as assets_router
from orgtrack.routers import database as database_router
from orgtrack.routers import inventory as inventory_router
from orgtrack.routers import licenses as licenses_router
from orgtrack.routers import organizations as organizations_router
from orgtrack.routers import people as people_router
from orgtrack.routers import settings as settings_router
from orgtrack.routers import teams as teams_router
from orgtrack.services.errors import ServiceError
from orgtrack.services.registry import build_services

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time of every request."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response


def _error_code(status_code: int) -> str:
    return {400: "bad_request", 404: "not_found", 405: "method_not_allowed"}.get(status_code, "http_error")


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.code, "message": exc.message}, status_code=exc.status_code)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("%s %s storage failure: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": "storage_error", "message": str(exc)}, status_code=500)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = "; ".join(_describe(error) for error in exc.errors())
        logger.warning("%s %s invalid request: %s", request.method, request.url.path, message)
        return JSONResponse({"error": "validation_error", "message": message}, status_code=422)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            {"error": _error_code(exc.status_code), "message": exc.detail},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )


def _register_spa(app: FastAPI, spa_dir: str) -> None:
    """Serve the built UI: existing files as-is, any other path gets index.html."""
    root = Path(spa_dir).resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str):
        if full_path.startswith("api/"):
            raise HTTPException(404, "Rota nao encontrada")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        index = root / "index.html"
        if not index.is_file():
            raise HTTPException(404, "Interface nao encontrada: gere o build do front-end")
        return FileResponse(index)


def create_app(settings: Optional[Settings] = None, storage: Optional[SQLStorage] = None) -> FastAPI:
    """
    Build the application around one storage handle.

    The schema is created and the default organization/team seeded before the
    app is returned; a database that cannot be initialized raises StorageError.
    """
    settings = settings or get_settings()
    if storage is None:
        try:
            storage = SQLStorage(create_db_engine(settings.database_url))
        except (SQLAlchemyError, RuntimeError) as exc:
            raise StorageError(f"Cannot open database: {exc}") from exc
    init_database(storage)

    app = FastAPI(title="Orgtrack API")
    app.state.settings = settings
    app.state.storage = storage
    app.state.services = build_services(storage, settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials="*" not in settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLoggingMiddleware)
    _register_error_handlers(app)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "timestamp": now_iso(), "database": storage.engine.url.render_as_string()}

    app.include_router(database_router.router)
    app.include_router(organizations_router.router)
    app.include_router(teams_router.router)
    app.include_router(people_router.router)
    app.include_router(assets_router.router)
    app.include_router(licenses_router.router)
    app.include_router(inventory_router.router)
    app.include_router(settings_router.router)
    _register_spa(app, settings.spa_dir)

    logger.info("Application ready (env=%s, database=%s)", settings.app_env, storage.engine.url)
    return app


def main() -> None:
    settings = get_settings()
    try:
        app = create_app(settings)
    except StorageError as exc:
        logger.error("Failed to initialize database: %s", exc)
        raise SystemExit(1) from exc
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
