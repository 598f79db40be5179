from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from buildstock.app.api.v1.router import router as v1_router
from buildstock.app.db.seed import init_db
from buildstock.app.db.session import engine
from buildstock.core.config import settings
from buildstock.services.errors import (
    LedgerError,
    ValidationError,
    InsufficientStockError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)


def check_database() -> None:
    """Seule erreur fatale : la base est injoignable au démarrage."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.critical("Database unreachable at startup: %s", exc)
        raise RuntimeError("Database unreachable at startup") from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_database()
    if settings.auto_create_schema:
        init_db(engine)
    logger.info(
        "BuildStock started (auth=%s, stock_check_mode=%s)",
        "on" if settings.auth_enabled else "off",
        settings.stock_check_mode,
    )
    yield
    engine.dispose()


def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc), **extra})


def _describe_request_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        # même forme que ValidationError côté ledger
        return JSONResponse(status_code=400, content={"success": False, "error": _describe_request_errors(exc)})

    @app.exception_handler(InsufficientStockError)
    async def insufficient_stock(request: Request, exc: InsufficientStockError):
        return _error(
            400,
            exc,
            material=exc.material,
            current_stock=exc.current_stock,
            requested=exc.requested,
            unit=exc.unit,
        )

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return _error(400, exc)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return _error(404, exc)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        return _error(500, exc)

    @app.exception_handler(LedgerError)
    async def ledger_error(request: Request, exc: LedgerError):
        return _error(400, exc)

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "error": "Database error"})


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="BuildStock", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(v1_router, prefix="/v1")
    return app


app = create_app()
