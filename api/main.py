from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from api.attendance import router as attendance_router
from api.observability import (
    access_log_fields,
    access_log_level,
    begin_request,
    configure_logging,
    end_request,
    monotonic_ms,
    new_request_id,
)
from api.pages import router as pages_router
from api.practice_sessions import router as practice_sessions_router
from api.ratelimit import limiter, rate_limit_exceeded_handler
from api.routes import router
from core.bootstrap import ensure_demo_seeded
from core.config import get_settings

logger = logging.getLogger(__name__)


def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    orig = getattr(exc, "orig", None)
    message = str(orig if orig is not None else exc)
    logger.error(
        "storage_error",
        extra={"method": request.method, "path": request.url.path, "error": message},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "STORAGE_ERROR", "message": message}},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        seeded = ensure_demo_seeded()
        logger.info("startup_complete", extra={"app_env": settings.app_env, "demo_seeded": seeded})
        yield

    app = FastAPI(title="PracTrac API", version="1.0.0", lifespan=lifespan)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.include_router(router)
    app.include_router(practice_sessions_router)
    app.include_router(attendance_router)
    app.include_router(pages_router)

    static_dir = Path(settings.web_root) / "static"
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")
    else:
        logger.warning("static_dir_missing", extra={"static_dir": str(static_dir)})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_and_logging(request: Request, call_next: Callable) -> Response:
        header_name = settings.request_id_header_name or "X-Request-ID"
        request_id = (request.headers.get(header_name) or "").strip() or new_request_id()
        token = begin_request(request_id)
        started_ms = monotonic_ms()
        client_ip = getattr(request.client, "host", None)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "http_request_error",
                extra=access_log_fields(
                    method=request.method,
                    path=request.url.path,
                    status_code=500,
                    started_ms=started_ms,
                    client_ip=client_ip,
                ),
            )
            raise
        else:
            response.headers[header_name] = request_id
            logger.log(
                access_log_level(response.status_code),
                "http_request",
                extra=access_log_fields(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    started_ms=started_ms,
                    client_ip=client_ip,
                ),
            )
            return response
        finally:
            end_request(token)

    return app


app = create_app()
