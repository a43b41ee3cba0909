"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from overtime_sync.api import api_router
from overtime_sync.core import messages
from overtime_sync.core.config import get_settings
from overtime_sync.core.exceptions import OvertimeError
from overtime_sync.db.session import init_models
from overtime_sync.middleware.preflight import PreflightMiddleware
from overtime_sync.services.scheduler import schedule_purge_job, start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_models()
    if settings.scheduler_enabled:
        start_scheduler()
        schedule_purge_job()
    try:
        yield
    finally:
        stop_scheduler()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Added before CORS so that CORSMiddleware wraps it and handles real preflights first
app.add_middleware(PreflightMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(OvertimeError)
async def overtime_error_handler(_: Request, exc: OvertimeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if request.url.path.startswith("/api/data"):
        message = messages.DATA_INVALID
    else:
        message = messages.CREDENTIALS_REQUIRED
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = messages.NOT_FOUND if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": messages.INTERNAL})


app.include_router(api_router)
