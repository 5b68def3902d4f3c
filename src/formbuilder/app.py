from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from formbuilder.auth import get_auth_provider
from formbuilder.config import Settings
from formbuilder.errors import AppError
from formbuilder.routes.forms import router as forms_router
from formbuilder.routes.submissions import router as submissions_router
from formbuilder.routes.system import router as system_router
from formbuilder.storage import init_storage

logger = logging.getLogger(__name__)


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        message = "Route not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        {"success": False, "message": message},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": str(error.get("msg", "")),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        {"success": False, "message": "Validation failed", "errors": errors},
        status_code=400,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"success": False, "message": "Internal server error"}, status_code=500
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Storage backend: %s", app.state.settings.storage_backend)
    yield
    app.state.storage.close()
    logger.info("Storage closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    storage = init_storage(settings)
    auth = get_auth_provider(settings)

    app = FastAPI(
        title="Form Builder API",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "api/forms", "description": "REST API: forms"},
            {"name": "api/submissions", "description": "REST API: submissions"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings
    app.state.auth_provider = auth

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(system_router)
    app.include_router(forms_router)
    app.include_router(submissions_router)

    return app
