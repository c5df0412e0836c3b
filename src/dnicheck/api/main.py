from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dnicheck.api.routes import health, validate
from dnicheck.config import get_settings
from dnicheck.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    yield


def flatten_validation_errors(exc: RequestValidationError) -> dict[str, Any]:
    """Group validation errors into request-level and per-field messages."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for err in exc.errors():
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        loc = [part for part in err.get("loc", ()) if part != "body"]
        if err.get("type") == "json_invalid" or not loc or not isinstance(loc[0], str):
            form_errors.append(message)
            continue
        field_errors.setdefault(str(loc[0]), []).append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid request body",
            "errors": flatten_validation_errors(exc),
        },
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="dnicheck API",
        version="0.1.0",
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_origins],
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=True,
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.include_router(validate.router, prefix=settings.api_prefix, tags=["validation"])
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()
