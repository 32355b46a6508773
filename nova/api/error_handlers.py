from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from nova.models.errors import AttachmentTooLarge, NovaError


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValueError)
    async def _value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(AttachmentTooLarge)
    async def _too_large_handler(_request: Request, exc: AttachmentTooLarge) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc), "filename": exc.filename, "limit_bytes": exc.limit_bytes},
        )

    @app.exception_handler(NovaError)
    async def _nova_error_handler(_request: Request, exc: NovaError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})
