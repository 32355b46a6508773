from __future__ import annotations

from fastapi import FastAPI

from nova.api.error_handlers import install_error_handlers
from nova.api.routes_admin import router as admin_router
from nova.api.routes_attachments import router as attachments_router
from nova.api.routes_personas import router as personas_router
from nova.api.routes_sessions import router as sessions_router
from nova.api.routes_videos import router as videos_router
from nova.config.loader import load_config
from nova.config.log_setup import setup_logging


def create_app() -> FastAPI:
    setup_logging(load_config().logging.level)
    app = FastAPI(
        title="Nova AI",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    install_error_handlers(app)
    app.include_router(personas_router)
    app.include_router(sessions_router)
    app.include_router(attachments_router)
    app.include_router(videos_router)
    app.include_router(admin_router)
    return app


app = create_app()
