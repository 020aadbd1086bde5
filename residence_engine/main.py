from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from residence_engine.api.deps import ServiceFailure, service_failure_handler
from residence_engine.api.v1.router import router as api_v1_router
from residence_engine.config.settings import settings
from residence_engine.core.middleware import register_middlewares
from residence_engine.db.init_db import init_db


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID, timing and application error handlers
    register_middlewares(app)
    app.add_exception_handler(ServiceFailure, service_failure_handler)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "version": settings.API_VERSION}

    # Schema bootstrap for development; production schemas come from migrations
    @app.on_event("startup")
    async def on_startup() -> None:
        if settings.AUTO_CREATE_TABLES and not settings.is_production():
            init_db()

    return app


app = create_app()
