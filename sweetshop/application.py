"""Application factory: builds engine, token service and routes from one Settings object."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from sweetshop.api.errors import register_exception_handlers
from sweetshop.api.v1 import router as api_router
from sweetshop.core.config import Settings
from sweetshop.core.database import build_engine, build_session_factory, create_tables
from sweetshop.core.security import TokenService

logger = logging.getLogger("sweetshop.access")


def create_app(settings: Settings) -> FastAPI:
    """Wire a FastAPI app for the given settings. No business logic here."""
    app = FastAPI(
        title="Sweet Shop API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = build_engine(settings)
    if settings.DB_AUTO_CREATE:
        create_tables(engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(settings)

    cors_origins = settings.CORS_ORIGINS or (["*"] if settings.APP_ENV == "dev" else [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_prefix = settings.API_PREFIX

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith(api_prefix):
            logger.info(
                "%s %s %s - %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - start) * 1000,
            )
        return response

    register_exception_handlers(app)
    app.include_router(api_router, prefix=api_prefix)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Sweet Shop API"}

    return app
