"""
FastAPI application entry point.
"""
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router, health_router, ws_router
from .config.database import lifespan
from .config.settings import get_settings
from .core.errors import add_exception_handlers
from .core.rate_limit import api_rate_limiter


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.api_prefix, dependencies=[Depends(api_rate_limiter)])
    app.include_router(ws_router)

    return app


app = create_app()
