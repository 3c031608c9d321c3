"""FastAPI application for the Staff Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.staff_service.routers import (
    roster_router,
    sections_router,
    tariffs_router,
)


def create_app() -> FastAPI:
    """Create and configure the Staff Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="ClubStaff Staff Service",
        version="0.1.0",
        description="Staff roster, tariff scope and section management for club staff.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "staff"}

    app.include_router(roster_router)
    app.include_router(tariffs_router)
    app.include_router(sections_router)

    return app


app = create_app()
