"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from backend.app.api.admin import router as admin_router
from backend.app.api.auth import router as auth_router
from backend.app.api.badges import router as badges_router
from backend.app.api.chat import router as chat_router
from backend.app.api.culture import router as culture_router
from backend.app.api.geocode import router as geocode_router
from backend.app.api.health import get_health
from backend.app.api.leaderboard import router as leaderboard_router
from backend.app.api.matches import router as matches_router
from backend.app.api.quests import router as quests_router
from backend.app.api.restaurants import router as restaurants_router
from backend.app.api.sites import router as sites_router
from backend.app.api.trips import router as trips_router
from backend.app.api.users import router as users_router
from backend.app.config import get_settings
from backend.app.db.session import get_session
from backend.app.errors import install_exception_handlers
from backend.app.security.middleware import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def configure_logging(level: str) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Kolkata Explorer API",
        description="Heritage sites, food, trip planning and traveller matching for Kolkata",
        version="0.1.0",
    )

    # Security middleware (before CORS)
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_exception_handlers(app)

    # Health check endpoint
    @app.get("/healthz")
    async def healthz(db: Session = Depends(get_session)) -> dict[str, Any]:
        """Health check endpoint."""
        return get_health(db).model_dump()

    # Include routers
    for router in (
        auth_router,
        users_router,
        sites_router,
        restaurants_router,
        badges_router,
        quests_router,
        leaderboard_router,
        matches_router,
        trips_router,
        culture_router,
        chat_router,
        geocode_router,
        admin_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    logger.info("Kolkata Explorer API configured (database=%s)", settings.database_url.split(":", 1)[0])
    return app


# Create app instance for uvicorn
app = create_app()
