from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from outage_admin.db import filters as _filters  # noqa: F401  (register SQLAlchemy filters)
from outage_admin.db.init_db import init_db
from outage_admin.logging_config import configure_app_logging
from outage_admin.routers import (
    admin,
    announcements,
    auth,
    dashboard,
    health,
    outage_requests,
    transformers,
    work_centers,
)
from outage_admin.security.config import load_security_config
from outage_admin.security.dependencies import enforce_security
from outage_admin.session_auth import SessionTokenCodec
from outage_admin.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_session_codec(settings: Settings) -> SessionTokenCodec:
    if not settings.session_secret:
        raise RuntimeError("OUTAGE_SESSION_SECRET is not set; refusing to start without a session signing key")
    return SessionTokenCodec(
        settings.session_secret,
        algorithm=settings.session_algorithm,
        ttl_minutes=settings.session_ttl_minutes,
    )


def create_app(*, init_database: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings = get_settings()
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        app.state.security_config = load_security_config(settings.resolved_security_config_path())
        logger.info("Loaded security config: %s", settings.resolved_security_config_path())

        app.state.session_codec = build_session_codec(settings)

        if init_database:
            init_db()
            logger.info("Database initialized (tables ensured + seed if needed)")

        yield

    # Global dependency: every route goes through the security config.
    app = FastAPI(title="Power Outage Admin", dependencies=[Depends(enforce_security)], lifespan=lifespan)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(work_centers.router)
    app.include_router(transformers.router)
    app.include_router(admin.router)
    app.include_router(outage_requests.router)
    app.include_router(dashboard.router)
    app.include_router(announcements.router)

    return app


app = create_app()
