import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from starlette.routing import Route

import linkpage
from linkpage.adapters.sqlite.migrator import SQLiteMigrator
from linkpage.api.deps import get_settings
from linkpage.app_shell.config import validate_ops_rules, validate_route_reservations
from linkpage.domain.routes import HEALTH_PATH
from linkpage.rules.loader import load_rules

logger = logging.getLogger(__name__)


def mounted_paths(application: FastAPI) -> list[str]:
    """Every path the app serves, in mount order.

    Routes of included routers are read from the routers themselves, since
    newer FastAPI releases no longer flatten them into ``app.routes``.
    """
    candidates = list(application.routes)
    for router in INCLUDED_ROUTERS:
        candidates.extend(router.routes)

    paths: list[str] = []
    for route in candidates:
        if isinstance(route, Route) and route.path not in paths:
            paths.append(route.path)
    return paths


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        validate_route_reservations(mounted_paths(app))
        SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception:
        logger.critical("Startup validation failed", exc_info=True)
        sys.exit(1)

    yield


app = FastAPI(
    title="Link Page",
    version=linkpage.__version__,
    lifespan=lifespan,
    # Kept under /api so the docs never claim a page slug.
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    swagger_ui_oauth2_redirect_url="/api/docs/oauth2-redirect",
    redoc_url=None,
)


@app.get(HEALTH_PATH)
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "linkpage"}


# --- Routers ---
from linkpage.api.routes import public_pages, redirects, revalidate  # noqa: E402

INCLUDED_ROUTERS = (revalidate.router, redirects.router, public_pages.router)

app.include_router(revalidate.router, tags=["Revalidation"])
app.include_router(redirects.router, tags=["Redirects"])
# Catch-all /{slug}: must stay last.
app.include_router(public_pages.router, tags=["Public"])


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
