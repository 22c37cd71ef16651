"""
FastAPI main application
Rover Challenge Shop - team budgets, parts shop and judge scoring

Routers in rover_shop/api/:
- health.py: Health check
- config.py: Configuration and parts catalog
- team.py: Team login, cart, checkout, sell-back, submit
- admin.py: Staff gate, active teams, submissions, scoring, CSV export
- leaderboard.py: Leaderboard data

Routers reach the services through the AppContext built in create_app().
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rover_shop.config import Settings, load_settings
from rover_shop.context import AppContext
from rover_shop.storage.base import DocumentStore
from rover_shop.storage.fallback import build_store

# Import all API routers
from rover_shop.api import admin, health, leaderboard, team
from rover_shop.api import config as config_router


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Settings (default: loaded from config file)
        store: Document store (default: built from settings)
    """
    settings = settings or load_settings()
    context = AppContext(settings=settings, store=store or build_store(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"✅ Server started | Houses: {', '.join(settings.houses)} | Budget: {settings.starting_budget} KB")
        yield
        await context.aclose()
        logger.info("🛑 Server shutting down")

    app = FastAPI(
        title="Rover Challenge Shop",
        description="Team budgets, parts shop and judge scoring for the rover challenge",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.context = context

    # CORS middleware (allow all origins for classroom devices)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== INCLUDE ROUTERS ====================

    # Health check (GET /)
    app.include_router(health.router)

    # Config and catalog (GET /config, /catalog)
    app.include_router(config_router.router)

    # Team screens (POST /teams, /teams/{id}/cart, ...)
    app.include_router(team.router)

    # Staff endpoints (POST /staff/login, /admin/...)
    app.include_router(admin.staff_router)
    app.include_router(admin.router)

    # Leaderboard (GET /api/leaderboard-data)
    app.include_router(leaderboard.router)

    return app


app = create_app()


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
