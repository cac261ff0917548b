"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster_balancer.config import settings
from roster_balancer.api.routes.teams import router as teams_router
from roster_balancer.api.routes.tournament import router as tournament_router
from roster_balancer.services.tournament_engine import TournamentEngine

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    if not hasattr(app.state, "tournament_engine"):
        app.state.tournament_engine = TournamentEngine(
            min_skill=settings.min_skill,
            max_skill=settings.max_skill,
        )
    yield


app = FastAPI(
    title="Roster Balancer",
    description="Balanced team generation and pairwise skill ranking",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "roster-balancer"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Roster Balancer API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(teams_router)
app.include_router(tournament_router)


def run() -> None:
    """Serve the API with uvicorn using configured host and port."""
    import uvicorn

    uvicorn.run(
        "roster_balancer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
