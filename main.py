"""
KPI Board - Main Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kpiboard import __version__
from kpiboard.core.config import get_settings
from kpiboard.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    from kpiboard.api.deps import get_board

    settings = get_settings()
    logger.info(f"Starting KPI Board in {settings.ENVIRONMENT} mode...")

    # Bootstrap failure is fatal: the app does not start
    board = get_board()
    await board.start()

    yield

    logger.info("Shutting down KPI Board...")
    await board.shutdown()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="KPI Board",
        description="Departmental KPI and goal tracking with weighted scores",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from kpiboard.api import backup, config, departments, logs, overview, session, snapshots

    app.include_router(session.router, prefix="/api/session", tags=["session"])
    app.include_router(departments.router, prefix="/api/departments", tags=["departments"])
    app.include_router(overview.router, prefix="/api/overview", tags=["overview"])
    app.include_router(snapshots.router, prefix="/api/snapshots", tags=["snapshots"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])
    app.include_router(backup.router, prefix="/api/backup", tags=["backup"])
    app.include_router(logs.router, prefix="/api/logs", tags=["logs"])

    from kpiboard.api.deps import Board

    @app.get("/health")
    async def health_check(board: Board):
        """Health check endpoint."""
        return {"status": "healthy", "ready": board.persistence.is_ready}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_local,
    )
