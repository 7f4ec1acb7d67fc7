"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_planner import __version__
from studio_planner.config.settings import get_settings
from studio_planner.core.error_handlers import domain_error_handler
from studio_planner.core.exceptions import DomainError
from studio_planner.core.logging import configure_logging, get_logger
from studio_planner.core.metrics import set_app_info
from studio_planner.db.database import init_db
from studio_planner.middleware import RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()

    # Startup: Initialize database
    await init_db()
    set_app_info(__version__, "development" if settings.debug else "production")
    logger.info("application_started", app=settings.app_name, version=__version__)

    yield
    # Shutdown: Cleanup resources
    from studio_planner.integrations import cleanup_studio_ops_client
    await cleanup_studio_ops_client()

    try:
        from studio_planner.db.database import close_all_engines
        await close_all_engines()
    except Exception as e:
        logger.warning("engine_shutdown_failed", error=str(e))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Schedules studio session plans and keeps an immutable history of what was practiced",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)

    # Import and include routers
    from studio_planner.api.routes import (
        admin_router,
        allocations_router,
        analytics_router,
        executions_router,
        exercises_router,
        metrics_router,
        templates_router,
    )

    app.include_router(metrics_router, tags=["Monitoring"])
    app.include_router(exercises_router, prefix="/exercises", tags=["Exercises"])
    app.include_router(templates_router, prefix="/templates", tags=["Plan Templates"])
    app.include_router(allocations_router, prefix="/allocations", tags=["Allocations"])
    app.include_router(executions_router, prefix="/executions", tags=["Executions"])
    app.include_router(analytics_router, prefix="/analytics", tags=["Analytics"])
    app.include_router(admin_router, prefix="/admin", tags=["Admin"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("studio_planner.main:app", host="0.0.0.0", port=8000, reload=True)
