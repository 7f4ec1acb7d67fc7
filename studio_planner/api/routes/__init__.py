"""API routes module."""
from studio_planner.api.routes.admin import router as admin_router
from studio_planner.api.routes.allocations import router as allocations_router
from studio_planner.api.routes.analytics import router as analytics_router
from studio_planner.api.routes.executions import router as executions_router
from studio_planner.api.routes.exercises import router as exercises_router
from studio_planner.api.routes.metrics import router as metrics_router
from studio_planner.api.routes.templates import router as templates_router

__all__ = [
    "admin_router",
    "allocations_router",
    "analytics_router",
    "executions_router",
    "exercises_router",
    "metrics_router",
    "templates_router",
]
