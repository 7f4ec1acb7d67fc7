from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy import text
from starlette.requests import Request

from studio_planner.api.routes.dependencies import get_studio_ops
from studio_planner.core.logging import get_logger
from studio_planner.core.metrics import get_metrics
from studio_planner.db.database import engine
from studio_planner.integrations import StudioOpsClient


logger = get_logger(__name__)
router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics(request: Request):
    try:
        metrics_data = get_metrics()
        return Response(
            content=metrics_data,
            media_type="text/plain; version=0.0.4; charset=utf-8"
        )
    except Exception as e:
        logger.error("metrics_generation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to generate metrics")


@router.get("/health", include_in_schema=False)
async def health_check(request: Request):
    return {"status": "healthy"}


@router.get("/health/db", include_in_schema=False)
async def database_health_check(request: Request):
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}


@router.get("/health/studio-ops", include_in_schema=False)
async def studio_ops_health_check(client: StudioOpsClient = Depends(get_studio_ops)):
    if await client.health_check():
        return {"status": "healthy", "studio_ops": "reachable"}
    return {"status": "unhealthy", "studio_ops": "unreachable", "base_url": client.base_url}
