"""Health check endpoints: liveness, and readiness via table probes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from taskboard.api.v1.dependencies import get_prober
from taskboard.core.config import get_settings
from taskboard.infrastructure.supabase import SchemaCapabilityProber
from taskboard.infrastructure.supabase.tables import TABLE_TAGS, TABLE_TASKS, TABLE_TODOS
from taskboard.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(backend=get_settings().database_backend)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "A required table is unreachable", "model": ReadinessResponse}},
)
async def readiness_check(
    prober: Annotated[SchemaCapabilityProber, Depends(get_prober)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 when every table answers a probe; 503 otherwise."""
    tables = {
        name: await prober.table_exists(name) for name in (TABLE_TASKS, TABLE_TODOS, TABLE_TAGS)
    }
    if all(tables.values()):
        return ReadinessResponse(tables=tables)
    return JSONResponse(
        status_code=503,
        content=ReadinessResponse(status="not_ready", tables=tables).model_dump(),
    )
