"""Schema capability endpoint: which optional columns this database has."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.v1.dependencies import get_prober
from taskboard.infrastructure.supabase import SchemaCapabilityProber
from taskboard.infrastructure.supabase.tables import TABLE_TASKS, TABLE_TODOS
from taskboard.schemas.capabilities import CapabilitiesResponse, TableCapabilities

router = APIRouter()


@router.get("", response_model=CapabilitiesResponse)
async def get_capabilities(
    prober: Annotated[SchemaCapabilityProber, Depends(get_prober)],
) -> CapabilitiesResponse:
    tasks, todos = await asyncio.gather(
        prober.capabilities(TABLE_TASKS), prober.capabilities(TABLE_TODOS)
    )
    return CapabilitiesResponse(
        tasks=TableCapabilities.model_validate(tasks),
        todos=TableCapabilities.model_validate(todos),
    )
