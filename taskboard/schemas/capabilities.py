"""Schema capability API schemas."""

from pydantic import BaseModel, ConfigDict


class TableCapabilities(BaseModel):
    """Optional columns detected on one table."""

    model_config = ConfigDict(from_attributes=True)

    visibility: bool
    tags: bool
    soft_delete: bool


class CapabilitiesResponse(BaseModel):
    """Response for GET /capabilities."""

    tasks: TableCapabilities
    todos: TableCapabilities
