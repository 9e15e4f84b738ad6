"""Tag API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreateRequest(BaseModel):
    """Request body for creating a tag. Color defaults to a palette pick."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    icon: str | None = Field(default=None, max_length=16)


class TagResponse(BaseModel):
    """Tag in list/get responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    icon: str | None
    created_at: datetime | None
