"""Todo API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TodoCreateRequest(BaseModel):
    """Request body for creating a todo. Tags are normalized (trimmed, lowercased)."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    is_public: bool = True
    tags: list[str] = Field(default_factory=list)


class TodoUpdate(BaseModel):
    """Request body for partially updating a todo."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    completed: bool | None = None
    is_public: bool | None = None
    tags: list[str] | None = None


class TodoCompletedUpdate(BaseModel):
    """Request body for PATCH /todos/{id}/completed."""

    completed: bool


class TodoResponse(BaseModel):
    """Todo in list/get responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None
    title: str
    description: str | None
    completed: bool
    is_public: bool | None
    tags: list[str]
    created_at: datetime | None
    updated_at: datetime | None


class TodoPageResponse(BaseModel):
    """One page of todos with the exact total."""

    model_config = ConfigDict(from_attributes=True)

    items: list[TodoResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class TodoStatsResponse(BaseModel):
    """Completion counts over the caller's own todos."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int

    @computed_field
    @property
    def pending(self) -> int:
        return self.total - self.completed


class CanModifyResponse(BaseModel):
    """Response for GET /todos/{id}/can-modify."""

    can_modify: bool
