"""Task API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.domain.enums import TaskPriority, TaskStatus


class TaskCreateRequest(BaseModel):
    """Request body for creating a task. New tasks are private to their creator."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assignee: str | None = Field(default=None, max_length=255)
    position: int = Field(default=0, ge=0)


class TaskUpdate(BaseModel):
    """Request body for partially updating a task. Only fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    assignee: str | None = Field(default=None, max_length=255)
    position: int | None = Field(default=None, ge=0)
    is_public: bool | None = None


class TaskStatusUpdate(BaseModel):
    """Request body for PATCH /tasks/{id}/status (move to another column)."""

    status: TaskStatus
    position: int | None = Field(default=None, ge=0)


class TaskResponse(BaseModel):
    """Task in list/get responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    assignee: str | None
    position: int
    is_public: bool
    created_at: datetime | None
    updated_at: datetime | None
    deleted_at: datetime | None = None
