"""Task API: thin routes delegating to the task repository.

Listing is open to anonymous viewers (public tasks only); every mutation
needs a session and only touches the caller's own tasks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from taskboard.api.v1.dependencies import get_task_repo
from taskboard.application.dtos.task import TaskCreate
from taskboard.application.interfaces.repositories import ITaskRepository
from taskboard.domain.exceptions import NotFoundOrForbiddenException
from taskboard.schemas.task import (
    TaskCreateRequest,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)

router = APIRouter()


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> list[TaskResponse]:
    """List visible, non-deleted tasks ordered by (status, position)."""
    tasks = await repo.list_tasks()
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    body: TaskCreateRequest,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> TaskResponse:
    """Create a private task owned by the caller."""
    task = await repo.create(TaskCreate(**body.model_dump()))
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> TaskResponse:
    """Return one visible task."""
    task = await repo.get_by_id(task_id)
    if task is None:
        raise NotFoundOrForbiddenException("task", task_id)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> TaskResponse:
    """Apply the fields sent to one of the caller's tasks."""
    task = await repo.update(task_id, body.model_dump(exclude_unset=True))
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def set_task_status(
    task_id: str,
    body: TaskStatusUpdate,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> TaskResponse:
    """Move a task to another column, optionally at a position."""
    task = await repo.set_status(task_id, body.status, body.position)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> Response:
    """Soft delete (repeatable; the first deletion time is kept)."""
    await repo.soft_delete(task_id)
    return Response(status_code=204)


@router.post("/{task_id}/restore", response_model=TaskResponse)
async def restore_task(
    task_id: str,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> TaskResponse:
    """Undo a soft delete."""
    task = await repo.restore(task_id)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}/permanent", status_code=204)
async def permanently_delete_task(
    task_id: str,
    repo: Annotated[ITaskRepository, Depends(get_task_repo)],
) -> Response:
    """Remove the task row for good."""
    await repo.permanently_delete(task_id)
    return Response(status_code=204)
