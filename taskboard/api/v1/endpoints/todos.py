"""Todo API: paged listing with search and tag filters, plus owner-only mutations."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from taskboard.api.v1.dependencies import get_todo_repo
from taskboard.application.dtos.todo import TodoCreate, TodoFilters
from taskboard.application.interfaces.repositories import ITodoRepository
from taskboard.core.config import Settings, get_settings
from taskboard.schemas.todo import (
    CanModifyResponse,
    TodoCompletedUpdate,
    TodoCreateRequest,
    TodoPageResponse,
    TodoResponse,
    TodoStatsResponse,
    TodoUpdate,
)

router = APIRouter()


@router.get("", response_model=TodoPageResponse)
async def list_todos(
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
    settings: Annotated[Settings, Depends(get_settings)],
    search: str | None = None,
    completed: bool | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=1)] = None,
    only_mine: bool = False,
    tags: Annotated[list[str] | None, Query()] = None,
) -> TodoPageResponse:
    """List visible todos, newest first.

    page_size defaults to TODO_DEFAULT_PAGE_SIZE; values above the maximum are capped.
    """
    result = await repo.list_todos(
        TodoFilters(
            search=search,
            completed=completed,
            page=page,
            page_size=page_size or settings.todo_default_page_size,
            only_mine=only_mine,
            tag_names=tuple(tags or ()),
        )
    )
    return TodoPageResponse.model_validate(result)


@router.post("", response_model=TodoResponse, status_code=201)
async def create_todo(
    body: TodoCreateRequest,
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> TodoResponse:
    """Create a todo owned by the caller; unknown tags are created first."""
    todo = await repo.create(
        TodoCreate(
            title=body.title,
            description=body.description,
            is_public=body.is_public,
            tags=tuple(body.tags),
        )
    )
    return TodoResponse.model_validate(todo)


@router.get("/stats", response_model=TodoStatsResponse)
async def todo_stats(
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> TodoStatsResponse:
    """Total, completed and pending counts over the caller's todos."""
    return TodoStatsResponse.model_validate(await repo.stats())


@router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    body: TodoUpdate,
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> TodoResponse:
    todo = await repo.update(todo_id, body.model_dump(exclude_unset=True))
    return TodoResponse.model_validate(todo)


@router.patch("/{todo_id}/completed", response_model=TodoResponse)
async def set_todo_completed(
    todo_id: str,
    body: TodoCompletedUpdate,
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> TodoResponse:
    todo = await repo.toggle_completed(todo_id, body.completed)
    return TodoResponse.model_validate(todo)


@router.delete("/{todo_id}", status_code=204)
async def delete_todo(
    todo_id: str,
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> Response:
    await repo.delete(todo_id)
    return Response(status_code=204)


@router.get("/{todo_id}/can-modify", response_model=CanModifyResponse)
async def can_modify_todo(
    todo_id: str,
    repo: Annotated[ITodoRepository, Depends(get_todo_repo)],
) -> CanModifyResponse:
    """Whether the caller may edit or delete this todo (false on any doubt)."""
    return CanModifyResponse(can_modify=await repo.can_modify(todo_id))
