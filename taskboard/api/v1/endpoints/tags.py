"""Tag API: list the shared vocabulary and create tags explicitly."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.v1.dependencies import get_current_user, get_tag_repo
from taskboard.application.dtos.tag import TagCreate
from taskboard.application.dtos.user import UserIdentity
from taskboard.application.interfaces.repositories import ITagRepository
from taskboard.schemas.tag import TagCreateRequest, TagResponse

router = APIRouter()


@router.get("", response_model=list[TagResponse])
async def list_tags(
    repo: Annotated[ITagRepository, Depends(get_tag_repo)],
) -> list[TagResponse]:
    """All tags ordered by name."""
    return [TagResponse.model_validate(t) for t in await repo.list_all()]


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    body: TagCreateRequest,
    _: Annotated[UserIdentity, Depends(get_current_user)],
    repo: Annotated[ITagRepository, Depends(get_tag_repo)],
) -> TagResponse:
    """Create a tag; 409 when the (lowercased) name already exists."""
    tag = await repo.create(TagCreate(name=body.name, color=body.color, icon=body.icon))
    return TagResponse.model_validate(tag)
