"""Visibility rule shared by task and todo listings.

Visible when the viewer owns the row, or the row is public, or (no is_public
column) the viewer is any authenticated session.
"""

from __future__ import annotations

from taskboard.application.dtos.user import UserIdentity
from taskboard.infrastructure.supabase._query import Filter, QueryBuilder
from taskboard.infrastructure.supabase.tables import COL_IS_PUBLIC, COL_USER_ID


def apply_visibility(
    query: QueryBuilder, viewer: UserIdentity | None, has_visibility: bool
) -> bool:
    """Add the visibility filter to query.

    Returns False when nothing can be visible (anonymous viewer on a schema
    without the is_public column); the caller should skip the query.
    """
    if viewer is None:
        if not has_visibility:
            return False
        query.is_(COL_IS_PUBLIC, True)
        return True
    if has_visibility:
        query.any_of(
            Filter(COL_USER_ID, "eq", viewer.id),
            Filter(COL_IS_PUBLIC, "is", True),
        )
    return True
