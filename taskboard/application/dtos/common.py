"""DTOs shared by several repositories."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of results plus the exact total across all pages."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """ceil(total / page_size); 0 when there are no results."""
        return math.ceil(self.total / self.page_size) if self.page_size else 0


@dataclass(frozen=True)
class SchemaCapabilities:
    """Optional columns detected on a table for the current session.

    Derived by probing, never persisted. Flags not probed for a table stay False.
    """

    visibility: bool = False
    tags: bool = False
    soft_delete: bool = False
