"""DTOs for the shared tag vocabulary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TagCreate:
    """Draft for an explicitly created tag. Missing color is drawn from the palette."""

    name: str
    color: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class TagResult:
    """Persisted tag."""

    id: str
    name: str
    color: str
    icon: str | None
    created_at: datetime | None
