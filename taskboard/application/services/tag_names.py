"""Tag name normalization shared by the todo and tag repositories."""

from collections.abc import Iterable


def normalize_tag_name(name: str) -> str:
    """Trim and lowercase a single tag name ('  Work ' -> 'work')."""
    return name.strip().lower()


def normalize_tag_names(names: Iterable[str] | None) -> list[str]:
    """Case-fold, trim, and de-duplicate tag names, keeping first-seen order.

    Empty names are dropped: ["Work", "work", " WORK ", ""] -> ["work"].
    """
    if not names:
        return []
    seen: set[str] = set()
    result: list[str] = []
    for raw in names:
        name = normalize_tag_name(raw)
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result
