"""Pure application helpers (no I/O)."""

from taskboard.application.services.tag_names import normalize_tag_name, normalize_tag_names

__all__ = ["normalize_tag_name", "normalize_tag_names"]
