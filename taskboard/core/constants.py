"""Core constants: paging limits and tag defaults.

Single source of truth for literal values shared by repositories and the API.
"""

# Todo paging
TODO_DEFAULT_PAGE_SIZE = 10
TODO_MAX_PAGE_SIZE = 100

# Tag palette used when a tag is created without an explicit color
TAG_COLORS: tuple[str, ...] = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#6b7280",
    "#ec4899",
    "#06b6d4",
)
DEFAULT_TAG_ICON = "🏷️"
