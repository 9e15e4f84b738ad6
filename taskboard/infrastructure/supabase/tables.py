"""Supabase table and column names (schema-in-code).

The schema itself lives in the hosted project; these constants keep table
and column names consistent across repositories and act as the single
source of truth for what the code expects to find.

Optional columns may be missing while the remote schema is mid-migration;
the capability prober checks OPTIONAL_COLUMNS before repositories use them.
"""

TABLE_TASKS = "tasks"
TABLE_TODOS = "todos"
TABLE_TAGS = "todo_tags"

# Shared columns
COL_ID = "id"
COL_USER_ID = "user_id"
COL_TITLE = "title"
COL_DESCRIPTION = "description"
COL_CREATED_AT = "created_at"
COL_UPDATED_AT = "updated_at"

# Optional columns (probed at runtime)
COL_IS_PUBLIC = "is_public"
COL_TAGS = "tags"
COL_DELETED_AT = "deleted_at"

# Task columns
COL_STATUS = "status"
COL_PRIORITY = "priority"
COL_DUE_DATE = "due_date"
COL_ASSIGNEE = "assignee"
COL_POSITION = "position"
# Legacy boolean soft-delete flag; never written, stripped from updates
COL_IS_DELETED = "is_deleted"

# Todo columns
COL_COMPLETED = "completed"

# Tag columns
COL_NAME = "name"
COL_COLOR = "color"
COL_ICON = "icon"

OPTIONAL_COLUMNS: dict[str, tuple[str, ...]] = {
    TABLE_TASKS: (COL_IS_PUBLIC, COL_DELETED_AT),
    TABLE_TODOS: (COL_IS_PUBLIC, COL_TAGS),
}

# Postgres error codes surfaced by PostgREST
PG_UNDEFINED_TABLE = "42P01"
PG_UNDEFINED_COLUMN = "42703"
PG_UNIQUE_VIOLATION = "23505"
