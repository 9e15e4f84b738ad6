"""Supabase-backed repositories (implement the application-layer Protocols)."""

from taskboard.infrastructure.supabase.repositories.tag_repo import SupabaseTagRepository
from taskboard.infrastructure.supabase.repositories.task_repo import SupabaseTaskRepository
from taskboard.infrastructure.supabase.repositories.todo_repo import SupabaseTodoRepository

__all__ = [
    "SupabaseTagRepository",
    "SupabaseTaskRepository",
    "SupabaseTodoRepository",
]
