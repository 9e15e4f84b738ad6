"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The Supabase endpoint and public API key are read once
at process start; their absence is a fatal startup condition.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskboard.core.constants import TODO_DEFAULT_PAGE_SIZE, TODO_MAX_PAGE_SIZE


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except the Supabase URL and
    anon key, which validate_backend requires when database_backend is
    'supabase'.
    """

    # App
    app_name: str = "taskboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: "supabase" (hosted PostgREST + GoTrue) or "memory" (in-process, dev/tests)
    database_backend: str = "supabase"
    supabase_url: str = ""
    supabase_anon_key: SecretStr = SecretStr("")
    request_timeout_seconds: float = 30.0

    # Todo paging
    todo_default_page_size: int = TODO_DEFAULT_PAGE_SIZE
    todo_max_page_size: int = TODO_MAX_PAGE_SIZE

    # CORS (the board UI runs in the browser)
    allowed_origins: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend(self) -> "Settings":
        """Validate database backend and its required values.

        - Supabase: SUPABASE_URL and SUPABASE_ANON_KEY required.
        - Memory: nothing required (data lives for the process lifetime).
        """
        if self.database_backend == "supabase":
            if not self.supabase_url:
                raise ValueError(
                    "SUPABASE_URL is required when database_backend is 'supabase'. "
                    "Set in environment or .env file."
                )
            if not self.supabase_anon_key.get_secret_value():
                raise ValueError(
                    "SUPABASE_ANON_KEY is required when database_backend is 'supabase'. "
                    "Copy it from Project Settings → API in the Supabase dashboard."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'supabase' or 'memory', got: {self.database_backend!r}"
            )
        if self.todo_max_page_size < 1:
            raise ValueError("TODO_MAX_PAGE_SIZE must be at least 1")
        if not 1 <= self.todo_default_page_size <= self.todo_max_page_size:
            raise ValueError(
                "TODO_DEFAULT_PAGE_SIZE must be between 1 and TODO_MAX_PAGE_SIZE"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
