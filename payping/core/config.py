from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError


def _flag(name: str) -> bool:
    return os.getenv(name, "0") == "1"


def _csv(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    env: Literal["development", "staging", "production"] = "development"
    log_level: str | None = None

    supabase_disabled: bool = False
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_key: str | None = None

    use_local_db: bool = False
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "payping"
    postgres_user: str = "payping"
    postgres_password: str = "payping_dev_password"

    admin_emails: list[str] = Field(default_factory=list)
    admin_user_ids: list[str] = Field(default_factory=list)

    app_timezone: str = "UTC"
    # Python weekday numbering: Monday == 0, Sunday == 6
    week_starts_on: int = Field(6, ge=0, le=6)

    @property
    def is_debug(self) -> bool:
        return self.env == "development"


def _build_settings() -> Settings:
    # Load .env file once on first settings build (for local development)
    load_dotenv()

    try:
        return Settings(
            env=os.getenv("ENV", "development"),
            log_level=os.getenv("LOG_LEVEL"),
            supabase_disabled=_flag("SUPABASE_DISABLED"),
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
            supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY"),
            use_local_db=_flag("USE_LOCAL_DB"),
            postgres_host=os.getenv("POSTGRES_HOST", "localhost"),
            postgres_port=os.getenv("POSTGRES_PORT", "5432"),
            postgres_db=os.getenv("POSTGRES_DB", "payping"),
            postgres_user=os.getenv("POSTGRES_USER", "payping"),
            postgres_password=os.getenv("POSTGRES_PASSWORD", "payping_dev_password"),
            admin_emails=[email.lower() for email in _csv("ADMIN_EMAILS")],
            admin_user_ids=_csv("ADMIN_USER_IDS"),
            app_timezone=os.getenv("APP_TIMEZONE", "UTC"),
            week_starts_on=os.getenv("WEEK_STARTS_ON", "6"),
        )
    except ValidationError as exc:  # pragma: no cover
        raise RuntimeError(f"Invalid settings: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Reads environment variables once and validates them with Pydantic.
    Call ``get_settings.cache_clear()`` after changing the environment.
    """

    return _build_settings()
