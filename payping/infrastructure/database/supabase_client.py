from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from supabase import Client, create_client

from payping.core.config import Settings, get_settings


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None
    is_admin: bool = False


def _is_admin(settings: Settings, user_id: str, email: str | None, app_metadata: dict[str, Any]) -> bool:
    if app_metadata.get("role") == "admin":
        return True
    if user_id in settings.admin_user_ids:
        return True
    return bool(email) and email.lower() in settings.admin_emails


class SupabaseAuthAdapter:
    """Small wrapper to validate Supabase access tokens.

    When SUPABASE_DISABLED=1, any token ``t`` is accepted as user ``fake-t``.
    """

    def __init__(self) -> None:
        self.settings = get_settings()
        self.disabled = self.settings.supabase_disabled
        self._client: Client | None = None
        if not self.disabled and self.settings.supabase_url and self.settings.supabase_anon_key:
            self._client = create_client(self.settings.supabase_url, self.settings.supabase_anon_key)

    def validate_token(self, token: str) -> UserInfo:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled or not self._client:
            fake_id = f"fake-{token}"
            return UserInfo(id=fake_id, email=None, is_admin=_is_admin(self.settings, fake_id, None, {}))
        # Real validation via Supabase Auth API
        try:
            res = self._client.auth.get_user(token)
        except Exception as exc:  # pragma: no cover - network path
            raise ValueError(f"Invalid access token: {exc}") from exc
        user = res.user if res else None
        if not user:
            raise ValueError("Invalid access token")
        return UserInfo(
            id=user.id,
            email=user.email,
            is_admin=_is_admin(self.settings, user.id, user.email, user.app_metadata or {}),
        )


# Simple reusable singleton client getter for repositories
_CLIENT_SINGLETON: Client | None = None


def get_supabase_client() -> Client | None:
    """Service client for repositories; ownership is enforced by the use cases."""
    global _CLIENT_SINGLETON
    settings = get_settings()
    key = settings.supabase_service_key or settings.supabase_anon_key
    if settings.supabase_disabled or not settings.supabase_url or not key:
        return None
    if _CLIENT_SINGLETON is None:
        _CLIENT_SINGLETON = create_client(settings.supabase_url, key)
    return _CLIENT_SINGLETON
