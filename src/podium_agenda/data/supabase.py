from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from supabase import AsyncClient, acreate_client

from ..config.settings import SupabaseSettings
from ..domain import CurrentUser, UserRole


class SupabaseNotInitializedError(RuntimeError):
    """Raised when accessing the Supabase client before initialization."""


class SupabaseSessionMissingError(RuntimeError):
    """Raised when a session-specific action is attempted without a session."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the async Supabase client with session awareness."""

    settings: SupabaseSettings
    _client: Optional[AsyncClient] = None
    _session: Optional[Any] = None

    async def ensure_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise SupabaseNotInitializedError(f"Supabase settings are incomplete: {missing}.")
        self._client = await acreate_client(self.settings.url, self.settings.anon_key)
        return self._client

    async def table(self, name: str):
        client = await self.ensure_client()
        return client.table(name)

    def set_session(self, session: Any) -> None:
        self._session = session

    def clear_session(self) -> None:
        self._session = None

    def session(self) -> Any:
        if self._session is None:
            raise SupabaseSessionMissingError("Supabase session is not available.")
        return self._session

    def current_user_id(self) -> str:
        session = self.session()
        user = getattr(session, "user", None)
        identifier = getattr(user, "id", None)
        if not identifier:
            raise SupabaseSessionMissingError("Supabase session has no user id.")
        return identifier

    def current_user(self) -> Optional[CurrentUser]:
        """The signed-in user, or ``None`` without a session."""

        if self._session is None:
            return None
        uid = self.current_user_id()
        metadata = getattr(getattr(self._session, "user", None), "user_metadata", None) or {}
        try:
            role = UserRole(metadata.get("role") or UserRole.USER.value)
        except ValueError:
            role = UserRole.USER
        return CurrentUser(uid=uid, role=role)
