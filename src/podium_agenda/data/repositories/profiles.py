from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from postgrest.exceptions import APIError

from ...domain import StoreUnavailable
from ..directory import Profile, ProfileDirectory
from ..supabase import SupabaseGateway, SupabaseNotInitializedError


@dataclass(slots=True)
class ProfileRepository(ProfileDirectory):
    gateway: SupabaseGateway
    artists_table: str
    programmers_table: str

    async def _fetch(self, table_name: str, uid: str) -> Optional[Profile]:
        try:
            table = await self.gateway.table(table_name)
            response = await table.select("*").eq("id", uid).limit(1).execute()
        except (APIError, httpx.HTTPError, SupabaseNotInitializedError) as exc:
            raise StoreUnavailable(f"Profile lookup in {table_name} failed: {exc}") from exc
        rows = response.data or []
        return rows[0] if rows else None

    async def lookup_artist(self, uid: str) -> Optional[Profile]:
        return await self._fetch(self.artists_table, uid)

    async def lookup_programmer(self, uid: str) -> Optional[Profile]:
        return await self._fetch(self.programmers_table, uid)
