from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Sequence

import httpx
from postgrest.exceptions import APIError

from ...domain import NotFound, StoreUnavailable
from ..store import SERVER_TIMESTAMP, Document, EventStore, FieldFilter
from ..supabase import SupabaseGateway, SupabaseNotInitializedError

logger = logging.getLogger(__name__)

_OPERATORS = {"==": "eq", ">=": "gte", "<=": "lte", ">": "gt", "<": "lt"}


@asynccontextmanager
async def _backend_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except (APIError, httpx.HTTPError, SupabaseNotInitializedError) as exc:
        logger.error("Supabase %s failed: %s", action, exc)
        raise StoreUnavailable(f"Supabase {action} failed: {exc}") from exc


def _strip_sentinels(fields: Document) -> Document:
    # created_at/updated_at come from column defaults and the moddatetime trigger.
    return {key: value for key, value in fields.items() if value is not SERVER_TIMESTAMP and key != "id"}


@dataclass(slots=True)
class EventRepository(EventStore):
    """``EventStore`` over a Supabase table; see ``sql/events.sql`` for the schema."""

    gateway: SupabaseGateway
    table_name: str

    async def create(self, document: Document) -> str:
        async with _backend_errors("insert"):
            table = await self.gateway.table(self.table_name)
            response = await table.insert(_strip_sentinels(document)).execute()
        rows = response.data or []
        if not rows:
            raise StoreUnavailable("Supabase insert returned no row.")
        return str(rows[0]["id"])

    async def read(self, doc_id: str) -> Optional[Document]:
        async with _backend_errors("select"):
            table = await self.gateway.table(self.table_name)
            response = await table.select("*").eq("id", doc_id).limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    async def update(self, doc_id: str, fields: Document) -> None:
        async with _backend_errors("update"):
            table = await self.gateway.table(self.table_name)
            response = await table.update(_strip_sentinels(fields)).eq("id", doc_id).execute()
        if not response.data:
            raise NotFound(doc_id)

    async def delete(self, doc_id: str) -> bool:
        async with _backend_errors("delete"):
            table = await self.gateway.table(self.table_name)
            response = await table.delete().eq("id", doc_id).execute()
        return bool(response.data)

    async def query(
        self,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        async with _backend_errors("query"):
            table = await self.gateway.table(self.table_name)
            request = table.select("*")
            for item in filters:
                request = getattr(request, _OPERATORS[item.op])(item.field, item.value)
            if order_by:
                request = request.not_.is_(order_by, "null").order(order_by, desc=descending)
            if limit is not None:
                request = request.limit(limit)
            response = await request.execute()
        return list(response.data or [])

    async def array_union(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        return await self._array_rpc("events_array_union", doc_id, field, value, count_field)

    async def array_remove(
        self,
        doc_id: str,
        field: str,
        value: str,
        *,
        count_field: Optional[str] = None,
    ) -> Document:
        return await self._array_rpc("events_array_remove", doc_id, field, value, count_field)

    async def _array_rpc(
        self,
        function: str,
        doc_id: str,
        field: str,
        value: str,
        count_field: Optional[str],
    ) -> Document:
        params = {"doc_id": doc_id, "field_name": field, "item": value, "count_field": count_field}
        async with _backend_errors(function):
            client = await self.gateway.ensure_client()
            response = await client.rpc(function, params).execute()
        rows = response.data or []
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            raise NotFound(doc_id)
        return rows[0]
