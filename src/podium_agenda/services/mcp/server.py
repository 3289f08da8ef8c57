from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastmcp import FastMCP

from ...api import ApiFunction, get_api_functions

INSTRUCTIONS = (
    "Podium Agenda MCP server exposes the event calendar of artists and programmers. "
    "Use the tools to list and add gigs, check an artist's availability on a day, "
    "count events per day and toggle 'going too' attendance. Dates are YYYY-MM-DD "
    "in the agenda's local time zone."
)

logger = logging.getLogger(__name__)


def _annotations(api_function: ApiFunction) -> dict:
    read_only = "read" in api_function.tags
    return {
        "title": api_function.name.replace("_", " ").capitalize(),
        "readOnlyHint": read_only,
        "idempotentHint": read_only,
    }


def build_mcp_server(categories: Optional[Iterable[str]] = None) -> FastMCP:
    """Expose registered API functions as MCP tools, optionally limited to ``categories``."""

    wanted = set(categories) if categories is not None else None
    server = FastMCP(name="podium-agenda", instructions=INSTRUCTIONS)
    for api_function in get_api_functions():
        if wanted is not None and api_function.category not in wanted:
            continue
        logger.debug("Registering MCP tool: %s", api_function.name)
        server.tool(
            api_function.func,
            name=api_function.name,
            description=api_function.description,
            tags={api_function.category, *api_function.tags},
            annotations=_annotations(api_function),
        )
    return server


def run_mcp_server(host: str = "127.0.0.1", port: int = 8765) -> None:
    import asyncio

    server = build_mcp_server()
    logger.info("Serving Podium Agenda MCP on %s:%d", host, port)
    asyncio.run(server.run_streamable_http_async(host=host, port=port))
