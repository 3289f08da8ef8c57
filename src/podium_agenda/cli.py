from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional

from .agenda import AgendaController, AgendaView
from .agenda.state import SetRegionFilter, ToggleTypeFilter
from .bootstrap import configure_logging
from .domain import ClusterEvent, EventType, Region
from .services import ServiceContext
from .services.formatting import format_event_date, format_short_date

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Podium Agenda command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing the calendar tools.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    mcp_parser = subparsers.add_parser("mcp", help="Start the FastMCP server.")
    mcp_parser.add_argument("--host", default="127.0.0.1")
    mcp_parser.add_argument("--port", type=int, default=8765)

    agenda_parser = subparsers.add_parser("agenda", help="Print the agenda for one day.")
    agenda_parser.add_argument("--date", help="Day to show (YYYY-MM-DD); defaults to today.")
    agenda_parser.add_argument(
        "--type",
        dest="types",
        action="append",
        choices=[item.value for item in EventType],
        help="Only show this event type; repeat for several.",
    )
    agenda_parser.add_argument("--region", choices=[item.value for item in Region], default=Region.ALL.value)

    return parser


def render_text(view: AgendaView, *, locale: str) -> str:
    lines: list[str] = []
    cells: list[str] = []
    for day in view.date_tape:
        cell = f"{format_short_date(day.day, locale)}:{day.count}"
        cells.append(f"[{cell}]" if day.is_selected else cell)
    lines.append("  ".join(cells))
    lines.append("")
    lines.append(format_event_date(view.selected_date, locale))
    if view.is_empty:
        lines.append("  No events on this date.")
    for event in view.events:
        time_label = getattr(event, "event_time", None) or (event.date.strftime("%H:%M") if event.date else "")
        name = getattr(event, "event_name", None) or getattr(event, "artist_name", None) or ""
        lines.append(
            f"  {time_label:>5}  {event.type.label:<12} {name} @ {event.venue}, {event.city}"
            f"  ({event.attendee_count} going)"
        )
        if isinstance(event, ClusterEvent) and event.has_lineup:
            lines.append("         with " + ", ".join(performer.artist_name for performer in event.participants))
    return "\n".join(lines)


async def _print_agenda(day: Optional[str], types: List[str], region: str) -> None:
    context = ServiceContext()
    controller = AgendaController.from_context(context)
    locale = context.settings.ui.locale
    await controller.init()
    for event_type in types:
        controller.dispatch(ToggleTypeFilter(EventType(event_type)))
    controller.dispatch(SetRegionFilter(Region(region)))
    controller.subscribe(lambda view: print(render_text(view, locale=locale)))
    if day:
        await controller.select_date(day)
    else:
        await controller.render()
    controller.cleanup()


def main() -> None:
    configure_logging()
    logger.info("Podium Agenda CLI starting")
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "mcp":
        from .services.mcp import run_mcp_server

        run_mcp_server(host=args.host, port=args.port)
    elif args.command == "agenda":
        asyncio.run(_print_agenda(args.date, args.types or [], args.region))
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
