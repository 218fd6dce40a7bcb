"""MCP tools for FeiShu calendars."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import calendars
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the calendar tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_calendars",
        description="Return the calendars visible to the bot.",
        annotations={"title": "List calendars", "readOnlyHint": True},
    )
    async def get_feishu_calendars(
        ctx: Context,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            calendars.list_calendars,
            log_message="Listing FeiShu calendars.",
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_calendar_events",
        description="Return events of a calendar; start_time and end_time are Unix timestamps in seconds.",
        annotations={"title": "List calendar events", "readOnlyHint": True},
    )
    async def get_feishu_calendar_events(  # noqa: PLR0913 (tool arguments mirror the endpoint)
        ctx: Context,
        calendar_id: str,
        start_time: str | None = None,
        end_time: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            calendars.list_events,
            log_message=f"Listing events of calendar {calendar_id}.",
            calendar_id=calendar_id,
            start_time=start_time,
            end_time=end_time,
            page_size=page_size,
            page_token=page_token,
        )


__all__ = ["register"]
