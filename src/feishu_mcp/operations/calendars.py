"""Helpers for FeiShu calendars and events."""

from collections.abc import Mapping
from typing import Any

from .common import PageResult, RequestClient, build_page_result, compact, page_params, require

CALENDARS_PATH = "/open-apis/calendar/v4/calendars"


def serialize_calendar(calendar: Mapping[str, Any]) -> dict[str, Any]:
    return compact(
        {
            "id": calendar.get("calendar_id"),
            "summary": calendar.get("summary"),
            "description": calendar.get("description"),
            "permissions": calendar.get("permissions"),
            "type": calendar.get("type"),
            "role": calendar.get("role"),
            "is_deleted": calendar.get("is_deleted"),
        },
    )


def serialize_event(event: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten start/end times and keep the fields useful to an assistant."""
    start = event.get("start_time") or {}
    end = event.get("end_time") or {}
    location = event.get("location") or {}
    return compact(
        {
            "id": event.get("event_id"),
            "summary": event.get("summary"),
            "description": event.get("description"),
            "start_time": start.get("timestamp") or start.get("date"),
            "end_time": end.get("timestamp") or end.get("date"),
            "timezone": start.get("timezone"),
            "location": location.get("name"),
            "status": event.get("status"),
            "organizer_calendar_id": event.get("organizer_calendar_id"),
            "app_link": event.get("app_link"),
        },
    )


async def list_calendars(
    client: RequestClient,
    *,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List calendars the bot can see."""
    data = await client.request("GET", CALENDARS_PATH, page_params(page_size, page_token))
    return build_page_result(data, section_name="calendars", mapper=serialize_calendar, items_key="calendar_list")


async def list_events(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    calendar_id: str,
    start_time: str | None = None,
    end_time: str | None = None,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List events of a calendar, optionally bounded by Unix-second timestamps."""
    data = await client.request(
        "GET",
        f"{CALENDARS_PATH}/{require(calendar_id, 'calendar_id')}/events",
        page_params(page_size, page_token, start_time=start_time, end_time=end_time),
    )
    return build_page_result(data, section_name="events", mapper=serialize_event)


__all__ = ["CALENDARS_PATH", "list_calendars", "list_events", "serialize_calendar", "serialize_event"]
