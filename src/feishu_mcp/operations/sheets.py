"""Helpers for FeiShu multi-dimensional sheets (bitable apps)."""

from collections.abc import Mapping, Sequence
from typing import Any

from .common import PageResult, RequestClient, UserIdType, build_page_result, compact, page_params, require

BITABLE_PATH = "/open-apis/bitable/v1/apps"


def _app_path(app_token: str) -> str:
    return f"{BITABLE_PATH}/{require(app_token, 'app_token')}"


def _table_path(app_token: str, table_id: str) -> str:
    return f"{_app_path(app_token)}/tables/{require(table_id, 'table_id')}"


def serialize_table(table: Mapping[str, Any]) -> dict[str, Any]:
    return compact({"id": table.get("table_id"), "name": table.get("name"), "revision": table.get("revision")})


def serialize_view(view: Mapping[str, Any]) -> dict[str, Any]:
    return compact({"id": view.get("view_id"), "name": view.get("view_name"), "type": view.get("view_type")})


def serialize_record(record: Mapping[str, Any]) -> dict[str, Any]:
    return compact(
        {
            "id": record.get("record_id") or record.get("id"),
            "fields": record.get("fields") or {},
            "created_time": record.get("created_time"),
            "last_modified_time": record.get("last_modified_time"),
        },
    )


async def get_app(client: RequestClient, *, app_token: str) -> dict[str, Any]:
    """Return metadata of a bitable app."""
    data = await client.request("GET", _app_path(app_token))
    app = (data or {}).get("app") or {}
    return compact(
        {
            "app_token": app.get("app_token", app_token),
            "name": app.get("name"),
            "revision": app.get("revision"),
            "is_advanced": app.get("is_advanced"),
            "time_zone": app.get("time_zone"),
        },
    )


async def list_tables(
    client: RequestClient,
    *,
    app_token: str,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    data = await client.request("GET", f"{_app_path(app_token)}/tables", page_params(page_size, page_token))
    return build_page_result(data, section_name="tables", mapper=serialize_table)


async def list_views(
    client: RequestClient,
    *,
    app_token: str,
    table_id: str,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    data = await client.request(
        "GET",
        f"{_table_path(app_token, table_id)}/views",
        page_params(page_size, page_token),
    )
    return build_page_result(data, section_name="views", mapper=serialize_view)


async def list_records(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    app_token: str,
    table_id: str,
    view_id: str | None = None,
    filter_formula: str | None = None,
    sort: str | None = None,
    field_names: Sequence[str] | None = None,
    page_size: int | None = None,
    page_token: str | None = None,
    user_id_type: UserIdType | None = None,
) -> PageResult:
    """List the records of a table, optionally filtered and sorted.

    Args:
        client: FeiShu API client.
        app_token: Token of the bitable app.
        table_id: Table identifier inside the app.
        view_id: Restrict to the records visible in this view.
        filter_formula: FeiShu filter expression, e.g. ``CurrentValue.[Status]="Done"``.
        sort: JSON-encoded sort definition.
        field_names: Only return these fields.
        page_size: Maximum number of records per page.
        page_token: Cursor returned by the previous page.
        user_id_type: Type of user ids in person fields.

    Returns:
        Page result with the records under ``records``.

    """
    data = await client.request(
        "GET",
        f"{_table_path(app_token, table_id)}/records",
        page_params(
            page_size,
            page_token,
            view_id=view_id,
            filter=filter_formula,
            sort=sort,
            field_names=list(field_names) if field_names else None,
            user_id_type=user_id_type,
        ),
    )
    return build_page_result(data, section_name="records", mapper=serialize_record)


async def get_record(client: RequestClient, *, app_token: str, table_id: str, record_id: str) -> dict[str, Any]:
    data = await client.request(
        "GET",
        f"{_table_path(app_token, table_id)}/records/{require(record_id, 'record_id')}",
    )
    return serialize_record((data or {}).get("record") or {})


async def create_record(
    client: RequestClient,
    *,
    app_token: str,
    table_id: str,
    fields: Mapping[str, Any],
) -> dict[str, Any]:
    """Insert a record built from a field-name to value mapping."""
    if not fields:
        msg = "fields must not be empty"
        raise ValueError(msg)
    data = await client.request(
        "POST",
        f"{_table_path(app_token, table_id)}/records",
        data={"fields": dict(fields)},
    )
    return serialize_record((data or {}).get("record") or {})


async def update_record(
    client: RequestClient,
    *,
    app_token: str,
    table_id: str,
    record_id: str,
    fields: Mapping[str, Any],
) -> dict[str, Any]:
    """Overwrite the given fields of a record; other fields are untouched."""
    if not fields:
        msg = "fields must not be empty"
        raise ValueError(msg)
    data = await client.request(
        "PUT",
        f"{_table_path(app_token, table_id)}/records/{require(record_id, 'record_id')}",
        data={"fields": dict(fields)},
    )
    return serialize_record((data or {}).get("record") or {})


async def delete_record(client: RequestClient, *, app_token: str, table_id: str, record_id: str) -> dict[str, Any]:
    data = await client.request(
        "DELETE",
        f"{_table_path(app_token, table_id)}/records/{require(record_id, 'record_id')}",
    )
    data = data or {}
    return {"id": data.get("record_id", record_id), "deleted": bool(data.get("deleted", True))}


__all__ = [
    "BITABLE_PATH",
    "create_record",
    "delete_record",
    "get_app",
    "get_record",
    "list_records",
    "list_tables",
    "list_views",
    "serialize_record",
    "serialize_table",
    "serialize_view",
    "update_record",
]
