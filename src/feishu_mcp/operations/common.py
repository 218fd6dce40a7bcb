"""Common utilities for FeiShu operations modules.

Operations are plain async functions that take an ``ApiClient`` first, call
its ``request`` contract, and reshape the envelope ``data`` into compact
JSON-serialisable dictionaries for the MCP tools.
"""

from collections.abc import Callable, Mapping
from typing import Any, Literal, Protocol, TypeAlias

from ..client.api_client import ApiClient
from ..models import PaginationOptions, RequestOptions

Item: TypeAlias = dict[str, Any]
PageResult: TypeAlias = dict[str, Any]
UserIdType = Literal["open_id", "union_id", "user_id"]

MAX_PAGE_SIZE = 100


class RequestClient(Protocol):
    """The part of ``ApiClient`` that operations depend on."""

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
        *,
        data: Any = None,
    ) -> Any: ...


def compact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is ``None``."""
    return {key: value for key, value in values.items() if value is not None}


def page_params(
    page_size: int | None = None,
    page_token: str | None = None,
    **params: Any,
) -> dict[str, Any]:
    """Build query parameters for a paginated list call.

    ``page_size`` is clamped to ``MAX_PAGE_SIZE``; ``None`` values are dropped.
    """
    pagination = PaginationOptions(
        page_size=min(page_size, MAX_PAGE_SIZE) if page_size is not None else None,
        page_token=page_token or None,
    )
    return ApiClient.convert_pagination_params(pagination, compact(params))


def build_page_result(
    data: Mapping[str, Any] | None,
    *,
    section_name: str = "items",
    mapper: Callable[[Mapping[str, Any]], Item] | None = None,
    items_key: str = "items",
) -> PageResult:
    """Shape a FeiShu list response into ``{section, page_token, has_more}``.

    Args:
        data: Envelope ``data`` of a list endpoint.
        section_name: Key under which the mapped items are returned.
        mapper: Optional per-item transformation.
        items_key: Key holding the items inside ``data``.

    Returns:
        Dictionary with the items, their count, and the pagination cursor. The
        cursor is only present while ``has_more`` is true.

    """
    data = data or {}
    raw_items = data.get(items_key) or []
    items = [mapper(item) for item in raw_items] if mapper else [dict(item) for item in raw_items]
    has_more = bool(data.get("has_more"))
    result: PageResult = {
        section_name: items,
        "count": len(items),
        "has_more": has_more,
    }
    if has_more and data.get("page_token"):
        result["page_token"] = data["page_token"]
    if data.get("total") is not None:
        result["total"] = data["total"]
    return result


def require(value: str | None, name: str) -> str:
    """Return ``value`` or raise ``ValueError`` naming the missing argument."""
    if not value:
        msg = f"{name} is required"
        raise ValueError(msg)
    return value


__all__ = [
    "MAX_PAGE_SIZE",
    "Item",
    "PageResult",
    "RequestClient",
    "UserIdType",
    "build_page_result",
    "compact",
    "page_params",
    "require",
]
