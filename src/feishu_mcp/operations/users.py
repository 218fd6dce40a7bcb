"""Helpers for FeiShu contact users."""

from collections.abc import Mapping
from typing import Any

from ..models import RequestOptions, TokenType
from .common import PageResult, RequestClient, UserIdType, build_page_result, compact, page_params, require

USERS_PATH = "/open-apis/contact/v3/users"
USER_SEARCH_PATH = "/open-apis/search/v1/user"


def serialize_user(user: Mapping[str, Any]) -> dict[str, Any]:
    """Rename the contact fields an assistant cares about."""
    avatar = user.get("avatar") or {}
    status = user.get("status") or {}
    return compact(
        {
            "open_id": user.get("open_id"),
            "union_id": user.get("union_id"),
            "user_id": user.get("user_id"),
            "name": user.get("name"),
            "en_name": user.get("en_name"),
            "email": user.get("email"),
            "mobile": user.get("mobile"),
            "avatar": avatar.get("avatar_origin") or avatar.get("avatar_72") or user.get("avatar_url"),
            "department_ids": user.get("department_ids"),
            "job_title": user.get("job_title"),
            "is_activated": status.get("is_activated"),
            "is_resigned": status.get("is_resigned"),
        },
    )


async def get_user(
    client: RequestClient,
    *,
    user_id: str,
    user_id_type: UserIdType = "open_id",
) -> dict[str, Any]:
    data = await client.request(
        "GET",
        f"{USERS_PATH}/{require(user_id, 'user_id')}",
        {"user_id_type": user_id_type},
    )
    return serialize_user((data or {}).get("user") or {})


async def list_users(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    department_id: str = "0",
    department_id_type: str = "open_department_id",
    user_id_type: UserIdType = "open_id",
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List users directly under a department (``"0"`` is the root)."""
    data = await client.request(
        "GET",
        USERS_PATH,
        page_params(
            page_size,
            page_token,
            department_id=department_id,
            department_id_type=department_id_type,
            user_id_type=user_id_type,
        ),
    )
    return build_page_result(data, section_name="users", mapper=serialize_user)


async def search_users(
    client: RequestClient,
    *,
    query: str,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """Search users by keyword.

    The search endpoint only accepts a user access token, so the request is
    authorized as the user that completed the OAuth flow.
    """
    data = await client.request(
        "GET",
        USER_SEARCH_PATH,
        page_params(page_size, page_token, query=require(query, "query")),
        RequestOptions(token_type=TokenType.USER),
    )
    return build_page_result(data, section_name="users", mapper=serialize_user, items_key="users")


__all__ = ["USERS_PATH", "USER_SEARCH_PATH", "get_user", "list_users", "search_users", "serialize_user"]
