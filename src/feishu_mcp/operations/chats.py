"""Helpers for FeiShu group chats."""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from .common import PageResult, RequestClient, UserIdType, build_page_result, compact, page_params, require

CHATS_PATH = "/open-apis/im/v1/chats"


def serialize_chat(chat: Mapping[str, Any]) -> dict[str, Any]:
    """Rename the fields of a FeiShu chat object for tool output."""
    return compact(
        {
            "id": chat.get("chat_id"),
            "name": chat.get("name"),
            "description": chat.get("description"),
            "avatar": chat.get("avatar"),
            "owner_id": chat.get("owner_id"),
            "owner_id_type": chat.get("owner_id_type"),
            "is_external": chat.get("external"),
            "tenant_key": chat.get("tenant_key"),
            "status": chat.get("chat_status"),
        },
    )


def serialize_chat_info(chat_id: str, info: Mapping[str, Any]) -> dict[str, Any]:
    """Shape the detailed chat information response."""
    result = serialize_chat({"chat_id": chat_id, **info})
    result.update(
        compact(
            {
                "chat_mode": info.get("chat_mode"),
                "chat_type": info.get("chat_type"),
                "chat_tag": info.get("chat_tag"),
                "user_count": info.get("user_count"),
                "bot_count": info.get("bot_count"),
                "user_manager_id_list": info.get("user_manager_id_list"),
                "bot_manager_id_list": info.get("bot_manager_id_list"),
                "add_member_permission": info.get("add_member_permission"),
                "share_card_permission": info.get("share_card_permission"),
                "membership_approval": info.get("membership_approval"),
                "i18n_names": info.get("i18n_names"),
            },
        ),
    )
    return result


async def search_chats(
    client: RequestClient,
    *,
    query: str | None = None,
    page_size: int | None = None,
    page_token: str | None = None,
    user_id_type: UserIdType | None = None,
) -> PageResult:
    """Search chats visible to the bot."""
    data = await client.request(
        "GET",
        f"{CHATS_PATH}/search",
        page_params(page_size, page_token, query=query, user_id_type=user_id_type),
    )
    return build_page_result(data, section_name="chats", mapper=serialize_chat)


async def list_chats(
    client: RequestClient,
    *,
    page_size: int | None = None,
    page_token: str | None = None,
    user_id_type: UserIdType | None = None,
) -> PageResult:
    """List chats the bot belongs to."""
    data = await client.request("GET", CHATS_PATH, page_params(page_size, page_token, user_id_type=user_id_type))
    return build_page_result(data, section_name="chats", mapper=serialize_chat)


async def get_chat_info(
    client: RequestClient,
    *,
    chat_id: str,
    user_id_type: UserIdType | None = None,
) -> dict[str, Any]:
    data = await client.request(
        "GET",
        f"{CHATS_PATH}/{require(chat_id, 'chat_id')}",
        compact({"user_id_type": user_id_type}),
    )
    return serialize_chat_info(chat_id, data or {})


async def create_chat(  # noqa: PLR0913 (mirrors the create endpoint fields)
    client: RequestClient,
    *,
    name: str,
    description: str | None = None,
    owner_id: str | None = None,
    user_id_list: Sequence[str] | None = None,
    bot_id_list: Sequence[str] | None = None,
    chat_mode: Literal["group"] = "group",
    chat_type: Literal["private", "public"] = "private",
    user_id_type: UserIdType = "open_id",
) -> dict[str, Any]:
    """Create a group chat with the bot as a member."""
    data = await client.request(
        "POST",
        CHATS_PATH,
        {"user_id_type": user_id_type, "set_bot_manager": False},
        data=compact(
            {
                "name": require(name, "name"),
                "description": description,
                "owner_id": owner_id,
                "user_id_list": list(user_id_list) if user_id_list else None,
                "bot_id_list": list(bot_id_list) if bot_id_list else None,
                "chat_mode": chat_mode,
                "chat_type": chat_type,
            },
        ),
    )
    return serialize_chat_info((data or {}).get("chat_id", ""), data or {})


async def update_chat(  # noqa: PLR0913 (mirrors the update endpoint fields)
    client: RequestClient,
    *,
    chat_id: str,
    name: str | None = None,
    description: str | None = None,
    owner_id: str | None = None,
    avatar: str | None = None,
    user_id_type: UserIdType = "open_id",
) -> dict[str, Any]:
    """Update chat attributes; only given fields are changed."""
    fields = compact({"name": name, "description": description, "owner_id": owner_id, "avatar": avatar})
    if not fields:
        msg = "At least one chat attribute must be given to update"
        raise ValueError(msg)
    await client.request(
        "PUT",
        f"{CHATS_PATH}/{require(chat_id, 'chat_id')}",
        {"user_id_type": user_id_type},
        data=fields,
    )
    return {"id": chat_id, "updated": sorted(fields)}


async def add_chat_members(
    client: RequestClient,
    *,
    chat_id: str,
    member_ids: Sequence[str],
    member_id_type: Literal["open_id", "union_id", "user_id", "app_id"] = "open_id",
    succeed_type: Literal[0, 1, 2] = 0,
) -> dict[str, Any]:
    """Add users or bots to a chat and report which ids were rejected."""
    if not member_ids:
        msg = "member_ids must not be empty"
        raise ValueError(msg)
    data = await client.request(
        "POST",
        f"{CHATS_PATH}/{require(chat_id, 'chat_id')}/members",
        {"member_id_type": member_id_type, "succeed_type": succeed_type},
        data={"id_list": list(member_ids)},
    )
    data = data or {}
    return {
        "id": chat_id,
        "invalid_id_list": data.get("invalid_id_list") or [],
        "not_existed_id_list": data.get("not_existed_id_list") or [],
        "pending_approval_id_list": data.get("pending_approval_id_list") or [],
    }


__all__ = [
    "CHATS_PATH",
    "add_chat_members",
    "create_chat",
    "get_chat_info",
    "list_chats",
    "search_chats",
    "serialize_chat",
    "serialize_chat_info",
    "update_chat",
]
