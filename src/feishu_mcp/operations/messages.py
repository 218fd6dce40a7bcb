"""Helpers for sending and reading FeiShu IM messages as the bot."""

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Literal

from .common import PageResult, RequestClient, build_page_result, compact, page_params, require

MESSAGES_PATH = "/open-apis/im/v1/messages"

ReceiveIdType = Literal["chat_id", "open_id", "user_id", "union_id", "email"]


class MessageType(StrEnum):
    """FeiShu message types supported by the message tools."""

    TEXT = "text"
    POST = "post"
    INTERACTIVE = "interactive"
    IMAGE = "image"
    FILE = "file"
    SHARE_CHAT = "share_chat"


def format_message_content(content: str | Mapping[str, Any], msg_type: MessageType | str) -> str:
    """Build the JSON-encoded ``content`` field FeiShu expects for ``msg_type``.

    Text messages wrap the string as ``{"text": ...}``. Cards accept either a
    card object or its JSON text. Other types take the content object as is.

    Raises:
        ValueError: If an interactive card is not valid JSON.

    """
    msg_type = MessageType(msg_type)
    if msg_type is MessageType.TEXT:
        text = content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
        return json.dumps({"text": text}, ensure_ascii=False)
    if msg_type is MessageType.INTERACTIVE:
        if isinstance(content, str):
            try:
                card = json.loads(content)
            except json.JSONDecodeError as exc:
                msg = f"Interactive card content must be valid JSON: {exc}"
                raise ValueError(msg) from exc
        else:
            card = dict(content)
        return json.dumps(card, ensure_ascii=False)
    if isinstance(content, str):
        return content
    return json.dumps(dict(content), ensure_ascii=False)


def serialize_message(message: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a FeiShu message object."""
    body = message.get("body") or {}
    sender = message.get("sender") or {}
    return compact(
        {
            "message_id": message.get("message_id"),
            "chat_id": message.get("chat_id"),
            "msg_type": message.get("msg_type"),
            "content": body.get("content"),
            "sender_id": sender.get("id"),
            "sender_type": sender.get("sender_type"),
            "parent_id": message.get("parent_id"),
            "create_time": message.get("create_time"),
            "update_time": message.get("update_time"),
            "deleted": message.get("deleted"),
        },
    )


async def send_message(
    client: RequestClient,
    *,
    receive_id: str,
    content: str | Mapping[str, Any],
    msg_type: MessageType | str = MessageType.TEXT,
    receive_id_type: ReceiveIdType = "chat_id",
) -> dict[str, Any]:
    """Send a message to a chat or user."""
    data = await client.request(
        "POST",
        MESSAGES_PATH,
        {"receive_id_type": receive_id_type},
        data={
            "receive_id": require(receive_id, "receive_id"),
            "msg_type": MessageType(msg_type).value,
            "content": format_message_content(content, msg_type),
        },
    )
    return serialize_message(data or {})


async def reply_message(
    client: RequestClient,
    *,
    message_id: str,
    content: str | Mapping[str, Any],
    msg_type: MessageType | str = MessageType.TEXT,
    reply_in_thread: bool = False,
) -> dict[str, Any]:
    data = await client.request(
        "POST",
        f"{MESSAGES_PATH}/{require(message_id, 'message_id')}/reply",
        data={
            "msg_type": MessageType(msg_type).value,
            "content": format_message_content(content, msg_type),
            "reply_in_thread": reply_in_thread,
        },
    )
    return serialize_message(data or {})


async def edit_message(
    client: RequestClient,
    *,
    message_id: str,
    content: str | Mapping[str, Any],
    msg_type: MessageType | str = MessageType.TEXT,
) -> dict[str, Any]:
    """Edit a message previously sent by the bot.

    Cards are updated with PATCH, every other type with PUT.
    """
    msg_type = MessageType(msg_type)
    path = f"{MESSAGES_PATH}/{require(message_id, 'message_id')}"
    if msg_type is MessageType.INTERACTIVE:
        await client.request("PATCH", path, data={"content": format_message_content(content, msg_type)})
        return {"message_id": message_id, "msg_type": msg_type.value}
    data = await client.request(
        "PUT",
        path,
        data={"msg_type": msg_type.value, "content": format_message_content(content, msg_type)},
    )
    return serialize_message(data or {"message_id": message_id, "msg_type": msg_type.value})


async def forward_message(
    client: RequestClient,
    *,
    message_id: str,
    receive_id: str,
    receive_id_type: ReceiveIdType = "chat_id",
) -> dict[str, Any]:
    data = await client.request(
        "POST",
        f"{MESSAGES_PATH}/{require(message_id, 'message_id')}/forward",
        {"receive_id_type": receive_id_type},
        data={"receive_id": require(receive_id, "receive_id")},
    )
    return serialize_message(data or {})


async def list_messages(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    container_id: str,
    container_id_type: Literal["chat", "thread"] = "chat",
    start_time: str | None = None,
    end_time: str | None = None,
    sort_type: Literal["ByCreateTimeAsc", "ByCreateTimeDesc"] | None = None,
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List the message history of a chat or thread."""
    data = await client.request(
        "GET",
        MESSAGES_PATH,
        page_params(
            page_size,
            page_token,
            container_id_type=container_id_type,
            container_id=require(container_id, "container_id"),
            start_time=start_time,
            end_time=end_time,
            sort_type=sort_type,
        ),
    )
    return build_page_result(data, section_name="messages", mapper=serialize_message)


async def get_message_read_users(
    client: RequestClient,
    *,
    message_id: str,
    user_id_type: Literal["open_id", "union_id", "user_id"] = "open_id",
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List users who have read a message sent by the bot."""
    data = await client.request(
        "GET",
        f"{MESSAGES_PATH}/{require(message_id, 'message_id')}/read_users",
        page_params(page_size, page_token, user_id_type=user_id_type),
    )
    return build_page_result(data, section_name="users")


__all__ = [
    "MESSAGES_PATH",
    "MessageType",
    "edit_message",
    "format_message_content",
    "forward_message",
    "get_message_read_users",
    "list_messages",
    "reply_message",
    "send_message",
    "serialize_message",
]
