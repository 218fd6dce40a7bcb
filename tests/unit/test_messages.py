"""Unit tests for the message operations."""

import json
from unittest.mock import AsyncMock

import pytest

from feishu_mcp.operations.messages import (
    MESSAGES_PATH,
    edit_message,
    format_message_content,
    forward_message,
    get_message_read_users,
    list_messages,
    reply_message,
    send_message,
)

_MESSAGE = {
    "message_id": "om_1",
    "chat_id": "oc_1",
    "msg_type": "text",
    "body": {"content": '{"text":"hi"}'},
    "sender": {"id": "cli_a1", "sender_type": "app"},
    "create_time": "1700000000000",
}


@pytest.fixture
def client() -> AsyncMock:
    """Return a client whose request returns a message object."""
    mock = AsyncMock()
    mock.request = AsyncMock(return_value=_MESSAGE)
    return mock


def test_format_text_content() -> None:
    """Text content is wrapped as {"text": ...}."""
    assert json.loads(format_message_content("hello", "text")) == {"text": "hello"}


def test_format_interactive_content() -> None:
    """Cards accept JSON text or objects; invalid JSON is rejected."""
    card = {"elements": [{"tag": "div", "text": {"tag": "plain_text", "content": "x"}}]}
    assert json.loads(format_message_content(json.dumps(card), "interactive")) == card
    assert json.loads(format_message_content(card, "interactive")) == card
    with pytest.raises(ValueError, match="valid JSON"):
        format_message_content("{not json", "interactive")


def test_format_other_content_passthrough() -> None:
    """Other types take the content object as is."""
    assert format_message_content('{"image_key":"img"}', "image") == '{"image_key":"img"}'
    assert json.loads(format_message_content({"file_key": "f"}, "file")) == {"file_key": "f"}
    with pytest.raises(ValueError, match="sticker"):
        format_message_content("x", "sticker")


@pytest.mark.asyncio
async def test_send_message(client: AsyncMock) -> None:
    """send_message posts the encoded content with the receive id type."""
    result = await send_message(client, receive_id="oc_1", content="hi")

    client.request.assert_awaited_once_with(
        "POST",
        MESSAGES_PATH,
        {"receive_id_type": "chat_id"},
        data={"receive_id": "oc_1", "msg_type": "text", "content": '{"text": "hi"}'},
    )
    assert result == {
        "message_id": "om_1",
        "chat_id": "oc_1",
        "msg_type": "text",
        "content": '{"text":"hi"}',
        "sender_id": "cli_a1",
        "sender_type": "app",
        "create_time": "1700000000000",
    }


@pytest.mark.asyncio
async def test_send_message_requires_receiver(client: AsyncMock) -> None:
    """An empty receiver is rejected before any request."""
    with pytest.raises(ValueError, match="receive_id is required"):
        await send_message(client, receive_id="", content="hi")
    client.request.assert_not_awaited()


@pytest.mark.asyncio
async def test_reply_and_forward(client: AsyncMock) -> None:
    """Replies and forwards target the message sub-resources."""
    await reply_message(client, message_id="om_1", content="ok", reply_in_thread=True)
    await forward_message(client, message_id="om_1", receive_id="ou_2", receive_id_type="open_id")

    reply_call, forward_call = client.request.await_args_list
    assert reply_call.args[1] == f"{MESSAGES_PATH}/om_1/reply"
    assert reply_call.kwargs["data"]["reply_in_thread"] is True
    assert forward_call.args[1:] == (f"{MESSAGES_PATH}/om_1/forward", {"receive_id_type": "open_id"})
    assert forward_call.kwargs["data"] == {"receive_id": "ou_2"}


@pytest.mark.asyncio
async def test_edit_message_methods(client: AsyncMock) -> None:
    """Cards are patched; other message types are replaced with PUT."""
    await edit_message(client, message_id="om_1", content='{"elements":[]}', msg_type="interactive")
    await edit_message(client, message_id="om_1", content="fixed")

    patch_call, put_call = client.request.await_args_list
    assert patch_call.args[0] == "PATCH"
    assert "msg_type" not in patch_call.kwargs["data"]
    assert put_call.args[0] == "PUT"
    assert put_call.kwargs["data"]["msg_type"] == "text"


@pytest.mark.asyncio
async def test_list_messages_paginates() -> None:
    """list_messages maps items and exposes the page token while has_more is true."""
    client = AsyncMock()
    client.request = AsyncMock(return_value={"items": [_MESSAGE], "has_more": True, "page_token": "p2"})

    result = await list_messages(client, container_id="oc_1", page_size=500, sort_type="ByCreateTimeDesc")

    params = client.request.await_args.args[2]
    assert params == {
        "container_id_type": "chat",
        "container_id": "oc_1",
        "sort_type": "ByCreateTimeDesc",
        "page_size": 100,
    }
    assert result["count"] == 1
    assert result["has_more"] is True
    assert result["page_token"] == "p2"
    assert result["messages"][0]["message_id"] == "om_1"


@pytest.mark.asyncio
async def test_get_message_read_users() -> None:
    """Read receipts are returned under 'users' without a token on the last page."""
    client = AsyncMock()
    client.request = AsyncMock(return_value={"items": [{"user_id": "ou_1"}], "has_more": False, "page_token": "x"})

    result = await get_message_read_users(client, message_id="om_1")

    assert client.request.await_args.args[1] == f"{MESSAGES_PATH}/om_1/read_users"
    assert result == {"users": [{"user_id": "ou_1"}], "count": 1, "has_more": False}
