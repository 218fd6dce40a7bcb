"""MCP tools for FeiShu IM messages.

The bot sends, replies to, edits, and forwards messages, and reads chat
history. Message content is plain text for ``text`` messages and a JSON card
for ``interactive`` ones.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any, Literal

from fastmcp import Context, FastMCP

from ..operations import messages
from .common import run_operation

MessageTypeName = Literal["text", "post", "interactive", "image", "file", "share_chat"]
ReceiveIdTypeName = Literal["chat_id", "open_id", "user_id", "union_id", "email"]


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the message tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="send_feishu_message",
        description=(
            "Send a message as the bot to a chat or user. For msg_type 'text' pass plain text; "
            "for 'interactive' pass the card JSON; other types take the FeiShu content JSON."
        ),
        annotations={"title": "Send message", "readOnlyHint": False},
    )
    async def send_feishu_message(
        ctx: Context,
        receive_id: str,
        content: str,
        msg_type: MessageTypeName = "text",
        receive_id_type: ReceiveIdTypeName = "chat_id",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.send_message,
            log_message=f"Sending {msg_type} message to {receive_id_type} {receive_id}.",
            section_name="message",
            receive_id=receive_id,
            content=content,
            msg_type=msg_type,
            receive_id_type=receive_id_type,
        )

    @app.tool(
        name="reply_feishu_message",
        description="Reply to a message, optionally inside its thread.",
        annotations={"title": "Reply to message", "readOnlyHint": False},
    )
    async def reply_feishu_message(
        ctx: Context,
        message_id: str,
        content: str,
        msg_type: MessageTypeName = "text",
        reply_in_thread: bool = False,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.reply_message,
            log_message=f"Replying to message {message_id}.",
            section_name="message",
            message_id=message_id,
            content=content,
            msg_type=msg_type,
            reply_in_thread=reply_in_thread,
        )

    @app.tool(
        name="edit_feishu_message",
        description="Edit a message previously sent by the bot. Interactive cards are updated in place.",
        annotations={"title": "Edit message", "readOnlyHint": False},
    )
    async def edit_feishu_message(
        ctx: Context,
        message_id: str,
        content: str,
        msg_type: MessageTypeName = "text",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.edit_message,
            log_message=f"Editing message {message_id}.",
            section_name="message",
            message_id=message_id,
            content=content,
            msg_type=msg_type,
        )

    @app.tool(
        name="forward_feishu_message",
        description="Forward an existing message to another chat or user.",
        annotations={"title": "Forward message", "readOnlyHint": False},
    )
    async def forward_feishu_message(
        ctx: Context,
        message_id: str,
        receive_id: str,
        receive_id_type: ReceiveIdTypeName = "chat_id",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.forward_message,
            log_message=f"Forwarding message {message_id} to {receive_id}.",
            section_name="message",
            message_id=message_id,
            receive_id=receive_id,
            receive_id_type=receive_id_type,
        )

    @app.tool(
        name="list_feishu_messages",
        description=(
            "Return the message history of a chat or thread. start_time and end_time are Unix timestamps "
            "in seconds; pass page_token from a previous result to continue."
        ),
        annotations={"title": "List messages", "readOnlyHint": True},
    )
    async def list_feishu_messages(  # noqa: PLR0913 (tool arguments mirror the endpoint)
        ctx: Context,
        container_id: str,
        container_id_type: Literal["chat", "thread"] = "chat",
        start_time: str | None = None,
        end_time: str | None = None,
        sort_type: Literal["ByCreateTimeAsc", "ByCreateTimeDesc"] | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.list_messages,
            log_message=f"Listing messages in {container_id_type} {container_id}.",
            container_id=container_id,
            container_id_type=container_id_type,
            start_time=start_time,
            end_time=end_time,
            sort_type=sort_type,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_message_read_users",
        description="Return the users who have read a message sent by the bot.",
        annotations={"title": "List message readers", "readOnlyHint": True},
    )
    async def get_feishu_message_read_users(
        ctx: Context,
        message_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            messages.get_message_read_users,
            log_message=f"Listing readers of message {message_id}.",
            message_id=message_id,
            page_size=page_size,
            page_token=page_token,
        )


__all__ = ["register"]
