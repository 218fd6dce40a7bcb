"""MCP tools for FeiShu group chats."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any, Literal

from fastmcp import Context, FastMCP

from ..operations import chats
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the chat tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="search_feishu_chats",
        description="Search group chats visible to the bot by keyword (name or member).",
        annotations={"title": "Search chats", "readOnlyHint": True},
    )
    async def search_feishu_chats(
        ctx: Context,
        query: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.search_chats,
            log_message=f"Searching FeiShu chats for {query!r}.",
            query=query,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_chats",
        description="Return the group chats the bot is a member of.",
        annotations={"title": "List chats", "readOnlyHint": True},
    )
    async def get_feishu_chats(
        ctx: Context,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.list_chats,
            log_message="Listing FeiShu chats the bot belongs to.",
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_chat_info",
        description="Return detailed information about one chat: owner, members count, permissions.",
        annotations={"title": "Get chat info", "readOnlyHint": True},
    )
    async def get_feishu_chat_info(ctx: Context, chat_id: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.get_chat_info,
            log_message=f"Fetching chat {chat_id}.",
            section_name="chat",
            chat_id=chat_id,
        )

    @app.tool(
        name="create_feishu_chat",
        description="Create a group chat with the bot as a member, optionally adding users by open_id.",
        annotations={"title": "Create chat", "readOnlyHint": False},
    )
    async def create_feishu_chat(  # noqa: PLR0913 (tool arguments mirror the endpoint)
        ctx: Context,
        name: str,
        description: str | None = None,
        owner_id: str | None = None,
        user_id_list: list[str] | None = None,
        chat_type: Literal["private", "public"] = "private",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.create_chat,
            log_message=f"Creating chat {name!r}.",
            section_name="chat",
            name=name,
            description=description,
            owner_id=owner_id,
            user_id_list=user_id_list,
            chat_type=chat_type,
        )

    @app.tool(
        name="update_feishu_chat",
        description="Update the name, description, owner, or avatar of a chat. Omitted fields are unchanged.",
        annotations={"title": "Update chat", "readOnlyHint": False},
    )
    async def update_feishu_chat(  # noqa: PLR0913 (tool arguments mirror the endpoint)
        ctx: Context,
        chat_id: str,
        name: str | None = None,
        description: str | None = None,
        owner_id: str | None = None,
        avatar: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.update_chat,
            log_message=f"Updating chat {chat_id}.",
            section_name="chat",
            chat_id=chat_id,
            name=name,
            description=description,
            owner_id=owner_id,
            avatar=avatar,
        )

    @app.tool(
        name="add_feishu_chat_members",
        description="Add users (or bots, with member_id_type 'app_id') to a chat.",
        annotations={"title": "Add chat members", "readOnlyHint": False},
    )
    async def add_feishu_chat_members(
        ctx: Context,
        chat_id: str,
        member_ids: list[str],
        member_id_type: Literal["open_id", "union_id", "user_id", "app_id"] = "open_id",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            chats.add_chat_members,
            log_message=f"Adding {len(member_ids)} member(s) to chat {chat_id}.",
            section_name="chat",
            chat_id=chat_id,
            member_ids=member_ids,
            member_id_type=member_id_type,
        )


__all__ = ["register"]
