"""MCP tools for FeiShu contact users.

``search_feishu_users`` runs with the user access token obtained through the
OAuth flow; the other tools use the tenant token.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import users
from ..operations.common import UserIdType
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the user tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_user_info",
        description="Return the profile of one user.",
        annotations={"title": "Get user", "readOnlyHint": True},
    )
    async def get_feishu_user_info(ctx: Context, user_id: str, user_id_type: UserIdType = "open_id") -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            users.get_user,
            log_message=f"Fetching user {user_id}.",
            section_name="user",
            user_id=user_id,
            user_id_type=user_id_type,
        )

    @app.tool(
        name="get_feishu_users",
        description="Return users directly under a department; department_id '0' is the organisation root.",
        annotations={"title": "List users", "readOnlyHint": True},
    )
    async def get_feishu_users(
        ctx: Context,
        department_id: str = "0",
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            users.list_users,
            log_message=f"Listing users of department {department_id}.",
            department_id=department_id,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="search_feishu_users",
        description=(
            "Search users by keyword. Requires user authorization: if no authorization code is configured, "
            "the error explains where to obtain one (see get_feishu_authorization_url)."
        ),
        annotations={"title": "Search users", "readOnlyHint": True},
    )
    async def search_feishu_users(
        ctx: Context,
        query: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            users.search_users,
            log_message=f"Searching FeiShu users for {query!r}.",
            query=query,
            page_size=page_size,
            page_token=page_token,
        )


__all__ = ["register"]
