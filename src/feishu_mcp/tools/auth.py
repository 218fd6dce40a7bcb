"""MCP tools for the OAuth flow behind user-token tools.

A user opens the URL returned by ``get_feishu_authorization_url``, approves
the app, and is redirected with a ``code``; ``set_feishu_authorization_code``
hands that code to the token manager so user-token tools can run.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..client.api_client import ApiClient
from .common import run_operation


async def authorization_url(
    client: ApiClient,
    *,
    redirect_uri: str | None = None,
    scope: str | None = None,
    state: str | None = None,
) -> dict[str, Any]:
    url = client.token_manager.generate_authorization_url(redirect_uri, scope, state)
    return {"authorization_url": url}


async def apply_authorization_code(
    client: ApiClient,
    *,
    code: str,
    redirect_uri: str | None = None,
) -> dict[str, Any]:
    """Store the code (and redirect URI) and exchange it for a user token."""
    if redirect_uri:
        client.token_manager.set_redirect_uri(redirect_uri)
    client.token_manager.set_authorization_code(code)
    await client.token_manager.get_user_access_token(code)
    return {"authorized": True}


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the authorization tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_authorization_url",
        description=(
            "Return the URL a user must open to authorize this app. After approval FeiShu redirects to "
            "redirect_uri with a code; pass it to set_feishu_authorization_code."
        ),
        annotations={"title": "Get authorization URL", "readOnlyHint": True},
    )
    async def get_feishu_authorization_url(
        ctx: Context,
        redirect_uri: str | None = None,
        scope: str | None = None,
        state: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            authorization_url,
            log_message="Building FeiShu authorization URL.",
            redirect_uri=redirect_uri,
            scope=scope,
            state=state,
        )

    @app.tool(
        name="set_feishu_authorization_code",
        description="Exchange an OAuth authorization code for a user access token used by user-token tools.",
        annotations={"title": "Set authorization code", "readOnlyHint": False},
    )
    async def set_feishu_authorization_code(
        ctx: Context,
        code: str,
        redirect_uri: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            apply_authorization_code,
            log_message="Exchanging FeiShu authorization code for a user token.",
            code=code,
            redirect_uri=redirect_uri,
        )


__all__ = ["apply_authorization_code", "authorization_url", "register"]
