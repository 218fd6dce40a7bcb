"""Unit tests for the MCP tool wrappers.

Validates registration, JSON shape, and error translation through the tool
registration layer (without requiring a running FastMCP app).
"""

from collections.abc import Awaitable, Callable
from types import SimpleNamespace
from typing import Any, TypeAlias
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastmcp import Context
from fastmcp.exceptions import ToolError

from feishu_mcp.client.api_client import ApiClient
from feishu_mcp.consts import USER_TOKEN_PATH
from feishu_mcp.errors import ApiError, AuthorizationCodeRequiredError
from feishu_mcp.tools import auth, calendars, chats, departments, documents, messages, sheets, tasks, users

ToolFunc: TypeAlias = Callable[..., Awaitable[dict[str, Any]]]

EXPECTED_TOOLS = {
    "send_feishu_message",
    "reply_feishu_message",
    "edit_feishu_message",
    "forward_feishu_message",
    "list_feishu_messages",
    "get_feishu_message_read_users",
    "search_feishu_chats",
    "get_feishu_chats",
    "get_feishu_chat_info",
    "create_feishu_chat",
    "update_feishu_chat",
    "add_feishu_chat_members",
    "get_feishu_document",
    "get_feishu_document_raw",
    "get_feishu_document_blocks",
    "create_feishu_document",
    "get_feishu_sheet_meta",
    "get_feishu_sheet_tables",
    "get_feishu_sheet_views",
    "get_feishu_sheet_records",
    "get_feishu_sheet_record",
    "create_feishu_sheet_record",
    "update_feishu_sheet_record",
    "delete_feishu_sheet_record",
    "get_feishu_calendars",
    "get_feishu_calendar_events",
    "get_feishu_tasks",
    "create_feishu_task",
    "get_feishu_user_info",
    "get_feishu_users",
    "search_feishu_users",
    "get_feishu_department_info",
    "get_feishu_departments",
    "get_feishu_authorization_url",
    "set_feishu_authorization_code",
}


class _FakeApp:
    """Minimal stand-in for FastMCP app to capture registered tools."""

    def __init__(self) -> None:
        self.tools: dict[str, ToolFunc] = {}
        self.annotations: dict[str, dict[str, Any] | None] = {}

    def tool(
        self,
        *,
        name: str,
        description: str,
        annotations: dict[str, Any] | None = None,
    ) -> Callable[[ToolFunc], ToolFunc]:
        """Register a tool by name and return a decorator that captures the function."""

        def _decorator(func: ToolFunc) -> ToolFunc:
            _ = description
            self.tools[name] = func
            self.annotations[name] = annotations
            return func

        return _decorator


@pytest.fixture
def api_client() -> MagicMock:
    """Return an ApiClient-like mock with an async request method."""
    client = MagicMock()
    client.endpoint = "https://open.feishu.cn"
    client.request = AsyncMock(return_value={})
    return client


@pytest.fixture
def app(api_client: MagicMock) -> _FakeApp:
    """Return a fake app with every tool module registered."""
    fake = _FakeApp()
    deps = SimpleNamespace(get_api_client=lambda: api_client)
    for module in (messages, chats, documents, sheets, calendars, tasks, users, departments, auth):
        module.register(fake, deps=deps)  # type: ignore[arg-type]
    return fake


@pytest.fixture
def mock_ctx() -> Context:
    """Return a Context-like AsyncMock for tool logging."""
    ctx = MagicMock(spec=Context)
    ctx.info = AsyncMock()
    ctx.error = AsyncMock()
    return ctx


def test_all_tools_registered(app: _FakeApp) -> None:
    """Every tool family should be registered under its public name."""
    assert set(app.tools) == EXPECTED_TOOLS
    assert app.annotations["get_feishu_chats"] == {"title": "List chats", "readOnlyHint": True}
    assert app.annotations["delete_feishu_sheet_record"]["destructiveHint"] is True  # type: ignore[index]


@pytest.mark.asyncio
async def test_list_tool_returns_page_with_metadata(app: _FakeApp, api_client: MagicMock, mock_ctx: Context) -> None:
    """Page results are merged into the response next to the metadata."""
    api_client.request.return_value = {"items": [{"chat_id": "oc_1", "name": "Team"}], "has_more": False}

    result = await app.tools["get_feishu_chats"](mock_ctx, page_size=10)

    assert result["endpoint"] == "https://open.feishu.cn"
    assert "retrieved_at" in result
    assert result["chats"] == [{"id": "oc_1", "name": "Team"}]
    assert result["count"] == 1
    mock_ctx.info.assert_awaited_once()  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_item_tool_nests_result(app: _FakeApp, api_client: MagicMock, mock_ctx: Context) -> None:
    """Single-object results are nested under their section name."""
    api_client.request.return_value = {"message_id": "om_1", "chat_id": "oc_1", "msg_type": "text"}

    result = await app.tools["send_feishu_message"](mock_ctx, receive_id="oc_1", content="hello")

    assert result["message"] == {"message_id": "om_1", "chat_id": "oc_1", "msg_type": "text"}
    assert api_client.request.await_args.kwargs["data"]["content"] == '{"text": "hello"}'


@pytest.mark.asyncio
async def test_sheet_records_tool_maps_filter(app: _FakeApp, api_client: MagicMock, mock_ctx: Context) -> None:
    """The filter argument is forwarded as the FeiShu filter query parameter."""
    api_client.request.return_value = {"items": [], "has_more": False}

    await app.tools["get_feishu_sheet_records"](mock_ctx, app_token="bas1", table_id="tbl1", filter="x")

    assert api_client.request.await_args.args[2] == {"filter": "x"}


@pytest.mark.asyncio
async def test_api_error_becomes_tool_error(app: _FakeApp, api_client: MagicMock, mock_ctx: Context) -> None:
    """FeiShu failures are reported to the client and raised as ToolError."""
    api_client.request.side_effect = ApiError(99991663, "token invalid")

    with pytest.raises(ToolError, match=r"\[99991663\] token invalid"):
        await app.tools["get_feishu_calendars"](mock_ctx)

    mock_ctx.error.assert_awaited_once()  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_argument_error_becomes_tool_error(app: _FakeApp, mock_ctx: Context) -> None:
    """Invalid arguments are reported as ToolError without calling the API."""
    with pytest.raises(ToolError, match="At least one chat attribute"):
        await app.tools["update_feishu_chat"](mock_ctx, chat_id="oc_1")


@pytest.mark.asyncio
async def test_search_users_reports_missing_authorization(
    app: _FakeApp,
    api_client: MagicMock,
    mock_ctx: Context,
) -> None:
    """A missing authorization code surfaces with the authorization URL."""
    api_client.request.side_effect = AuthorizationCodeRequiredError(
        "Authorization code is required to get user access token. Please redirect the user to https://x to obtain "
        "a new code.",
        authorization_url="https://x",
    )

    with pytest.raises(ToolError, match="https://x"):
        await app.tools["search_feishu_users"](mock_ctx, query="Ann")


@pytest.mark.asyncio
async def test_authorization_tools(app: _FakeApp, api_client: MagicMock, mock_ctx: Context) -> None:
    """The auth tools delegate to the token manager."""
    token_manager = MagicMock()
    token_manager.generate_authorization_url.return_value = "https://open.feishu.cn/open-apis/authen/v1/index?x"
    token_manager.get_user_access_token = AsyncMock(return_value="U")
    api_client.token_manager = token_manager

    url_result = await app.tools["get_feishu_authorization_url"](mock_ctx, redirect_uri="https://cb", state="s")
    code_result = await app.tools["set_feishu_authorization_code"](mock_ctx, code="c1", redirect_uri="https://cb")

    assert url_result["authorization_url"].startswith("https://open.feishu.cn/")
    token_manager.generate_authorization_url.assert_called_once_with("https://cb", None, "s")
    token_manager.set_redirect_uri.assert_called_once_with("https://cb")
    token_manager.set_authorization_code.assert_called_once_with("c1")
    token_manager.get_user_access_token.assert_awaited_once_with("c1")
    assert code_result["authorized"] is True


class _CodeExchangeTransport:
    """Transport that issues a user token named after the exchanged code."""

    def __init__(self) -> None:
        self.codes: list[str] = []

    async def request(self, config: Any) -> dict[str, Any]:
        assert config.url.endswith(USER_TOKEN_PATH)
        code = config.json["code"]
        self.codes.append(code)
        return {"code": 0, "user_access_token": f"U-{code}", "expire": 7200}


@pytest.mark.asyncio
async def test_new_authorization_code_replaces_previous_user() -> None:
    """Applying a second code exchanges it instead of reusing the cached token."""
    transport = _CodeExchangeTransport()
    client = ApiClient(app_id="a1", app_secret="s1", transport=transport)

    await auth.apply_authorization_code(client, code="first")
    await client.token_manager.wait_for_pending_writes()
    result = await auth.apply_authorization_code(client, code="second")
    await client.token_manager.wait_for_pending_writes()

    assert result == {"authorized": True}
    assert transport.codes == ["first", "second"]
    assert await client.token_manager.get_user_access_token() == "U-second"
