"""Common utilities for MCP tool registration.

Provides the shared call path every FeiShu tool goes through: log to the MCP
client, run an operation against the shared ``ApiClient``, and translate
failures into ``ToolError`` so the agent receives an error result.
"""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any, TypeAlias

from fastmcp import Context
from fastmcp.exceptions import ToolError

from ..errors import FeishuError
from ..utils import format_error

Operation: TypeAlias = Callable[..., Awaitable[dict[str, Any]]]


def build_tool_response(
    deps: SimpleNamespace,
    data: dict[str, Any],
    section_name: str | None = None,
) -> dict[str, Any]:
    """Build a standard tool response with metadata.

    Args:
        deps: Dependencies namespace with ``get_api_client``.
        data: Result returned by the operation.
        section_name: Key to nest ``data`` under; page results are merged as is.

    Returns:
        Response dictionary with ``retrieved_at`` and ``endpoint`` metadata.

    """
    response: dict[str, Any] = {
        "retrieved_at": datetime.now(UTC).isoformat(),
        "endpoint": deps.get_api_client().endpoint,
    }
    if section_name:
        response[section_name] = data
    else:
        response.update(data)
    return response


async def run_operation(
    ctx: Context,
    deps: SimpleNamespace,
    operation: Operation,
    *,
    log_message: str,
    section_name: str | None = None,
    **arguments: Any,
) -> dict[str, Any]:
    """Run ``operation`` with the shared client and shape its result.

    Args:
        ctx: FastMCP context used for client-visible logging.
        deps: Dependencies namespace with ``get_api_client``.
        operation: Async operation taking the client first.
        log_message: Message sent to the MCP client before the call.
        section_name: Optional key to nest the result under.
        arguments: Keyword arguments forwarded to ``operation``.

    Returns:
        Tool response dictionary.

    Raises:
        ToolError: If the operation fails with a FeiShu or argument error.

    """
    await ctx.info(log_message)
    client = deps.get_api_client()
    try:
        result = await operation(client, **arguments)
    except (FeishuError, ValueError) as exc:
        message = str(format_error(exc))
        await ctx.error(message)
        raise ToolError(message) from exc
    return build_tool_response(deps, result, section_name)


__all__ = ["Operation", "build_tool_response", "run_operation"]
