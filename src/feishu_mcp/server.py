"""Entry point for the FeiShu MCP server.

This module wires together the FastMCP app and registers tools. Resource logic
lives under ``feishu_mcp/operations`` and tool wrappers under
``feishu_mcp/tools``; every tool shares one ``ApiClient`` and therefore one
token cache.

Registered tool families:
- messages: send, reply, edit, forward, list, and read receipts
- chats: search, list, inspect, create, update, and add members
- documents: metadata, raw text, blocks, and creation
- sheets: bitable metadata, tables, views, and record CRUD
- calendars and tasks
- users and departments (user search runs with a user token)
- auth: OAuth authorization URL and code exchange
"""

import logging
import signal
import sys
from collections.abc import Sequence
from functools import cache
from types import SimpleNamespace
from typing import Literal

from fastmcp import FastMCP

from .client.api_client import ApiClient
from .config import FeishuConfig
from .log import LoggerLevel, LoggerProxy, select_logging_sink
from .tools import auth, calendars, chats, departments, documents, messages, sheets, tasks, users

logger = logging.getLogger("feishu_mcp.server")

app = FastMCP(
    name="feishu-mcp-server",
    instructions=(
        "Expose tools that act on a FeiShu (Lark) tenant as a bot: messages, chats, documents, "
        "multi-dimensional sheets, calendars, tasks, users, and departments."
    ),
)


@cache
def get_config() -> FeishuConfig:
    """Load the configuration once from the environment."""
    return FeishuConfig.from_env()


@cache
def get_api_client() -> ApiClient:
    """Return the process-wide API client, creating it on first use."""
    config = get_config()
    client_logger = LoggerProxy(logging.getLogger("feishu_mcp.client"), LoggerLevel.from_name(config.log_level))
    return ApiClient.from_config(config, logger=client_logger)


def _register_capabilities() -> None:
    """Register every tool module with the app instance."""
    deps = SimpleNamespace(get_api_client=get_api_client)
    for module in (messages, chats, documents, sheets, calendars, tasks, users, departments, auth):
        module.register(app, deps=deps)


# Register all capabilities with the app instance (after function is defined)
_register_capabilities()


def resolve_transport(argv: Sequence[str], config: FeishuConfig) -> Literal["stdio", "sse"]:
    """Return the run mode: ``--stdio`` on the command line wins over configuration."""
    if "--stdio" in argv:
        return "stdio"
    return config.transport


def handle_interrupt(signum: int, frame: object) -> None:  # noqa: ARG001
    """Handle keyboard interrupt gracefully."""
    logger.info("Received interrupt signal, shutting down...")
    sys.exit(0)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the feishu-mcp-server console script."""
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)

    config = get_config()
    transport = resolve_transport(sys.argv[1:] if argv is None else argv, config)
    select_logging_sink(transport).configure(LoggerLevel.from_name(config.log_level).stdlib_level)

    if transport == "stdio":
        app.run(transport="stdio")
        return

    logger.info("Starting FeiShu MCP server with configuration %s", config.describe())
    app.run(transport="sse", host=config.host, port=config.port)


__all__ = [
    "app",
    "get_api_client",
    "get_config",
    "handle_interrupt",
    "main",
    "resolve_transport",
]


if __name__ == "__main__":
    main()
