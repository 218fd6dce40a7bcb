"""MCP tools for FeiShu tasks."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import tasks
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the task tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_tasks",
        description="Return tasks created by or assigned to the bot, optionally only completed or open ones.",
        annotations={"title": "List tasks", "readOnlyHint": True},
    )
    async def get_feishu_tasks(
        ctx: Context,
        task_completed: bool | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            tasks.list_tasks,
            log_message="Listing FeiShu tasks.",
            task_completed=task_completed,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="create_feishu_task",
        description="Create a task. due_time is a Unix timestamp in seconds.",
        annotations={"title": "Create task", "readOnlyHint": False},
    )
    async def create_feishu_task(
        ctx: Context,
        summary: str,
        description: str | None = None,
        due_time: str | None = None,
        timezone: str = "Asia/Shanghai",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            tasks.create_task,
            log_message=f"Creating task {summary!r}.",
            section_name="task",
            summary=summary,
            description=description,
            due_time=due_time,
            timezone=timezone,
        )


__all__ = ["register"]
