"""MCP tools for FeiShu contact departments."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import departments
from ..operations.departments import DepartmentIdType
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the department tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_department_info",
        description="Return one department: name, parent, leader, and member count.",
        annotations={"title": "Get department", "readOnlyHint": True},
    )
    async def get_feishu_department_info(
        ctx: Context,
        department_id: str,
        department_id_type: DepartmentIdType = "open_department_id",
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            departments.get_department,
            log_message=f"Fetching department {department_id}.",
            section_name="department",
            department_id=department_id,
            department_id_type=department_id_type,
        )

    @app.tool(
        name="get_feishu_departments",
        description=(
            "Return sub-departments of a department; parent_department_id '0' is the organisation root. "
            "Set fetch_child to include all descendants."
        ),
        annotations={"title": "List departments", "readOnlyHint": True},
    )
    async def get_feishu_departments(
        ctx: Context,
        parent_department_id: str = "0",
        fetch_child: bool = False,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            departments.list_departments,
            log_message=f"Listing departments under {parent_department_id}.",
            parent_department_id=parent_department_id,
            fetch_child=fetch_child,
            page_size=page_size,
            page_token=page_token,
        )


__all__ = ["register"]
