"""MCP tools for FeiShu multi-dimensional sheets (bitable).

Every tool addresses a sheet by its ``app_token``; table-level tools also
need a ``table_id`` (see ``get_feishu_sheet_tables``).
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import sheets
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:  # noqa: PLR0915 (one closure per tool)
    """Register the sheet tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_sheet_meta",
        description="Return the name, revision, and time zone of a multi-dimensional sheet.",
        annotations={"title": "Get sheet metadata", "readOnlyHint": True},
    )
    async def get_feishu_sheet_meta(ctx: Context, app_token: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.get_app,
            log_message=f"Fetching sheet {app_token}.",
            section_name="sheet",
            app_token=app_token,
        )

    @app.tool(
        name="get_feishu_sheet_tables",
        description="Return the tables of a multi-dimensional sheet.",
        annotations={"title": "List sheet tables", "readOnlyHint": True},
    )
    async def get_feishu_sheet_tables(
        ctx: Context,
        app_token: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.list_tables,
            log_message=f"Listing tables of sheet {app_token}.",
            app_token=app_token,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_sheet_views",
        description="Return the views defined on a sheet table.",
        annotations={"title": "List table views", "readOnlyHint": True},
    )
    async def get_feishu_sheet_views(
        ctx: Context,
        app_token: str,
        table_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.list_views,
            log_message=f"Listing views of table {table_id}.",
            app_token=app_token,
            table_id=table_id,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_sheet_records",
        description=(
            "Return records of a sheet table. filter uses FeiShu formula syntax, "
            'e.g. CurrentValue.[Status]="Done"; field_names limits the returned fields.'
        ),
        annotations={"title": "List table records", "readOnlyHint": True},
    )
    async def get_feishu_sheet_records(  # noqa: PLR0913 (tool arguments mirror the endpoint)
        ctx: Context,
        app_token: str,
        table_id: str,
        view_id: str | None = None,
        filter: str | None = None,  # noqa: A002 (FeiShu query parameter name)
        field_names: list[str] | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.list_records,
            log_message=f"Listing records of table {table_id}.",
            app_token=app_token,
            table_id=table_id,
            view_id=view_id,
            filter_formula=filter,
            field_names=field_names,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="get_feishu_sheet_record",
        description="Return one record of a sheet table.",
        annotations={"title": "Get table record", "readOnlyHint": True},
    )
    async def get_feishu_sheet_record(ctx: Context, app_token: str, table_id: str, record_id: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.get_record,
            log_message=f"Fetching record {record_id}.",
            section_name="record",
            app_token=app_token,
            table_id=table_id,
            record_id=record_id,
        )

    @app.tool(
        name="create_feishu_sheet_record",
        description="Insert a record into a sheet table. fields maps field names to values.",
        annotations={"title": "Create table record", "readOnlyHint": False},
    )
    async def create_feishu_sheet_record(
        ctx: Context,
        app_token: str,
        table_id: str,
        fields: dict[str, Any],
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.create_record,
            log_message=f"Creating record in table {table_id}.",
            section_name="record",
            app_token=app_token,
            table_id=table_id,
            fields=fields,
        )

    @app.tool(
        name="update_feishu_sheet_record",
        description="Update the given fields of a sheet record; other fields keep their values.",
        annotations={"title": "Update table record", "readOnlyHint": False},
    )
    async def update_feishu_sheet_record(
        ctx: Context,
        app_token: str,
        table_id: str,
        record_id: str,
        fields: dict[str, Any],
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.update_record,
            log_message=f"Updating record {record_id}.",
            section_name="record",
            app_token=app_token,
            table_id=table_id,
            record_id=record_id,
            fields=fields,
        )

    @app.tool(
        name="delete_feishu_sheet_record",
        description="Delete one record from a sheet table.",
        annotations={"title": "Delete table record", "readOnlyHint": False, "destructiveHint": True},
    )
    async def delete_feishu_sheet_record(ctx: Context, app_token: str, table_id: str, record_id: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            sheets.delete_record,
            log_message=f"Deleting record {record_id}.",
            section_name="record",
            app_token=app_token,
            table_id=table_id,
            record_id=record_id,
        )


__all__ = ["register"]
