"""MCP tools for FeiShu docx documents."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from ..operations import documents
from .common import run_operation


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the document tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_api_client``.

    """

    @app.tool(
        name="get_feishu_document",
        description="Return the title and revision of a docx document.",
        annotations={"title": "Get document", "readOnlyHint": True},
    )
    async def get_feishu_document(ctx: Context, document_id: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            documents.get_document,
            log_message=f"Fetching document {document_id}.",
            section_name="document",
            document_id=document_id,
        )

    @app.tool(
        name="get_feishu_document_raw",
        description="Return the plain-text content of a docx document.",
        annotations={"title": "Get document text", "readOnlyHint": True},
    )
    async def get_feishu_document_raw(ctx: Context, document_id: str) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            documents.get_document_raw_content,
            log_message=f"Fetching raw content of document {document_id}.",
            section_name="document",
            document_id=document_id,
        )

    @app.tool(
        name="get_feishu_document_blocks",
        description="Return the structured blocks of a docx document, one page at a time.",
        annotations={"title": "List document blocks", "readOnlyHint": True},
    )
    async def get_feishu_document_blocks(
        ctx: Context,
        document_id: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            documents.list_document_blocks,
            log_message=f"Listing blocks of document {document_id}.",
            document_id=document_id,
            page_size=page_size,
            page_token=page_token,
        )

    @app.tool(
        name="create_feishu_document",
        description="Create an empty docx document, optionally in the folder identified by folder_token.",
        annotations={"title": "Create document", "readOnlyHint": False},
    )
    async def create_feishu_document(
        ctx: Context,
        title: str | None = None,
        folder_token: str | None = None,
    ) -> dict[str, Any]:
        return await run_operation(
            ctx,
            deps,
            documents.create_document,
            log_message=f"Creating document {title!r}.",
            section_name="document",
            title=title,
            folder_token=folder_token,
        )


__all__ = ["register"]
