"""Helpers for FeiShu docx documents."""

from collections.abc import Mapping
from typing import Any

from .common import PageResult, RequestClient, build_page_result, compact, page_params, require

DOCUMENTS_PATH = "/open-apis/docx/v1/documents"


def serialize_document(document: Mapping[str, Any]) -> dict[str, Any]:
    return compact(
        {
            "id": document.get("document_id"),
            "title": document.get("title"),
            "revision_id": document.get("revision_id"),
        },
    )


async def get_document(client: RequestClient, *, document_id: str) -> dict[str, Any]:
    """Return document metadata."""
    data = await client.request("GET", f"{DOCUMENTS_PATH}/{require(document_id, 'document_id')}")
    return serialize_document((data or {}).get("document") or {})


async def get_document_raw_content(client: RequestClient, *, document_id: str, lang: int = 0) -> dict[str, Any]:
    """Return the plain-text content of a document."""
    data = await client.request(
        "GET",
        f"{DOCUMENTS_PATH}/{require(document_id, 'document_id')}/raw_content",
        {"lang": lang},
    )
    return {"id": document_id, "content": (data or {}).get("content", "")}


def serialize_block(block: Mapping[str, Any]) -> dict[str, Any]:
    """Keep the structural fields of a block plus its type-specific payload."""
    result = compact(
        {
            "block_id": block.get("block_id"),
            "block_type": block.get("block_type"),
            "parent_id": block.get("parent_id"),
            "children": block.get("children"),
        },
    )
    for key, value in block.items():
        if key not in result and key not in {"block_id", "block_type", "parent_id", "children"}:
            result[key] = value
    return result


async def list_document_blocks(
    client: RequestClient,
    *,
    document_id: str,
    page_size: int | None = None,
    page_token: str | None = None,
    document_revision_id: int = -1,
) -> PageResult:
    """List the blocks of a document in reading order."""
    data = await client.request(
        "GET",
        f"{DOCUMENTS_PATH}/{require(document_id, 'document_id')}/blocks",
        page_params(page_size, page_token, document_revision_id=document_revision_id),
    )
    return build_page_result(data, section_name="blocks", mapper=serialize_block)


async def create_document(
    client: RequestClient,
    *,
    title: str | None = None,
    folder_token: str | None = None,
) -> dict[str, Any]:
    """Create an empty document, optionally inside a folder."""
    data = await client.request(
        "POST",
        DOCUMENTS_PATH,
        data=compact({"title": title, "folder_token": folder_token}),
    )
    return serialize_document((data or {}).get("document") or {})


__all__ = [
    "DOCUMENTS_PATH",
    "create_document",
    "get_document",
    "get_document_raw_content",
    "list_document_blocks",
    "serialize_block",
    "serialize_document",
]
