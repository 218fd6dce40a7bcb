"""Helpers for FeiShu contact departments."""

from collections.abc import Mapping
from typing import Any, Literal

from .common import PageResult, RequestClient, UserIdType, build_page_result, compact, page_params, require

DEPARTMENTS_PATH = "/open-apis/contact/v3/departments"

DepartmentIdType = Literal["department_id", "open_department_id"]


def serialize_department(department: Mapping[str, Any]) -> dict[str, Any]:
    status = department.get("status") or {}
    return compact(
        {
            "id": department.get("open_department_id"),
            "department_id": department.get("department_id"),
            "name": department.get("name"),
            "parent_id": department.get("parent_department_id"),
            "leader_user_id": department.get("leader_user_id"),
            "member_count": department.get("member_count"),
            "order": department.get("order"),
            "is_deleted": status.get("is_deleted"),
        },
    )


async def get_department(
    client: RequestClient,
    *,
    department_id: str,
    department_id_type: DepartmentIdType = "open_department_id",
    user_id_type: UserIdType = "open_id",
) -> dict[str, Any]:
    data = await client.request(
        "GET",
        f"{DEPARTMENTS_PATH}/{require(department_id, 'department_id')}",
        {"department_id_type": department_id_type, "user_id_type": user_id_type},
    )
    return serialize_department((data or {}).get("department") or {})


async def list_departments(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    parent_department_id: str = "0",
    department_id_type: DepartmentIdType = "open_department_id",
    fetch_child: bool = False,
    user_id_type: UserIdType = "open_id",
    page_size: int | None = None,
    page_token: str | None = None,
) -> PageResult:
    """List sub-departments of ``parent_department_id`` (``"0"`` is the root)."""
    data = await client.request(
        "GET",
        DEPARTMENTS_PATH,
        page_params(
            page_size,
            page_token,
            parent_department_id=parent_department_id,
            department_id_type=department_id_type,
            fetch_child=fetch_child,
            user_id_type=user_id_type,
        ),
    )
    return build_page_result(data, section_name="departments", mapper=serialize_department)


__all__ = ["DEPARTMENTS_PATH", "DepartmentIdType", "get_department", "list_departments", "serialize_department"]
