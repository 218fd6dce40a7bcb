"""Helpers for FeiShu tasks."""

import json
from collections.abc import Mapping
from typing import Any

from .common import PageResult, RequestClient, UserIdType, build_page_result, compact, page_params, require

TASKS_PATH = "/open-apis/task/v1/tasks"


def serialize_task(task: Mapping[str, Any]) -> dict[str, Any]:
    due = task.get("due") or {}
    return compact(
        {
            "id": task.get("id"),
            "summary": task.get("summary"),
            "description": task.get("description"),
            "due": due.get("time"),
            "complete_time": task.get("complete_time"),
            "creator_id": task.get("creator_id"),
            "create_time": task.get("create_time"),
            "update_time": task.get("update_time"),
        },
    )


async def list_tasks(  # noqa: PLR0913 (mirrors the list endpoint filters)
    client: RequestClient,
    *,
    start_create_time: str | None = None,
    end_create_time: str | None = None,
    task_completed: bool | None = None,
    page_size: int | None = None,
    page_token: str | None = None,
    user_id_type: UserIdType | None = None,
) -> PageResult:
    data = await client.request(
        "GET",
        TASKS_PATH,
        page_params(
            page_size,
            page_token,
            start_create_time=start_create_time,
            end_create_time=end_create_time,
            task_completed=task_completed,
            user_id_type=user_id_type,
        ),
    )
    return build_page_result(data, section_name="tasks", mapper=serialize_task)


async def create_task(  # noqa: PLR0913 (mirrors the create endpoint fields)
    client: RequestClient,
    *,
    summary: str,
    description: str | None = None,
    due_time: str | None = None,
    timezone: str = "Asia/Shanghai",
    is_all_day: bool = False,
    origin_platform: str = "feishu-mcp-server",
) -> dict[str, Any]:
    """Create a task; ``due_time`` is a Unix timestamp in seconds."""
    body: dict[str, Any] = {
        "summary": require(summary, "summary"),
        "origin": {"platform_i18n_name": json_platform_name(origin_platform)},
    }
    if description:
        body["description"] = description
    if due_time:
        body["due"] = {"time": due_time, "timezone": timezone, "is_all_day": is_all_day}
    data = await client.request("POST", TASKS_PATH, data=body)
    return serialize_task((data or {}).get("task") or {})


def json_platform_name(name: str) -> str:
    """Encode the origin platform name the way the task API expects it."""
    return json.dumps({"zh_cn": name, "en_us": name}, ensure_ascii=False)


__all__ = ["TASKS_PATH", "create_task", "json_platform_name", "list_tasks", "serialize_task"]
