from __future__ import annotations

from app.domain.entities import TaskEntity
from app.domain.errors import NotFoundError, ValidationError
from app.infra.repository import TaskRepository


class TaskService:
    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    def list_tasks(self) -> list[TaskEntity]:
        return self._repo.list_tasks()

    def create_task(self, data: dict) -> TaskEntity:
        title = _clean_title(data.get("title"))
        if not title:
            raise ValidationError("Task title is required")
        return self._repo.create_task({
            "title": title,
            "description": data.get("description") or "",
        })

    def update_task(self, task_id: str, data: dict) -> TaskEntity:
        normalized = self._normalize_update(data)
        if "title" in normalized and not normalized["title"]:
            # Unknown ids are reported before an invalid title.
            if self._repo.get_task(task_id) is None:
                raise NotFoundError(task_id)
            raise ValidationError("Task title cannot be empty")

        task = self._repo.update_task(task_id, normalized)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def delete_task(self, task_id: str) -> TaskEntity:
        task = self._repo.delete_task(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def _normalize_data(self, data: dict) -> dict:
        return {key: value for key, value in data.items() if value is not None}

    def _normalize_update(self, data: dict) -> dict:
        normalized = self._normalize_data(data)
        if "title" in normalized:
            normalized["title"] = _clean_title(normalized["title"])
        if "completed" in normalized:
            normalized["completed"] = bool(normalized["completed"])
        return normalized


def _clean_title(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()
