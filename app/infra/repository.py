from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from app.domain.entities import TaskEntity, utcnow
from app.domain.errors import StorageError

from .storage import TaskStorage

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("title", "description", "completed")


def new_task_id() -> str:
    return str(uuid.uuid4())


class TaskRepository:
    """Task collection backed by a whole-collection store.

    Each call loads the full collection, changes it in memory and writes it
    all back. Calls are serialized within the process; separate processes
    sharing the same file are not coordinated.

    Read failures yield an empty collection. Write failures are logged and,
    unless ``strict_writes`` is set, the in-memory result is still returned.
    """

    def __init__(
        self,
        storage: TaskStorage,
        *,
        strict_writes: bool = False,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._storage = storage
        self._strict_writes = strict_writes
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def list_tasks(self) -> list[TaskEntity]:
        with self._lock:
            return self._load()

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            return next((task for task in self._load() if task.id == task_id), None)

    def create_task(self, data: dict) -> TaskEntity:
        with self._lock:
            tasks = self._load()
            taken = {task.id for task in tasks}
            task_id = self._id_factory()
            while task_id in taken:
                task_id = self._id_factory()

            now = self._clock()
            task = TaskEntity(
                id=task_id,
                title=data["title"],
                description=data.get("description", ""),
                completed=False,
                created_at=now,
                updated_at=now,
            )
            tasks.append(task)
            self._save(tasks)
            logger.info("Created task id=%s", task.id)
            return task

    def update_task(self, task_id: str, data: dict) -> Optional[TaskEntity]:
        with self._lock:
            tasks = self._load()
            index = _find_index(tasks, task_id)
            if index is None:
                return None

            changes = {key: value for key, value in data.items() if key in MUTABLE_FIELDS}
            updated = replace(tasks[index], **changes, updated_at=self._clock())
            tasks[index] = updated
            self._save(tasks)
            logger.info("Updated task id=%s fields=%s", task_id, sorted(changes))
            return updated

    def delete_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            tasks = self._load()
            index = _find_index(tasks, task_id)
            if index is None:
                return None

            removed = tasks.pop(index)
            self._save(tasks)
            logger.info("Deleted task id=%s", task_id)
            return removed

    def _load(self) -> list[TaskEntity]:
        try:
            return self._storage.load()
        except StorageError as exc:
            logger.error("Error reading tasks, treating collection as empty: %s", exc)
            return []

    def _save(self, tasks: list[TaskEntity]) -> None:
        try:
            self._storage.save(tasks)
        except StorageError as exc:
            logger.error("Error writing tasks: %s", exc)
            if self._strict_writes:
                raise


def _find_index(tasks: list[TaskEntity], task_id: str) -> Optional[int]:
    return next((i for i, task in enumerate(tasks) if task.id == task_id), None)
