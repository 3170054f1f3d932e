from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from app.domain.entities import TaskEntity
from app.domain.errors import StorageError

logger = logging.getLogger(__name__)


class TaskStorage(Protocol):
    def load(self) -> list[TaskEntity]: ...

    def save(self, tasks: list[TaskEntity]) -> None: ...


class JsonFileStorage:
    """Whole collection kept in one pretty-printed JSON array.

    Every save rewrites the file in full; there is no journal or backup.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[TaskEntity]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else []
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc

        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"Expected a JSON array in {self.path}, got {type(data).__name__}")
        try:
            return [TaskEntity.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Malformed task record in {self.path}: {exc!r}") from exc

    def save(self, tasks: list[TaskEntity]) -> None:
        payload = json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc


class InMemoryStorage:
    def __init__(self, tasks: list[TaskEntity] | None = None) -> None:
        self.tasks: list[TaskEntity] = list(tasks or [])
        self.saves = 0

    def load(self) -> list[TaskEntity]:
        return list(self.tasks)

    def save(self, tasks: list[TaskEntity]) -> None:
        self.tasks = list(tasks)
        self.saves += 1


def init_storage(storage: JsonFileStorage) -> None:
    if storage.exists():
        return
    storage.save([])
    logger.info("Created empty task file at %s", storage.path)
