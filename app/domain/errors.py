from __future__ import annotations


class TaskError(Exception):
    """Base class for errors raised by the task store."""


class ValidationError(TaskError):
    pass


class NotFoundError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class StorageError(TaskError):
    """Reading or writing the persisted collection failed."""
