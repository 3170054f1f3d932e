from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.api.schemas import ErrorResponse, TaskCreate, TaskResponse, TaskUpdate
from app.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


@router.get("", response_model=list[TaskResponse])
def list_tasks(service: TaskService = Depends(get_task_service)):
    """Return every task in creation order."""
    return [task.to_dict() for task in service.list_tasks()]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)):
    task = service.create_task(payload.model_dump())
    return task.to_dict()


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_task(
    task_id: str,
    payload: Optional[TaskUpdate] = None,
    service: TaskService = Depends(get_task_service),
):
    changes = payload.model_dump(exclude_unset=True) if payload is not None else {}
    task = service.update_task(task_id, changes)
    return task.to_dict()


@router.delete(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Remove a task and echo it back as it was before removal."""
    task = service.delete_task(task_id)
    return task.to_dict()
