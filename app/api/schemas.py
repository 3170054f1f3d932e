"""Request and response bodies for the task endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskCreate(BaseModel):
    title: str = Field(..., description="Task title; must not be blank")
    description: Optional[str] = Field(default=None, description="Free text, defaults to empty")


class TaskUpdate(BaseModel):
    """Only the fields present in the body are changed."""

    title: Optional[str] = Field(default=None, description="New title; must not be blank")
    description: Optional[str] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    completed: bool
    created_at: str = Field(..., alias="createdAt", description="ISO 8601, UTC")
    updated_at: str = Field(..., alias="updatedAt", description="ISO 8601, UTC")


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
