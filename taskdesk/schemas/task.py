from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.schemas.base import CamelModel, as_naive_utc, optional_department
from taskdesk.schemas.user import UserBrief


class CommentIn(CamelModel):
    """A comment as submitted; ``id`` refers to a comment already stored on the task"""
    id: Optional[int] = None
    text: str = Field(..., min_length=1)


class CommentOut(CamelModel):
    id: int
    text: str
    author: Optional[UserBrief] = None
    created_at: datetime


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    assigned_to: List[int] = []
    assigned_department: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime
    progress: int = Field(0, ge=0, le=100)

    @field_validator("assigned_department", mode="before")
    @classmethod
    def known_department(cls, value):
        return optional_department(value)

    @field_validator("due_date")
    @classmethod
    def stored_as_utc(cls, value):
        return as_naive_utc(value)


class TaskUpdate(CamelModel):
    """Partial update; unknown keys are kept so the field-set check can see them"""

    model_config = {**CamelModel.model_config, "extra": "allow"}

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    assigned_to: Optional[List[int]] = None
    assigned_department: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    comments: Optional[List[CommentIn]] = None

    @field_validator("assigned_department", mode="before")
    @classmethod
    def known_department(cls, value):
        return optional_department(value)

    @field_validator("due_date")
    @classmethod
    def stored_as_utc(cls, value):
        return as_naive_utc(value)

    def requested_fields(self) -> set:
        """Every key present in the request body"""
        return set(self.model_fields_set) | set(self.model_extra or {})


class TaskOut(CamelModel):
    id: int
    title: str
    description: str
    assigned_to: List[UserBrief] = []
    assigned_department: Optional[str] = None
    created_by: Optional[UserBrief] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    comments: List[CommentOut] = []
    progress: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class TaskResponse(CamelModel):
    success: bool = True
    task: TaskOut


class TaskListResponse(CamelModel):
    success: bool = True
    count: int
    tasks: List[TaskOut]
