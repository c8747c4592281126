# taskdesk/schemas/notification.py
from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from taskdesk.models.notification import NotificationType
from taskdesk.schemas.base import CamelModel, optional_department
from taskdesk.schemas.user import UserBrief

class NotificationCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    is_global: bool = True
    target_department: Optional[str] = None

    @field_validator("target_department", mode="before")
    @classmethod
    def known_department(cls, value):
        return optional_department(value)

class ReadReceiptOut(CamelModel):
    user_id: int
    read_at: datetime

class NotificationOut(CamelModel):
    id: int
    title: str
    message: str
    type: NotificationType
    created_by: Optional[UserBrief] = None
    is_global: bool
    target_department: Optional[str] = None
    read_by: List[ReadReceiptOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

class NotificationWithStatus(NotificationOut):
    """A notification as seen by one user"""
    is_read: bool = False
    read_at: Optional[datetime] = None

class NotificationResponse(CamelModel):
    success: bool = True
    notification: NotificationOut

class NotificationListResponse(CamelModel):
    success: bool = True
    notifications: List[NotificationWithStatus]

class UnreadCountResponse(CamelModel):
    success: bool = True
    count: int
