from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from taskdesk.models.user import Department, UserRole
from taskdesk.schemas.base import CamelModel, optional_department


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    department: Department
    role: Optional[UserRole] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("email", "role", mode="before")
    @classmethod
    def blank_as_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("department", mode="before")
    @classmethod
    def known_department(cls, value):
        return optional_department(value)


class UserBrief(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    department: Optional[str] = None


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    department: str
    role: UserRole
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserResponse(CamelModel):
    success: bool = True
    user: UserOut


class UserListResponse(CamelModel):
    success: bool = True
    users: List[UserOut]
