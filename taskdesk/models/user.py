# taskdesk/models/user.py
from datetime import datetime
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from taskdesk.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Department(str, enum.Enum):
    SOFTWARE_DEVELOPMENT = "تطوير البرمجيات"
    MARKETING = "التسويق"
    HUMAN_RESOURCES = "الموارد البشرية"
    FINANCE = "المالية"
    CUSTOMER_SERVICE = "خدمة العملاء"
    SALES = "المبيعات"
    # Only used for the bootstrap administrator
    ADMINISTRATION = "الإدارة"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    department = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_tasks = relationship("Task", back_populates="created_by")
    assigned_tasks = relationship("Task", secondary="task_assignees", back_populates="assigned_to")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
