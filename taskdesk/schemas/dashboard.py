from typing import List, Optional
from datetime import datetime

from taskdesk.schemas.base import CamelModel


class DashboardStats(CamelModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    delayed: int


class PriorityBucket(CamelModel):
    priority: str
    name: str
    value: int


class EmployeeStat(CamelModel):
    user_id: int
    name: str
    total: int
    completed: int
    completion_rate: float


class TrendPoint(CamelModel):
    date: str
    label: str
    total: int
    completed: int


class DashboardResponse(CamelModel):
    success: bool = True
    period: str
    department: Optional[str] = None
    start_date: datetime
    end_date: datetime
    stats: DashboardStats
    tasks_by_priority: List[PriorityBucket]
    employee_stats: List[EmployeeStat]
    tasks_trend: List[TrendPoint]
