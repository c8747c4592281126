# taskdesk/routers/dashboard.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskdesk.database import get_db
from taskdesk.models.user import User
from taskdesk.routers.tasks import filtered_tasks, department_param
from taskdesk.schemas.dashboard import DashboardResponse
from taskdesk.services import aggregation
from taskdesk.utils import errors
from taskdesk.utils.auth import get_current_admin

router = APIRouter()


@router.get("/stats", response_model=DashboardResponse)
def get_dashboard_stats(
    period: str = Query("month"),
    department: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Dashboard statistics for administrators.

    The period selects tasks due within the last week, the current month or
    the last twelve months; department narrows to tasks assigned to that
    department or to any of its employees.
    """
    if period not in aggregation.PERIODS:
        raise errors.ValidationError(f"Unknown period: {period}")

    start, end = aggregation.period_window(period, datetime.utcnow())
    department = department_param(department)

    tasks = filtered_tasks(
        db,
        current_user,
        start_date=start,
        end_date=end,
        department=department,
    )
    return aggregation.build_dashboard(tasks, period, start, end, department)
