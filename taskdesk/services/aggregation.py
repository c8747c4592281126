# taskdesk/services/aggregation.py
"""
Dashboard statistics computed from an in-memory list of tasks.

The caller is responsible for fetching the tasks under the requester's
visibility filter; everything here is a pure transform and keeps no state.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from taskdesk.models.task import TaskPriority, TaskStatus

PERIODS = ("week", "month", "year")

PRIORITY_LABELS = [
    (TaskPriority.HIGH, "عالية"),
    (TaskPriority.MEDIUM, "متوسطة"),
    (TaskPriority.LOW, "منخفضة"),
]


def _value(member) -> str:
    return member.value if hasattr(member, "value") else str(member)


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = moment.day
    # Clamp to the last day of the target month
    while True:
        try:
            return moment.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


def period_window(period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Start and end of the dashboard window ending at ``now``"""
    end = now or datetime.utcnow()
    if period == "week":
        start = end - timedelta(days=7)
    elif period == "year":
        start = _months_back(end, 12)
    else:
        start = end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, end


def basic_counts(tasks: Iterable[Any]) -> Dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    total = 0
    for task in tasks:
        total += 1
        key = _value(task.status)
        counts[key] = counts.get(key, 0) + 1

    return {
        "total": total,
        "pending": counts[TaskStatus.PENDING.value],
        "in_progress": counts[TaskStatus.IN_PROGRESS.value],
        "completed": counts[TaskStatus.COMPLETED.value],
        "delayed": counts[TaskStatus.DELAYED.value],
    }


def priority_distribution(tasks: Iterable[Any]) -> List[Dict[str, Any]]:
    counts = {priority.value: 0 for priority in TaskPriority}
    for task in tasks:
        key = _value(task.priority)
        counts[key] = counts.get(key, 0) + 1

    return [
        {"priority": priority.value, "name": label, "value": counts[priority.value]}
        for priority, label in PRIORITY_LABELS
    ]


def completion_rate(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed / total * 100


def employee_performance(tasks: Iterable[Any]) -> List[Dict[str, Any]]:
    """Per-assignee totals, in order of first appearance"""
    employees: Dict[int, Dict[str, Any]] = {}
    for task in tasks:
        done = _value(task.status) == TaskStatus.COMPLETED.value
        for user in task.assigned_to or []:
            entry = employees.setdefault(
                user.id,
                {"user_id": user.id, "name": user.name, "total": 0, "completed": 0},
            )
            entry["total"] += 1
            if done:
                entry["completed"] += 1

    for entry in employees.values():
        entry["completion_rate"] = completion_rate(entry["completed"], entry["total"])
    return list(employees.values())


def tasks_trend(tasks: Iterable[Any]) -> List[Dict[str, Any]]:
    """Tasks created per calendar day, oldest day first"""
    buckets: Dict[str, Dict[str, Any]] = {}
    for task in tasks:
        day = task.created_at.date()
        key = day.isoformat()
        bucket = buckets.setdefault(
            key,
            {"date": key, "label": day.strftime("%d/%m"), "total": 0, "completed": 0},
        )
        bucket["total"] += 1
        if _value(task.status) == TaskStatus.COMPLETED.value:
            bucket["completed"] += 1

    return [buckets[key] for key in sorted(buckets)]


def build_dashboard(
    tasks: List[Any],
    period: str,
    start: datetime,
    end: datetime,
    department: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "period": period,
        "department": department,
        "start_date": start,
        "end_date": end,
        "stats": basic_counts(tasks),
        "tasks_by_priority": priority_distribution(tasks),
        "employee_stats": employee_performance(tasks),
        "tasks_trend": tasks_trend(tasks),
    }
