# taskdesk/services/task_filters.py
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Union

from taskdesk.models.task import TaskPriority

ALL = "all"

PRIORITY_RANK = {
    TaskPriority.HIGH.value: 3,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 1,
}

SORT_FIELDS = {
    "dueDate": "due_date",
    "priority": "priority",
    "status": "status",
    "title": "title",
    "createdAt": "created_at",
}


@dataclass
class TaskFilters:
    """Task-list filter selection; ``"all"`` or empty disables a filter"""
    search: str = ""
    status: str = ALL
    priority: str = ALL
    department: str = ALL
    due_date: Optional[Union[date, datetime]] = None


def _value(member) -> str:
    return member.value if hasattr(member, "value") else str(member)


def _active(selection: Optional[str]) -> bool:
    return bool(selection) and selection != ALL


def _as_date(moment: Union[date, datetime]) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


def in_department(task: Any, department: str) -> bool:
    if task.assigned_department == department:
        return True
    return any(getattr(user, "department", None) == department for user in task.assigned_to or [])


def filter_tasks(tasks: Sequence[Any], filters: TaskFilters) -> List[Any]:
    filtered = list(tasks)

    if filters.search:
        needle = filters.search.lower()
        filtered = [
            task for task in filtered
            if needle in (task.title or "").lower() or needle in (task.description or "").lower()
        ]

    if _active(filters.status):
        filtered = [task for task in filtered if _value(task.status) == filters.status]

    if _active(filters.priority):
        filtered = [task for task in filtered if _value(task.priority) == filters.priority]

    if _active(filters.department):
        filtered = [task for task in filtered if in_department(task, filters.department)]

    if filters.due_date is not None:
        wanted = _as_date(filters.due_date)
        filtered = [task for task in filtered if _as_date(task.due_date) == wanted]

    return filtered


def sort_tasks(tasks: Sequence[Any], field: str = "dueDate", direction: str = "asc") -> List[Any]:
    attribute = SORT_FIELDS.get(field, field)

    if attribute == "due_date":
        key = lambda task: task.due_date
    elif attribute == "priority":
        key = lambda task: PRIORITY_RANK.get(_value(task.priority), 0)
    else:
        key = lambda task: _value(getattr(task, attribute, "") or "")

    # sorted() is stable, so ties keep their fetched order in both directions
    return sorted(tasks, key=key, reverse=(direction == "desc"))


def apply_filters_and_sort(
    tasks: Sequence[Any],
    filters: Optional[TaskFilters] = None,
    field: str = "dueDate",
    direction: str = "asc",
) -> List[Any]:
    return sort_tasks(filter_tasks(tasks, filters or TaskFilters()), field, direction)
