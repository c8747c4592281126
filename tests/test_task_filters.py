"""
Tests for the task board filters and sorting.
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.services.task_filters import TaskFilters, apply_filters_and_sort, filter_tasks, sort_tasks

DEV = "تطوير البرمجيات"
SALES = "المبيعات"


def task(title, status=TaskStatus.PENDING, priority=TaskPriority.MEDIUM, due=datetime(2025, 5, 1),
         department=None, assignee_departments=(), description=""):
    return SimpleNamespace(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due,
        created_at=datetime(2025, 1, 1),
        assigned_department=department,
        assigned_to=[SimpleNamespace(department=d) for d in assignee_departments],
    )


@pytest.fixture()
def board():
    return [
        task("Fix login", TaskStatus.IN_PROGRESS, TaskPriority.HIGH, datetime(2025, 5, 3), assignee_departments=[DEV]),
        task("Quarterly report", TaskStatus.PENDING, TaskPriority.LOW, datetime(2025, 5, 1), department=SALES),
        task("Call client", TaskStatus.COMPLETED, TaskPriority.MEDIUM, datetime(2025, 5, 2),
             assignee_departments=[SALES], description="Follow up on the login issue"),
    ]


class TestFilters:
    def test_no_filters_keeps_everything(self, board):
        assert filter_tasks(board, TaskFilters()) == board

    def test_search_matches_title_and_description(self, board):
        titles = [t.title for t in filter_tasks(board, TaskFilters(search="LOGIN"))]
        assert titles == ["Fix login", "Call client"]

    def test_status_and_priority(self, board):
        assert [t.title for t in filter_tasks(board, TaskFilters(status="completed"))] == ["Call client"]
        assert [t.title for t in filter_tasks(board, TaskFilters(priority="high"))] == ["Fix login"]

    def test_department_matches_assignment_or_assignee(self, board):
        titles = [t.title for t in filter_tasks(board, TaskFilters(department=SALES))]
        assert titles == ["Quarterly report", "Call client"]

    def test_due_date_matches_calendar_day(self, board):
        titles = [t.title for t in filter_tasks(board, TaskFilters(due_date=date(2025, 5, 2)))]
        assert titles == ["Call client"]


class TestSorting:
    def test_due_date_ascending_by_default(self, board):
        assert [t.title for t in sort_tasks(board)] == ["Quarterly report", "Call client", "Fix login"]

    def test_priority_descending(self, board):
        titles = [t.title for t in sort_tasks(board, "priority", "desc")]
        assert titles == ["Fix login", "Call client", "Quarterly report"]

    def test_ties_keep_their_order(self):
        first, second = task("A", priority=TaskPriority.HIGH), task("B", priority=TaskPriority.HIGH)
        assert sort_tasks([first, second], "priority", "desc") == [first, second]

    def test_filter_then_sort(self, board):
        result = apply_filters_and_sort(board, TaskFilters(department=SALES), "title", "asc")
        assert [t.title for t in result] == ["Call client", "Quarterly report"]
