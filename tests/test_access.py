"""
Tests for the visibility and authorization rules.

The rules only read attributes, so plain namespaces stand in for ORM rows.
"""

from datetime import datetime
from types import SimpleNamespace

import pytest

from taskdesk.models.user import Department, UserRole
from taskdesk.services import access
from taskdesk.utils import errors

DEV = Department.SOFTWARE_DEVELOPMENT.value
MARKETING = Department.MARKETING.value


def user(user_id, department=DEV, role=UserRole.EMPLOYEE):
    return SimpleNamespace(id=user_id, department=department, role=role)


def task(assignees=(), department=None, task_id=1):
    return SimpleNamespace(id=task_id, assigned_to=list(assignees), assigned_department=department)


def notification(is_global=True, department=None):
    return SimpleNamespace(id=1, is_global=is_global, target_department=department, read_by=[])


class TestTaskVisibility:
    """Who can see a task"""

    def test_admin_sees_everything(self):
        admin = user(1, role=UserRole.ADMIN, department=Department.ADMINISTRATION.value)
        assert access.can_view_task(admin, task(department=MARKETING))
        assert access.can_view_task(admin, task(assignees=[user(5)]))

    def test_individual_assignment_is_not_shared_with_department(self):
        a, b, c = user(1), user(2), user(3, department=MARKETING)
        shared = task(assignees=[a, c])

        assert access.can_view_task(a, shared)
        assert access.can_view_task(c, shared)
        assert not access.can_view_task(b, shared)

    def test_department_assignment(self):
        assert access.can_view_task(user(1), task(department=DEV))
        assert not access.can_view_task(user(2, department=MARKETING), task(department=DEV))

    def test_forbidden_when_not_visible(self):
        with pytest.raises(errors.Forbidden):
            access.ensure_can_view_task(user(2), task(assignees=[user(1)]))


class TestTaskUpdates:
    """All-or-nothing field check for employees"""

    def test_employee_may_change_status_progress_and_comments(self):
        me = user(1)
        access.ensure_can_update_task(me, task(assignees=[me]), {"status", "progress", "comments"})

    def test_any_other_field_rejects_the_whole_update(self):
        me = user(1)
        with pytest.raises(errors.Forbidden):
            access.ensure_can_update_task(me, task(assignees=[me]), {"status", "title"})

    def test_unknown_field_is_rejected(self):
        me = user(1)
        with pytest.raises(errors.Forbidden):
            access.ensure_can_update_task(me, task(assignees=[me]), {"foo"})

    def test_allowed_fields_still_need_visibility(self):
        with pytest.raises(errors.Forbidden):
            access.ensure_can_update_task(user(2), task(assignees=[user(1)]), {"status"})

    def test_admin_may_change_anything(self):
        admin = user(1, role=UserRole.ADMIN)
        access.ensure_can_update_task(admin, task(department=MARKETING), {"title", "assigned_to"})


class TestAssignment:
    """Exactly one of employees or department"""

    def test_individual(self):
        assignment = access.resolve_assignment([1, 2, 2], None)
        assert assignment == access.IndividualAssignment(frozenset({1, 2}))

    def test_department(self):
        assert access.resolve_assignment([], DEV) == access.DepartmentAssignment(DEV)

    def test_neither(self):
        with pytest.raises(errors.ValidationError):
            access.resolve_assignment([], None)

    def test_both(self):
        with pytest.raises(errors.ValidationError):
            access.resolve_assignment([1], DEV)

    def test_update_without_assignment_fields(self):
        assert access.resolve_assignment_update({"title": "x"}) is None

    def test_update_with_empty_assignee_list(self):
        with pytest.raises(errors.ValidationError):
            access.resolve_assignment_update({"assigned_to": []})

    def test_update_switches_to_department(self):
        assignment = access.resolve_assignment_update({"assigned_department": MARKETING})
        assert assignment == access.DepartmentAssignment(MARKETING)


class TestNotifications:
    def test_global_is_visible_to_everyone(self):
        assert access.can_view_notification(user(1, department=MARKETING), notification())

    def test_department_scope(self):
        scoped = notification(is_global=False, department=MARKETING)
        assert access.can_view_notification(user(1, department=MARKETING), scoped)
        assert not access.can_view_notification(user(2), scoped)

    def test_admin_role_does_not_widen_scope(self):
        admin = user(1, role=UserRole.ADMIN, department=Department.ADMINISTRATION.value)
        assert not access.can_view_notification(admin, notification(is_global=False, department=MARKETING))

    def test_mark_read_is_idempotent(self):
        reader = user(7)
        item = notification()
        first = datetime(2025, 1, 1, 9, 0)

        assert access.mark_read(item, reader, first) is True
        assert access.mark_read(item, reader, datetime(2025, 1, 2)) is False
        assert len(item.read_by) == 1
        assert item.read_by[0].read_at == first

    def test_mark_read_on_hidden_notification(self):
        with pytest.raises(errors.NotFound):
            access.mark_read(notification(is_global=False, department=MARKETING), user(1))

    def test_scope_requires_department(self):
        with pytest.raises(errors.ValidationError):
            access.validate_notification_scope(False, None)
        access.validate_notification_scope(True, None)


class TestUserRules:
    def test_last_admin_cannot_be_deleted(self):
        with pytest.raises(errors.InvariantViolation):
            access.ensure_can_delete_user(user(1, role=UserRole.ADMIN), admin_count=1)

    def test_admin_can_be_deleted_when_another_exists(self):
        access.ensure_can_delete_user(user(1, role=UserRole.ADMIN), admin_count=2)

    def test_sole_assignee_cannot_be_deleted(self):
        me = user(4)
        me.assigned_tasks = [task(assignees=[me], task_id=10), task(assignees=[me, user(5)], task_id=11)]

        assert access.sole_assignee_task_ids(me) == [10]
        with pytest.raises(errors.InvariantViolation):
            access.ensure_can_delete_user(me, admin_count=1)

    def test_shared_assignments_do_not_block_deletion(self):
        me = user(4)
        me.assigned_tasks = [task(assignees=[me, user(5)])]
        access.ensure_can_delete_user(me, admin_count=1)

    def test_last_admin_cannot_be_demoted(self):
        with pytest.raises(errors.InvariantViolation):
            access.ensure_can_change_role(user(1, role=UserRole.ADMIN), UserRole.EMPLOYEE, admin_count=1)

    def test_registration_defaults_to_employee(self):
        assert access.registration_role(None, allow_admin=True) == UserRole.EMPLOYEE

    def test_registration_admin_role_can_be_disabled(self):
        assert access.registration_role(UserRole.ADMIN, allow_admin=True) == UserRole.ADMIN
        with pytest.raises(errors.Forbidden):
            access.registration_role(UserRole.ADMIN, allow_admin=False)
