# taskdesk/services/access.py
"""
Visibility and authorization rules for tasks, notifications and users.

Nothing in here touches the database. Requesters are any objects exposing
``id``, ``role`` and ``department`` (normally ``models.User``); tasks and
notifications are the ORM rows already loaded by the routers. The
``*_clause`` helpers build the equivalent SQLAlchemy filter expressions so
list endpoints can push the same predicate into the query.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional, Sequence, Union

from sqlalchemy import or_

from taskdesk.models.notification import Notification, NotificationRead
from taskdesk.models.task import Task
from taskdesk.models.user import User, UserRole
from taskdesk.utils import errors

logger = logging.getLogger(__name__)

# Fields an assignee may change on a task they can see
EMPLOYEE_TASK_FIELDS: FrozenSet[str] = frozenset({"status", "progress", "comments"})


def is_admin(user) -> bool:
    return user is not None and user.role == UserRole.ADMIN


def require_admin(user, message: str = "This action is restricted to administrators"):
    if not is_admin(user):
        logger.warning(f"User {getattr(user, 'id', None)} denied admin-only action")
        raise errors.Forbidden(message)


# ---------------------------------------------------------------------------
# Task assignment
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IndividualAssignment:
    user_ids: FrozenSet[int]


@dataclass(frozen=True)
class DepartmentAssignment:
    department: str


Assignment = Union[IndividualAssignment, DepartmentAssignment]


def resolve_assignment(
    assigned_to: Optional[Sequence[int]],
    assigned_department: Optional[str],
) -> Assignment:
    """Turn the two optional request fields into exactly one assignment.

    Empty lists and empty strings count as absent, which is what a client
    sends for the side of the form it did not use.
    """
    has_users = bool(assigned_to)
    has_department = bool(assigned_department)

    if has_users and has_department:
        raise errors.ValidationError("Assign the task either to employees or to a department, not both")
    if has_users:
        return IndividualAssignment(frozenset(assigned_to))
    if has_department:
        return DepartmentAssignment(assigned_department)
    raise errors.ValidationError("A task must be assigned to employees or to a department")


def resolve_assignment_update(fields: dict) -> Optional[Assignment]:
    """Assignment change requested by a partial update, if any"""
    assigned_to = fields.get("assigned_to")
    assigned_department = fields.get("assigned_department")

    if "assigned_to" in fields and assigned_to is not None and len(assigned_to) == 0:
        raise errors.ValidationError("At least one employee must be assigned to the task")
    if not assigned_to and not assigned_department:
        return None
    return resolve_assignment(assigned_to, assigned_department)


def assignee_ids(task) -> FrozenSet[int]:
    return frozenset(user.id for user in (task.assigned_to or []))


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def can_view_task(user, task) -> bool:
    if is_admin(user):
        return True
    if user.id in assignee_ids(task):
        return True
    return bool(task.assigned_department) and task.assigned_department == user.department


def ensure_can_view_task(user, task):
    # Missing permission and foreign tasks look the same to the caller
    if not can_view_task(user, task):
        logger.warning(f"User {user.id} denied access to task {task.id}")
        raise errors.Forbidden("You are not allowed to access this task")


def ensure_can_update_task(user, task, fields: Iterable[str]):
    """All-or-nothing field check for partial task updates"""
    if is_admin(user):
        return

    requested = set(fields)
    disallowed = requested - EMPLOYEE_TASK_FIELDS
    if disallowed:
        logger.warning(f"User {user.id} tried to update restricted task fields {sorted(disallowed)}")
        raise errors.Forbidden("You are not allowed to update these fields")

    ensure_can_view_task(user, task)


def task_visibility_clause(user):
    """SQL filter matching can_view_task; None when everything is visible"""
    if is_admin(user):
        return None
    return or_(
        Task.assigned_to.any(User.id == user.id),
        Task.assigned_department == user.department,
    )


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

def can_view_notification(user, notification) -> bool:
    # Role does not widen notification visibility
    if notification.is_global:
        return True
    return notification.target_department == user.department


def ensure_can_view_notification(user, notification):
    if not can_view_notification(user, notification):
        raise errors.NotFound("Notification not found")


def notification_visibility_clause(user):
    return or_(
        Notification.is_global.is_(True),
        Notification.target_department == user.department,
    )


def unread_clause(user):
    return ~Notification.read_by.any(NotificationRead.user_id == user.id)


def read_receipt(notification, user_id: int) -> Optional[NotificationRead]:
    for receipt in notification.read_by:
        if receipt.user_id == user_id:
            return receipt
    return None


def mark_read(notification, user, now: Optional[datetime] = None) -> bool:
    """Append a read receipt for ``user``; returns False when one already exists"""
    ensure_can_view_notification(user, notification)
    if read_receipt(notification, user.id) is not None:
        return False
    notification.read_by.append(NotificationRead(user_id=user.id, read_at=now or datetime.utcnow()))
    return True


def validate_notification_scope(is_global: bool, target_department: Optional[str]):
    if not is_global and not target_department:
        raise errors.ValidationError("A target department is required for non-global notifications")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def sole_assignee_task_ids(user) -> List[int]:
    """Tasks that would be left without any assignment if ``user`` went away"""
    return sorted(
        task.id for task in (getattr(user, "assigned_tasks", None) or [])
        if assignee_ids(task) == {user.id} and not task.assigned_department
    )


def ensure_can_delete_user(target, admin_count: int):
    if target.role == UserRole.ADMIN and admin_count <= 1:
        raise errors.InvariantViolation("The only administrator in the system cannot be deleted")

    orphaned = sole_assignee_task_ids(target)
    if orphaned:
        raise errors.InvariantViolation(
            "The user is the only assignee of some tasks; reassign them first",
            error={"task_ids": orphaned},
        )


def ensure_can_change_role(target, new_role, admin_count: int):
    if target.role == UserRole.ADMIN and new_role != UserRole.ADMIN and admin_count <= 1:
        raise errors.InvariantViolation("The only administrator in the system cannot be demoted")


def registration_role(requested_role, allow_admin: bool) -> UserRole:
    """Role granted by public registration"""
    if requested_role is None:
        return UserRole.EMPLOYEE
    role = UserRole(requested_role)
    if role == UserRole.ADMIN:
        if not allow_admin:
            raise errors.Forbidden("Administrator accounts cannot be created through registration")
        logger.warning("Public registration requested the admin role")
    return role
