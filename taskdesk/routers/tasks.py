# taskdesk/routers/tasks.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from taskdesk.database import get_db, commit_or_rollback
from taskdesk.models.task import Task, TaskComment, TaskPriority, TaskStatus
from taskdesk.models.user import User
from taskdesk.schemas.base import MessageResponse, as_naive_utc, optional_department
from taskdesk.schemas.task import CommentIn, TaskCreate, TaskUpdate, TaskResponse, TaskListResponse
from taskdesk.services import access
from taskdesk.utils import errors
from taskdesk.utils.auth import get_current_user, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def task_query(db: Session):
    return db.query(Task).options(
        selectinload(Task.assigned_to),
        selectinload(Task.created_by),
        selectinload(Task.comments).selectinload(TaskComment.author),
    )


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = task_query(db).filter(Task.id == task_id).first()
    if not task:
        raise errors.NotFound("Task not found")
    return task


def load_assignees(db: Session, user_ids) -> List[User]:
    users = db.query(User).filter(User.id.in_(user_ids)).all()
    missing = set(user_ids) - {user.id for user in users}
    if missing:
        raise errors.ValidationError(f"Unknown users: {sorted(missing)}")
    return users


def apply_assignment(db: Session, task: Task, assignment: access.Assignment):
    if isinstance(assignment, access.IndividualAssignment):
        task.assigned_to = load_assignees(db, assignment.user_ids)
        task.assigned_department = None
    else:
        task.assigned_to = []
        task.assigned_department = assignment.department


def merge_comments(task: Task, submitted: List[CommentIn], author: User) -> List[TaskComment]:
    """The submitted list replaces the stored one.

    Entries carrying the id of a stored comment keep its author and timestamp;
    entries without an id are new comments by ``author``.
    """
    stored = {comment.id: comment for comment in task.comments}
    merged = []
    for entry in submitted:
        if entry.id is None:
            merged.append(TaskComment(text=entry.text, author_id=author.id))
            continue
        comment = stored.get(entry.id)
        if comment is None:
            raise errors.ValidationError(f"Unknown comment: {entry.id}")
        comment.text = entry.text
        merged.append(comment)
    return merged


def filtered_tasks(
    db: Session,
    current_user: User,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    department: Optional[str] = None,
) -> List[Task]:
    """Tasks visible to ``current_user`` narrowed by the list filters, newest first"""
    query = task_query(db)

    visibility = access.task_visibility_clause(current_user)
    if visibility is not None:
        query = query.filter(visibility)

    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)

    # Due date window applies only when both ends are given
    if start_date and end_date:
        query = query.filter(Task.due_date >= start_date, Task.due_date <= end_date)

    if department:
        query = query.filter(
            or_(
                Task.assigned_department == department,
                Task.assigned_to.any(User.department == department),
            )
        )

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def department_param(department: Optional[str]) -> Optional[str]:
    if department in (None, "", "all"):
        return None
    try:
        return optional_department(department)
    except ValueError:
        raise errors.ValidationError(f"Unknown department: {department}")


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    assignment = access.resolve_assignment(task.assigned_to, task.assigned_department)

    db_task = Task(
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        progress=task.progress,
        created_by=current_user,
    )
    apply_assignment(db, db_task, assignment)

    db.add(db_task)
    commit_or_rollback(db, "Could not create task")

    logger.info(f"Task {db_task.id} created by admin {current_user.id}")
    return {"task": get_task_or_404(db, db_task.id)}


@router.get("", response_model=TaskListResponse)
def get_tasks(
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    department: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    tasks = filtered_tasks(
        db,
        current_user,
        status=status,
        priority=priority,
        start_date=as_naive_utc(start_date),
        end_date=as_naive_utc(end_date),
        department=department_param(department),
    )
    return {"count": len(tasks), "tasks": tasks}


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = get_task_or_404(db, task_id)
    access.ensure_can_view_task(current_user, task)
    return {"task": task}


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = get_task_or_404(db, task_id)
    access.ensure_can_update_task(current_user, task, task_update.requested_fields())

    update_data = task_update.model_dump(exclude_unset=True)
    assignment = access.resolve_assignment_update(update_data)

    if assignment is not None:
        apply_assignment(db, task, assignment)

    for field in ("title", "description", "status", "priority", "due_date", "progress"):
        if field in update_data and update_data[field] is not None:
            setattr(task, field, update_data[field])

    if task_update.comments is not None:
        task.comments = merge_comments(task, task_update.comments, current_user)

    commit_or_rollback(db, "Could not update task")

    logger.info(f"Task {task.id} updated by user {current_user.id}: {sorted(task_update.model_fields_set)}")
    return {"task": get_task_or_404(db, task_id)}


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise errors.NotFound("Task not found")

    db.delete(task)
    commit_or_rollback(db, "Could not delete task")

    logger.info(f"Task {task_id} deleted by admin {current_user.id}")
    return {"message": "Task deleted successfully"}


@router.post("/{task_id}/comment", response_model=TaskResponse)
def add_comment(
    task_id: int,
    comment: CommentIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = get_task_or_404(db, task_id)
    access.ensure_can_view_task(current_user, task)

    task.comments.append(TaskComment(text=comment.text, author_id=current_user.id))
    commit_or_rollback(db, "Could not add comment")

    return {"task": get_task_or_404(db, task_id)}
