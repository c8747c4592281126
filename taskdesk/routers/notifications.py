# taskdesk/routers/notifications.py
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from taskdesk.database import get_db, commit_or_rollback
from taskdesk.models.notification import Notification
from taskdesk.models.user import User
from taskdesk.schemas.base import MessageResponse
from taskdesk.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationListResponse,
    NotificationWithStatus,
    UnreadCountResponse,
)
from taskdesk.services import access
from taskdesk.utils import errors
from taskdesk.utils.auth import get_current_user, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def notification_query(db: Session):
    return db.query(Notification).options(
        selectinload(Notification.created_by),
        selectinload(Notification.read_by),
    )


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Broadcast a notification to everyone or to one department"""
    access.validate_notification_scope(notification.is_global, notification.target_department)

    db_notification = Notification(
        title=notification.title,
        message=notification.message,
        type=notification.type,
        is_global=notification.is_global,
        target_department=None if notification.is_global else notification.target_department,
        created_by=current_user,
    )
    db.add(db_notification)
    commit_or_rollback(db, "Could not create notification")
    db.refresh(db_notification)

    logger.info(f"Notification {db_notification.id} created by admin {current_user.id}")
    return {"notification": db_notification}


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Notifications visible to the current user with their own read status"""
    notifications = notification_query(db).filter(
        access.notification_visibility_clause(current_user)
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    items = []
    for notification in notifications:
        item = NotificationWithStatus.model_validate(notification)
        receipt = access.read_receipt(notification, current_user.id)
        item.is_read = receipt is not None
        item.read_at = receipt.read_at if receipt else None
        items.append(item)

    return {"notifications": items}


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = db.query(Notification).filter(
        access.notification_visibility_clause(current_user),
        access.unread_clause(current_user),
    ).count()
    return {"count": count}


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification = notification_query(db).filter(Notification.id == notification_id).first()
    if not notification:
        raise errors.NotFound("Notification not found")

    if access.mark_read(notification, current_user, datetime.utcnow()):
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request stored the receipt first
            db.rollback()
            logger.info(f"Notification {notification_id} already marked read by user {current_user.id}")

    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise errors.NotFound("Notification not found")

    db.delete(notification)
    commit_or_rollback(db, "Could not delete notification")

    logger.info(f"Notification {notification_id} deleted by admin {current_user.id}")
    return {"message": "Notification deleted successfully"}
