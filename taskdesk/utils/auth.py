# taskdesk/utils/auth.py
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from taskdesk.database import get_db
from taskdesk.models.user import User
from taskdesk.services import access
from taskdesk.utils import errors
from taskdesk.utils.security import verify_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise errors.Unauthenticated("Not authorized, please log in")

    payload = verify_token(token)
    if payload is None or payload.get("sub") is None:
        raise errors.Unauthenticated("Invalid token, please log in again")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise errors.Unauthenticated("Invalid token, please log in again")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise errors.Unauthenticated("Invalid token, please log in again")

    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    access.require_admin(current_user)
    return current_user
