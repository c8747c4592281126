# taskdesk/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from taskdesk.config.settings import settings
from taskdesk.database import get_db, commit_or_rollback
from taskdesk.models.user import User, UserRole, Department
from taskdesk.schemas.base import MessageResponse
from taskdesk.schemas.tokens import AuthResponse
from taskdesk.schemas.user import UserCreate, UserLogin, UserUpdate, UserResponse, UserListResponse
from taskdesk.services import access
from taskdesk.utils import errors
from taskdesk.utils.auth import get_current_user, get_current_admin
from taskdesk.utils.security import get_password_hash, verify_password, create_user_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_payload(user: User) -> dict:
    return {"user": user, "token": create_user_token(user.id)}


def _admin_count(db: Session) -> int:
    return db.query(User).filter(User.role == UserRole.ADMIN).count()


@router.post("/create-admin", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def create_admin(response: Response, db: Session = Depends(get_db)):
    """Create the first administrator; refused once any admin exists"""
    if db.query(User).filter(User.role == UserRole.ADMIN).first():
        raise errors.ValidationError("An administrator already exists")

    existing_user = db.query(User).filter(User.email == settings.BOOTSTRAP_ADMIN_EMAIL).first()
    if existing_user:
        # Promote the account that already holds the bootstrap email
        existing_user.role = UserRole.ADMIN
        existing_user.name = settings.BOOTSTRAP_ADMIN_NAME
        existing_user.department = Department.ADMINISTRATION.value
        commit_or_rollback(db, "Could not create administrator")
        db.refresh(existing_user)
        logger.info(f"Promoted user {existing_user.id} to bootstrap administrator")
        response.status_code = status.HTTP_200_OK
        return _auth_payload(existing_user)

    admin = User(
        name=settings.BOOTSTRAP_ADMIN_NAME,
        email=settings.BOOTSTRAP_ADMIN_EMAIL,
        hashed_password=get_password_hash(settings.BOOTSTRAP_ADMIN_PASSWORD),
        department=Department.ADMINISTRATION.value,
        role=UserRole.ADMIN,
    )
    db.add(admin)
    commit_or_rollback(db, "Could not create administrator")
    db.refresh(admin)

    logger.info(f"Bootstrap administrator created with ID {admin.id}")
    return _auth_payload(admin)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    existing_user = db.query(User).filter(User.email == user.email).first()
    if existing_user:
        raise errors.ValidationError("Email already registered")

    role = access.registration_role(user.role, settings.ALLOW_ADMIN_SELF_REGISTRATION)

    new_user = User(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        department=user.department.value,
        role=role,
    )
    db.add(new_user)
    commit_or_rollback(db, "Could not register user")
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id} ({new_user.role.value})")
    return _auth_payload(new_user)


@router.post("/login", response_model=AuthResponse)
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    if not db_user or not verify_password(user.password, db_user.hashed_password):
        raise errors.Unauthenticated("Invalid email or password")

    return _auth_payload(db_user)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.get("/users", response_model=UserListResponse)
def get_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return {"users": db.query(User).order_by(User.id).all()}


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise errors.NotFound("User not found")

    if user_update.email and user_update.email != db_user.email:
        existing_user = db.query(User).filter(
            User.email == user_update.email,
            User.id != user_id
        ).first()
        if existing_user:
            raise errors.ValidationError("Email already registered")

    if user_update.role is not None:
        access.ensure_can_change_role(db_user, user_update.role, _admin_count(db))

    # Empty values leave the stored field unchanged
    db_user.name = user_update.name or db_user.name
    db_user.email = user_update.email or db_user.email
    db_user.department = user_update.department or db_user.department
    db_user.role = user_update.role or db_user.role

    commit_or_rollback(db, "Could not update user")
    db.refresh(db_user)

    logger.info(f"User {db_user.id} updated by admin {current_user.id}")
    return {"user": db_user}


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise errors.NotFound("User not found")

    access.ensure_can_delete_user(db_user, _admin_count(db))

    db.delete(db_user)
    commit_or_rollback(db, "Could not delete user")

    logger.info(f"User {user_id} deleted by admin {current_user.id}")
    return {"message": "User deleted successfully"}
