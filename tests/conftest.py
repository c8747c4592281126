"""
Shared fixtures: an in-memory database per test, seeded users and an API client.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from taskdesk.database import Base, get_db
from taskdesk.models import Department, Notification, Task, TaskPriority, TaskStatus, User, UserRole
from taskdesk.utils.security import create_user_token, get_password_hash

PASSWORD = "password123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(session, name, email, department, role=UserRole.EMPLOYEE):
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(PASSWORD),
        department=department.value,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def headers_for(user):
    return {"Authorization": f"Bearer {create_user_token(user.id)}"}


@pytest.fixture()
def admin(db_session):
    return make_user(db_session, "مدير النظام", "admin@example.com", Department.ADMINISTRATION, UserRole.ADMIN)


@pytest.fixture()
def developer(db_session):
    return make_user(db_session, "Sara", "sara@example.com", Department.SOFTWARE_DEVELOPMENT)


@pytest.fixture()
def second_developer(db_session):
    return make_user(db_session, "Omar", "omar@example.com", Department.SOFTWARE_DEVELOPMENT)


@pytest.fixture()
def marketer(db_session):
    return make_user(db_session, "Layla", "layla@example.com", Department.MARKETING)


@pytest.fixture()
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture()
def developer_headers(developer):
    return headers_for(developer)


@pytest.fixture()
def second_developer_headers(second_developer):
    return headers_for(second_developer)


@pytest.fixture()
def marketer_headers(marketer):
    return headers_for(marketer)


def make_task(session, creator, title="Task", assignees=None, department=None,
              status=TaskStatus.PENDING, priority=TaskPriority.MEDIUM, due_date=None, created_at=None):
    task = Task(
        title=title,
        description=f"{title} description",
        created_by_id=creator.id if creator else None,
        assigned_department=department.value if department else None,
        status=status,
        priority=priority,
        due_date=due_date or datetime.utcnow() + timedelta(days=3),
    )
    if created_at:
        task.created_at = created_at
    if assignees:
        task.assigned_to = [session.get(User, user.id) for user in assignees]
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def make_notification(session, creator, title="Notice", department=None):
    notification = Notification(
        title=title,
        message=f"{title} message",
        is_global=department is None,
        target_department=department.value if department else None,
        created_by_id=creator.id,
    )
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification
