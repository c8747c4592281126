# taskdesk/client/api.py
"""
HTTP client for the TaskDesk API.

Credentials live on an explicit ``ApiSession`` handed to the client instead
of any global storage: login and registration fill it, logout and every 401
response clear it.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from pydantic import TypeAdapter

from taskdesk.schemas.dashboard import DashboardResponse
from taskdesk.schemas.notification import NotificationOut, NotificationWithStatus
from taskdesk.schemas.task import TaskOut
from taskdesk.schemas.user import UserOut
from taskdesk.services.task_filters import TaskFilters, apply_filters_and_sort

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

_json_body = TypeAdapter(Any)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, error: Any = None):
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(f"{status_code}: {message}")


class ApiSession:
    """Token and user of the signed-in account"""

    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[UserOut] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role.value == "admin"

    def start(self, token: str, user: UserOut):
        self.token = token
        self.user = user

    def clear(self):
        self.token = None
        self.user = None

    def headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class ApiClient:
    def __init__(self, session: ApiSession, base_url: str = "http://localhost:8000", http=None, timeout: int = DEFAULT_TIMEOUT):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> dict:
        response = self.http.request(
            method,
            f"{self.base_url}{path}",
            json=_json_body.dump_python(json, mode="json") if json is not None else None,
            params={k: v for k, v in (params or {}).items() if v is not None} or None,
            headers={"Content-Type": "application/json", **self.session.headers()},
            timeout=self.timeout,
        )

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 401:
            self.session.clear()

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message or "Request failed", error)

        return body

    # Auth

    def _start_session(self, body: dict) -> UserOut:
        user = UserOut.model_validate(body["user"])
        self.session.start(body["token"], user)
        return user

    def login(self, email: str, password: str) -> UserOut:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._start_session(body)

    def register(self, name: str, email: str, password: str, department: str, role: Optional[str] = None) -> UserOut:
        payload = {"name": name, "email": email, "password": password, "department": department}
        if role:
            payload["role"] = role
        body = self._request("POST", "/auth/register", json=payload)
        return self._start_session(body)

    def logout(self):
        self.session.clear()

    def me(self) -> UserOut:
        body = self._request("GET", "/auth/me")
        return UserOut.model_validate(body["user"])

    def list_users(self) -> List[UserOut]:
        body = self._request("GET", "/auth/users")
        return [UserOut.model_validate(user) for user in body["users"]]

    def update_user(self, user_id: int, **fields) -> UserOut:
        body = self._request("PUT", f"/auth/users/{user_id}", json=fields)
        return UserOut.model_validate(body["user"])

    def delete_user(self, user_id: int) -> str:
        return self._request("DELETE", f"/auth/users/{user_id}")["message"]

    # Tasks

    def list_tasks(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        department: Optional[str] = None,
    ) -> List[TaskOut]:
        params = {
            "status": status,
            "priority": priority,
            "startDate": start_date.isoformat() if start_date else None,
            "endDate": end_date.isoformat() if end_date else None,
            "department": department,
        }
        body = self._request("GET", "/tasks", params=params)
        return [TaskOut.model_validate(task) for task in body["tasks"]]

    def task_board(self, filters: Optional[TaskFilters] = None, sort_field: str = "dueDate", direction: str = "asc") -> List[TaskOut]:
        """All visible tasks, filtered and sorted locally the way the task page shows them"""
        return apply_filters_and_sort(self.list_tasks(), filters, sort_field, direction)

    def get_task(self, task_id: int) -> TaskOut:
        return TaskOut.model_validate(self._request("GET", f"/tasks/{task_id}")["task"])

    def create_task(self, **fields) -> TaskOut:
        return TaskOut.model_validate(self._request("POST", "/tasks", json=fields)["task"])

    def update_task(self, task_id: int, **fields) -> TaskOut:
        return TaskOut.model_validate(self._request("PUT", f"/tasks/{task_id}", json=fields)["task"])

    def delete_task(self, task_id: int) -> str:
        return self._request("DELETE", f"/tasks/{task_id}")["message"]

    def add_comment(self, task_id: int, text: str) -> TaskOut:
        body = self._request("POST", f"/tasks/{task_id}/comment", json={"text": text})
        return TaskOut.model_validate(body["task"])

    # Notifications

    def list_notifications(self) -> List[NotificationWithStatus]:
        body = self._request("GET", "/notifications")
        return [NotificationWithStatus.model_validate(item) for item in body["notifications"]]

    def create_notification(
        self,
        title: str,
        message: str,
        type: str = "info",
        is_global: bool = True,
        target_department: Optional[str] = None,
    ) -> NotificationOut:
        payload = {
            "title": title,
            "message": message,
            "type": type,
            "isGlobal": is_global,
            "targetDepartment": target_department,
        }
        body = self._request("POST", "/notifications", json=payload)
        return NotificationOut.model_validate(body["notification"])

    def mark_read(self, notification_id: int) -> str:
        return self._request("PUT", f"/notifications/{notification_id}/read")["message"]

    def delete_notification(self, notification_id: int) -> str:
        return self._request("DELETE", f"/notifications/{notification_id}")["message"]

    def unread_count(self) -> int:
        return self._request("GET", "/notifications/unread-count")["count"]

    # Dashboard

    def dashboard(self, period: str = "month", department: Optional[str] = None) -> DashboardResponse:
        body = self._request("GET", "/dashboard/stats", params={"period": period, "department": department})
        return DashboardResponse.model_validate(body)
