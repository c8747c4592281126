# taskdesk/utils/errors.py
"""
Error taxonomy shared by the routers and the access rules.

Every error carries the HTTP status it is rendered with; the handlers in
main.py turn them into the ``{"success": false, "message": ...}`` envelope.
"""

from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, please log in"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InvariantViolation(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operation would break a system invariant"


class InternalError(AppError):
    pass
