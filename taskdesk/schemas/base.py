from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from taskdesk.models.user import Department


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire"""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class MessageResponse(CamelModel):
    success: bool = True
    message: str


def optional_department(value) -> Optional[str]:
    """Blank department fields count as "not set"; others must be known departments"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return Department(value).value


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
