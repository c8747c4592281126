# taskdesk/schemas/tokens.py
from taskdesk.schemas.base import CamelModel
from taskdesk.schemas.user import UserOut


class AuthResponse(CamelModel):
    success: bool = True
    user: UserOut
    token: str
