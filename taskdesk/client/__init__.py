from .api import ApiClient, ApiError, ApiSession
from .poller import UnreadCountPoller
