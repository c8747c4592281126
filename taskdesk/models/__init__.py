from .user import User, UserRole, Department
from .task import Task, TaskComment, TaskStatus, TaskPriority, task_assignees
from .notification import Notification, NotificationRead, NotificationType
