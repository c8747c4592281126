from .base import CamelModel, MessageResponse
from .user import UserCreate, UserLogin, UserUpdate, UserBrief, UserOut, UserResponse, UserListResponse
from .tokens import AuthResponse
from .task import CommentIn, CommentOut, TaskCreate, TaskUpdate, TaskOut, TaskResponse, TaskListResponse
from .notification import NotificationCreate, NotificationOut, NotificationWithStatus, NotificationResponse, NotificationListResponse, UnreadCountResponse, ReadReceiptOut
from .dashboard import DashboardStats, PriorityBucket, EmployeeStat, TrendPoint, DashboardResponse
