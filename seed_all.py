"""
Master Database Seeding Script
Creates database tables and populates them with demo users, tasks and notifications
"""

import sys
from datetime import datetime, timedelta

from create_tables import create_tables
from taskdesk.config.settings import settings
from taskdesk.database import SessionLocal
from taskdesk.models import (
    Department,
    Notification,
    NotificationType,
    Task,
    TaskComment,
    TaskPriority,
    TaskStatus,
    User,
    UserRole,
)
from taskdesk.utils.security import get_password_hash

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"name": "سارة أحمد", "email": "sara@example.com", "department": Department.SOFTWARE_DEVELOPMENT},
    {"name": "عمر خالد", "email": "omar@example.com", "department": Department.SOFTWARE_DEVELOPMENT},
    {"name": "ليلى حسن", "email": "layla@example.com", "department": Department.MARKETING},
    {"name": "يوسف علي", "email": "yousef@example.com", "department": Department.HUMAN_RESOURCES},
    {"name": "نور محمود", "email": "nour@example.com", "department": Department.FINANCE},
    {"name": "كريم سعيد", "email": "karim@example.com", "department": Department.CUSTOMER_SERVICE},
    {"name": "هدى إبراهيم", "email": "huda@example.com", "department": Department.SALES},
]

# assignees are emails from DEMO_USERS; department tasks name a department instead
DEMO_TASKS = [
    {
        "title": "إصلاح صفحة تسجيل الدخول",
        "description": "معالجة خطأ انتهاء الجلسة عند تسجيل الدخول من الجوال",
        "assignees": ["sara@example.com", "omar@example.com"],
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.IN_PROGRESS,
        "progress": 40,
        "due_in_days": 3,
    },
    {
        "title": "مراجعة واجهة التقارير",
        "description": "مراجعة تصميم لوحة التقارير الجديدة",
        "assignees": ["omar@example.com"],
        "priority": TaskPriority.MEDIUM,
        "status": TaskStatus.PENDING,
        "progress": 0,
        "due_in_days": 10,
    },
    {
        "title": "حملة الربع القادم",
        "description": "إعداد خطة الحملة التسويقية للربع القادم",
        "department": Department.MARKETING,
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.PENDING,
        "progress": 0,
        "due_in_days": 14,
    },
    {
        "title": "تحديث سياسة الإجازات",
        "description": "تحديث دليل الموظفين بسياسة الإجازات الجديدة",
        "department": Department.HUMAN_RESOURCES,
        "priority": TaskPriority.LOW,
        "status": TaskStatus.COMPLETED,
        "progress": 100,
        "due_in_days": -5,
    },
    {
        "title": "إقفال الحسابات الشهرية",
        "description": "مطابقة الحسابات وإقفال الشهر",
        "assignees": ["nour@example.com"],
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.DELAYED,
        "progress": 70,
        "due_in_days": -2,
    },
    {
        "title": "الرد على شكاوى العملاء",
        "description": "معالجة الشكاوى المفتوحة منذ أكثر من أسبوع",
        "department": Department.CUSTOMER_SERVICE,
        "priority": TaskPriority.MEDIUM,
        "status": TaskStatus.IN_PROGRESS,
        "progress": 55,
        "due_in_days": 1,
    },
    {
        "title": "عرض سعر لعميل جديد",
        "description": "تجهيز عرض السعر والمتابعة مع العميل",
        "assignees": ["huda@example.com"],
        "priority": TaskPriority.LOW,
        "status": TaskStatus.COMPLETED,
        "progress": 100,
        "due_in_days": -10,
    },
]

DEMO_NOTIFICATIONS = [
    {
        "title": "مرحبا بكم",
        "message": "تم إطلاق نظام إدارة المهام الجديد",
        "type": NotificationType.SUCCESS,
        "is_global": True,
    },
    {
        "title": "صيانة مجدولة",
        "message": "سيتوقف النظام للصيانة مساء الجمعة",
        "type": NotificationType.WARNING,
        "is_global": True,
    },
    {
        "title": "اجتماع الفريق",
        "message": "اجتماع فريق التطوير صباح الأحد",
        "type": NotificationType.INFO,
        "is_global": False,
        "target_department": Department.SOFTWARE_DEVELOPMENT,
    },
]


def section(title: str):
    print(f"\n{'='*60}")
    print(f"🚀 {title}")
    print(f"{'='*60}")


def get_admin(session):
    return (
        session.query(User)
        .filter(User.email == settings.BOOTSTRAP_ADMIN_EMAIL, User.role == UserRole.ADMIN)
        .first()
    )


def seed_demo_users(session):
    """Create demo employees, one or more per department"""
    section("Creating Demo Users")
    created = 0

    for user_data in DEMO_USERS:
        if session.query(User).filter(User.email == user_data["email"]).first():
            print(f"[SKIP] User {user_data['email']} already exists, skipping...")
            continue

        session.add(User(
            name=user_data["name"],
            email=user_data["email"],
            hashed_password=get_password_hash(DEMO_PASSWORD),
            department=user_data["department"].value,
            role=UserRole.EMPLOYEE,
        ))
        created += 1
        print(f"[SUCCESS] Created user: {user_data['name']} ({user_data['department'].value})")

    session.commit()
    print(f"\n[SUCCESS] Successfully created {created} demo users!")
    return True


def seed_demo_tasks(session):
    """Create demo tasks, assigned either to employees or to a department"""
    section("Creating Demo Tasks")
    admin = get_admin(session)
    now = datetime.utcnow()
    created = 0

    for task_data in DEMO_TASKS:
        if session.query(Task).filter(Task.title == task_data["title"]).first():
            print(f"[SKIP] Task {task_data['title']} already exists, skipping...")
            continue

        task = Task(
            title=task_data["title"],
            description=task_data["description"],
            created_by=admin,
            status=task_data["status"],
            priority=task_data["priority"],
            progress=task_data["progress"],
            due_date=now + timedelta(days=task_data["due_in_days"]),
        )

        if "department" in task_data:
            task.assigned_department = task_data["department"].value
        else:
            assignees = session.query(User).filter(User.email.in_(task_data["assignees"])).all()
            if not assignees:
                print(f"[ERROR] No assignees found for task {task_data['title']}, skipping...")
                continue
            task.assigned_to = assignees

        if task.status == TaskStatus.COMPLETED:
            task.comments.append(TaskComment(author=admin, text="تم الإنجاز، شكرا"))

        session.add(task)
        created += 1
        print(f"[SUCCESS] Created task: {task_data['title']} ({task_data['status'].value})")

    session.commit()
    print(f"\n[SUCCESS] Successfully created {created} demo tasks!")
    return True


def seed_demo_notifications(session):
    """Create global and department-scoped notifications"""
    section("Creating Demo Notifications")
    admin = get_admin(session)
    created = 0

    for data in DEMO_NOTIFICATIONS:
        if session.query(Notification).filter(Notification.title == data["title"]).first():
            print(f"[SKIP] Notification {data['title']} already exists, skipping...")
            continue

        department = data.get("target_department")
        session.add(Notification(
            title=data["title"],
            message=data["message"],
            type=data["type"],
            is_global=data["is_global"],
            target_department=department.value if department else None,
            created_by=admin,
        ))
        created += 1
        print(f"[SUCCESS] Created notification: {data['title']}")

    session.commit()
    print(f"\n[SUCCESS] Successfully created {created} demo notifications!")
    return True


def main():
    """Main function to run all seeding operations"""
    print("🌱 MASTER DATABASE SEEDING SCRIPT")
    print("=" * 60)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    section("Creating Database Tables")
    try:
        create_tables()
    except Exception as e:
        print(f"[ERROR] Failed to create database tables: {e}")
        sys.exit(1)

    seeding_operations = [
        ("seed_demo_users", seed_demo_users),
        ("seed_demo_tasks", seed_demo_tasks),
        ("seed_demo_notifications", seed_demo_notifications),
    ]

    failed_operations = []
    session = SessionLocal()
    try:
        for name, operation in seeding_operations:
            try:
                operation(session)
            except Exception as e:
                session.rollback()
                print(f"[ERROR] {name} failed: {e}")
                failed_operations.append(name)
    finally:
        session.close()

    # Summary
    print(f"\n{'='*60}")
    print("📊 SEEDING SUMMARY")
    print(f"{'='*60}")
    print(f"Total Operations: {len(seeding_operations)}")
    print(f"Successful: {len(seeding_operations) - len(failed_operations)}")
    print(f"Failed: {len(failed_operations)}")

    if failed_operations:
        print(f"Failed Operations: {', '.join(failed_operations)}")
        print("\n[WARNING] Some seeding operations failed. Please check the errors above.")
        sys.exit(1)

    print("\n[SUCCESS] ALL SEEDING OPERATIONS COMPLETED SUCCESSFULLY!")
    print("\n[INFO] Login Credentials:")
    print(f"   - Admin: {settings.BOOTSTRAP_ADMIN_EMAIL} / {settings.BOOTSTRAP_ADMIN_PASSWORD}")
    print(f"   - Employees: {DEMO_PASSWORD}")
    print(f"\nCompleted at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")


if __name__ == "__main__":
    main()
