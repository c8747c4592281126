# create_tables.py
import sys

from taskdesk.config.settings import settings
from taskdesk.database import Base, SessionLocal, engine
from taskdesk.models import Department, User, UserRole
from taskdesk.utils.security import get_password_hash


def create_tables(drop_existing: bool = False):
    """Create all tables, optionally dropping the existing ones first"""
    try:
        if drop_existing:
            Base.metadata.drop_all(bind=engine)
            print("🗑️  Existing tables dropped")

        Base.metadata.create_all(bind=engine)
        print("✅ All tables created successfully!")

        create_default_admin()

    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


def create_default_admin():
    """Create the bootstrap admin user from the BOOTSTRAP_ADMIN_* settings"""
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == settings.BOOTSTRAP_ADMIN_EMAIL).first()
        if existing:
            print("ℹ️  Admin user already exists")
            return existing

        admin = User(
            name=settings.BOOTSTRAP_ADMIN_NAME,
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
            hashed_password=get_password_hash(settings.BOOTSTRAP_ADMIN_PASSWORD),
            department=Department.ADMINISTRATION.value,
            role=UserRole.ADMIN,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        print("✅ Default admin user created!")
        print(f"   Email: {settings.BOOTSTRAP_ADMIN_EMAIL}")
        print(f"   Password: {settings.BOOTSTRAP_ADMIN_PASSWORD}")
        return admin
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_tables(drop_existing="--drop" in sys.argv)
