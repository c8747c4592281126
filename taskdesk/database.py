import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from taskdesk.config.settings import settings
from taskdesk.utils import errors

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=settings.connect_args(),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Imported wherever a DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_rollback(db: Session, message: str):
    """Commit the unit of work; store failures surface as InternalError"""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(message)
        raise errors.InternalError(message, error=str(e))
