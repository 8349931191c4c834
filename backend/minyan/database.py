"""SQLAlchemy engine, session factory, and the request-scoped session dependency."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from minyan.config import settings
from minyan.errors import PersistenceError

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session per request and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, action: str):
    """Commit everything added inside the block as one unit.

    Store errors roll the whole unit back and surface as PersistenceError;
    nothing is retried.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store rejected write: %s", action)
        raise PersistenceError(f"Failed to {action}") from exc


def utcnow() -> datetime:
    """Timezone-aware UTC instant used for every created/updated timestamp."""
    return datetime.now(timezone.utc)
