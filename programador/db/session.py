import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from programador.core.config import settings
from programador.core.errors import ExternalIOError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, operation: str):
    """
    Commit everything done inside the block, or nothing.

    Database errors are rolled back and surface as ExternalIOError; any other
    exception is rolled back and re-raised unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database failure during %s", operation)
        raise ExternalIOError(f"Database failure during {operation}", {"operation": operation}) from exc
    except Exception:
        db.rollback()
        raise
