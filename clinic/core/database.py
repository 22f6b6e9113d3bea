from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging
import redis
from .config import settings
from .errors import StorageFailure

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # PostgreSQL connection pool settings
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
    }


engine = create_engine(settings.get_database_url, **_engine_options(settings.get_database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Created lazily; the client connects on first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client


# Database initialization
def init_db():
    """Initialize database tables."""
    # Import models so they register on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def commit_or_raise(db: Session, operation: str, entity_id=None, on_conflict=None):
    """Commit the session, translating storage errors into ClinicErrors.

    IntegrityError becomes ``on_conflict`` when given; everything else is
    logged and surfaced as a generic StorageFailure.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if on_conflict is not None:
            logger.info(f"{operation} rejected by constraint (id={entity_id})")
            raise on_conflict()
        logger.exception(f"{operation} failed (id={entity_id}): {e.orig}")
        raise StorageFailure()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"{operation} failed (id={entity_id})")
        raise StorageFailure()
