# orgpanel/core/database.py
"""Database engine, session management and transaction boundary"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from orgpanel.core.config import DATABASE_URL, DATABASE_ECHO
from orgpanel.core.logger import get_logger
from orgpanel.models import Base

logger = get_logger(__name__)


def create_db_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign-key enforcement switched on."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    db_engine = create_engine(url, echo=DATABASE_ECHO, pool_pre_ping=True, **kwargs)

    if db_engine.dialect.name == "sqlite":
        @event.listens_for(db_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


# Create engine
engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Dependency injection for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Unit of work for one mutating operation.

    Reads, checks and writes performed inside the block are committed together;
    any exception rolls the whole block back and propagates.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db(bind: Engine = None) -> bool:
    """Create all tables in database"""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("✓ Database tables initialized")
        return True
    except Exception as e:
        logger.error(f"✗ Failed to initialize database: {e}")
        return False


def test_connection() -> bool:
    """Test database connectivity"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            logger.info("✓ Database connection successful")
            return True
    except Exception as e:
        logger.error(f"✗ Database connection failed: {e}")
        return False
