from pathlib import Path
from typing import Generator
import tempfile

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
import structlog

from app.config.settings import settings
from app.models.database import Base

logger = structlog.get_logger()


def _create_engine_from_url(db_url: str):
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, connect_args=connect_args)


def _resolve_database_url(original_url: str) -> str:
    """Make sure a sqlite file's directory exists, falling back to a temp file if it is not writable."""
    url = make_url(original_url)
    if not (url.drivername.startswith("sqlite") and url.database and url.database != ":memory:"):
        return original_url

    db_path = Path(url.database)
    if not db_path.is_absolute():
        db_path = (Path.cwd() / db_path).resolve()

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        marker = db_path.parent / ".writable_test"
        marker.write_text("ok")
        marker.unlink()
        return original_url
    except OSError as e:
        fallback = f"sqlite:///{(Path(tempfile.gettempdir()) / 'testcases_fallback.db').as_posix()}"
        logger.error("Configured sqlite path not writable; using fallback", error=str(e), path=str(db_path), fallback=fallback)
        return fallback


resolved_db_url = _resolve_database_url(settings.database_url)
engine = _create_engine_from_url(resolved_db_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_database() -> Generator[Session, None, None]:
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully", database_url=resolved_db_url)
    except Exception as e:
        logger.error("Failed to create database tables", error=str(e))
        raise


def database_available() -> bool:
    """Run a trivial query against the configured database"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Database readiness check failed", error=str(e))
        return False
