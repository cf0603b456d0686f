"""
SQLAlchemy database connection and session management.

This module provides:
- Engine configuration (MS SQL Server by default, any SQLAlchemy URL works)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/items")
     def get_items(db: Session = Depends(get_session)):
          return db.query(Item).all()
"""
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from config import settings
from logging_config import get_logger

logger = get_logger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
     """
     Create an engine for the given URL.

     Server databases get a bounded connection pool. SQLite gets explicit
     BEGIN handling so that SAVEPOINTs (used by the settlement and code
     pool claims) behave like they do on a server database.
     """
     if url.startswith("sqlite"):
          engine = create_engine(
               url,
               echo=echo,
               connect_args={"check_same_thread": False, "timeout": 30},
          )

          @event.listens_for(engine, "connect")
          def _disable_pysqlite_transactions(dbapi_connection, connection_record):
               dbapi_connection.isolation_level = None

          @event.listens_for(engine, "begin")
          def _emit_begin(conn):
               conn.exec_driver_sql("BEGIN")

          return engine

     return create_engine(
          url,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
          echo=echo,
     )


def build_session_factory(bind: Engine) -> sessionmaker:
     """Session factory with the service's session defaults."""
     return sessionmaker(
          bind=bind,
          autocommit=False,
          autoflush=False,
          expire_on_commit=False,
     )


engine = build_engine(settings.database_url, echo=settings.sql_echo)

# Session factory
SessionLocal = build_session_factory(engine)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Services commit their own unit of work; anything left pending when the
     request fails is rolled back here.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db(bind: Engine = None) -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=bind or engine)


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError:
          logger.exception("Database connection failed")
          return False
