"""
Database configuration and connection management.

This module provides:
- SQLAlchemy engine and session management
- Connection pooling with sane defaults (StaticPool for SQLite)
- Table definitions for tasks, profiles, badges, market, notes, quotes and education content
"""
from typing import Optional
from contextlib import contextmanager
import logging
import os

from sqlalchemy import (
    create_engine, MetaData, Table, Column, Integer, String, Date, DateTime, Boolean, Text, Index,
    ForeignKey, UniqueConstraint, CheckConstraint, text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.sql import func

from dailyfive.core.config import settings

logger = logging.getLogger("dailyfive")

# SQLAlchemy metadata for table definitions
metadata = MetaData()

# Connection pooling configuration
POOL_SIZE = 10
MAX_OVERFLOW = 20
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600  # Recycle connections after 1 hour

# Global engine
_engine: Optional[Engine] = None


def get_database_url() -> Optional[str]:
    """
    Get the database URL from settings or environment.

    For testing, use TEST_DATABASE_URL if available.
    """
    test_url = os.getenv("TEST_DATABASE_URL") or settings.TEST_DATABASE_URL
    if test_url:
        return test_url

    return os.getenv("DATABASE_URL") or settings.DATABASE_URL


def build_engine(url: str) -> Engine:
    """Create an engine for ``url`` with pooling suited to the backend."""
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=True,
        echo=False,  # Set to True for SQL query logging
    )


def init_engine(database_url: Optional[str] = None) -> Engine:
    """
    Initialize the global SQLAlchemy engine.

    Args:
        database_url: Optional override for DATABASE_URL
    """
    global _engine

    url = database_url or get_database_url()

    if not url:
        raise ValueError(
            "DATABASE_URL is not configured. "
            "Set DATABASE_URL in environment or .env file."
        )

    _engine = build_engine(url)
    return _engine


def get_engine() -> Engine:
    """Get the current SQLAlchemy engine."""
    global _engine
    if _engine is None:
        init_engine()
    return _engine


@contextmanager
def get_db_session(engine: Optional[Engine] = None):
    """
    Context manager for database sessions.

    Usage:
        with get_db_session(engine) as session:
            session.execute(...)
    """
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables(engine: Optional[Engine] = None):
    """
    Create all tables defined in metadata.

    This is idempotent - tables that already exist will not be recreated.
    """
    metadata.create_all(bind=engine or get_engine())


def drop_all_tables(engine: Optional[Engine] = None):
    """
    Drop all tables defined in metadata.

    WARNING: This is destructive! Only use in tests or development.
    """
    metadata.drop_all(bind=engine or get_engine())


def check_connection(engine: Optional[Engine] = None) -> bool:
    """
    Check if database connection is available.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        eng = engine or get_engine()
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False


# Task catalog (admin-populated, read-only to the services)
task_catalog = Table(
    'task_catalog',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('title', String(200), nullable=False),
    Column('icon', String(100), nullable=True),
    Column('description', Text, nullable=True),
)

# One row per (user, calendar date)
daily_task_sets = Table(
    'daily_task_sets',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False),
    Column('created_date', Date, nullable=False),
    Column('task1_id', Integer, ForeignKey('task_catalog.id'), nullable=False),
    Column('task2_id', Integer, ForeignKey('task_catalog.id'), nullable=False),
    Column('task3_id', Integer, ForeignKey('task_catalog.id'), nullable=False),
    Column('task4_id', Integer, ForeignKey('task_catalog.id'), nullable=False),
    Column('task5_id', Integer, ForeignKey('task_catalog.id'), nullable=False),
    Column('task1_completed', Boolean, nullable=False, default=False),
    Column('task2_completed', Boolean, nullable=False, default=False),
    Column('task3_completed', Boolean, nullable=False, default=False),
    Column('task4_completed', Boolean, nullable=False, default=False),
    Column('task5_completed', Boolean, nullable=False, default=False),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    # At most one set per user per day; the assigner relies on this for races
    UniqueConstraint('user_id', 'created_date', name='uq_daily_task_sets_user_date'),
    Index('idx_daily_task_sets_user_date', 'user_id', 'created_date'),
)

profiles = Table(
    'profiles',
    metadata,
    Column('user_id', String(100), primary_key=True),
    Column('user_streak', Integer, nullable=False, default=0),
    Column('completed_tasks', Integer, nullable=False, default=0),
    Column('achievement_points', Integer, nullable=False, default=0),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    CheckConstraint('user_streak >= 0', name='ck_profiles_streak_non_negative'),
    CheckConstraint('achievement_points >= 0', name='ck_profiles_points_non_negative'),
)

badges = Table(
    'badges',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('badge_type', String(50), nullable=False),  # 'streak', 'tasks', 'login'
    Column('level', Integer, nullable=False),
    Column('name', String(200), nullable=False),
    Column('requirement', Integer, nullable=False),
    Column('points', Integer, nullable=False, default=0),
    UniqueConstraint('badge_type', 'level', name='uq_badges_type_level'),
)

user_badges = Table(
    'user_badges',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('badge_id', Integer, ForeignKey('badges.id'), nullable=False),
    Column('progress', Integer, nullable=False, default=0),
    Column('is_achieved', Boolean, nullable=False, default=False),
    Column('achieved_at', DateTime(timezone=True), nullable=True),
    Column('claimed_at', DateTime(timezone=True), nullable=True),
    UniqueConstraint('user_id', 'badge_id', name='uq_user_badges_user_badge'),
)

shop_items = Table(
    'shop_items',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('name', String(200), nullable=False),
    Column('description', Text, nullable=True),
    Column('price', Integer, nullable=False),
    Column('is_active', Boolean, nullable=False, default=True),
    Column('created_at', DateTime(timezone=True), nullable=False),
)

user_purchases = Table(
    'user_purchases',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False),
    Column('item_id', Integer, ForeignKey('shop_items.id'), nullable=False),
    Column('price_paid', Integer, nullable=False),
    Column('purchase_date', DateTime(timezone=True), nullable=False),
    Index('idx_user_purchases_user_date', 'user_id', 'purchase_date'),
)

notes = Table(
    'notes',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False),
    Column('title', Text, nullable=False, default=''),
    Column('content', Text, nullable=False, default=''),
    Column('created_at', DateTime(timezone=True), nullable=False),
    Index('idx_notes_user_created', 'user_id', 'created_at'),
)

# Motivational quotes shown on the home screen and in reminders
quotes = Table(
    'quotes',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('text', Text, nullable=False),
    Column('author', String(200), nullable=True),
)

# Operator-curated reading/listening material, newest first
education_content = Table(
    'education_content',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('title', String(200), nullable=False),
    Column('description', Text, nullable=True),
    Column('content_url', Text, nullable=False),
    Column('image_url', Text, nullable=True),
    Column('duration', String(50), nullable=True),  # free text, e.g. "5 min"
    Column('created_at', DateTime(timezone=True), nullable=False),
)
