"""
SQLite database configuration and ORM models.

Departments, weights, the configuration and snapshots are stored as JSON
documents keyed by their ID; access logs are stored as flat rows.
"""

from datetime import datetime
from functools import lru_cache

from sqlalchemy import JSON, BigInteger, Column, DateTime, String, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from kpiboard.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class DepartmentORM(Base):
    """Department document."""

    __tablename__ = "departments"

    id = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class WeightConfigORM(Base):
    """Weight configuration document of one department."""

    __tablename__ = "weights"

    department_id = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AppConfigORM(Base):
    """Organizational configuration (single row)."""

    __tablename__ = "app_config"

    key = Column(String(50), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SnapshotORM(Base):
    """Weekly snapshot document."""

    __tablename__ = "snapshots"

    id = Column(String(100), primary_key=True)
    timestamp = Column(BigInteger, nullable=False, index=True)
    payload = Column(JSON, nullable=False)


class AccessLogORM(Base):
    """Access log row."""

    __tablename__ = "access_logs"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    action = Column(String(200), nullable=False)
    details = Column(Text, nullable=True)
    type = Column(String(10), nullable=False, default="info")
    timestamp = Column(BigInteger, nullable=False, index=True)
    date = Column(String(10), nullable=False)
    time = Column(String(8), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


# ===========================================
# Database Session Management
# ===========================================


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def get_session_factory(engine: AsyncEngine | None = None):
    """Get async session factory."""
    return sessionmaker(engine or get_engine(), class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine | None = None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
