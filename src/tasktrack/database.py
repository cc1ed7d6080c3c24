"""
Database connection management for the task store.

This module provides centralized async engine creation with a configurable
connection pool. The engine is cached as a singleton so every FastAPI request
shares one pool; sessions are opened per request and closed afterwards.
"""

import os
import re
import logging
from functools import lru_cache
from typing import AsyncGenerator
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import text
from fastapi import HTTPException

logger = logging.getLogger(__name__)

__all__ = [
    "get_env_setting",
    "get_env_int_setting",
    "get_env_bool_setting",
    "resolve_async_dsn",
    "get_async_pg_engine",
    "get_async_pg_session_factory",
    "get_async_pg_session",
    "check_pg_health",
]

# ─────────────────────────────────────────────────────────────────────
# Env helpers
# ─────────────────────────────────────────────────────────────────────

def get_env_setting(key: str, default: str) -> str:
    return os.getenv(key, default)

def get_env_int_setting(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default

def get_env_bool_setting(key: str, default: bool) -> bool:
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")

# ─────────────────────────────────────────────────────────────────────
# DB settings
# ─────────────────────────────────────────────────────────────────────

POSTGRES_HOST = get_env_setting("POSTGRES_HOST", "localhost")
POSTGRES_PORT = get_env_int_setting("POSTGRES_PORT", 5432)
POSTGRES_DB = get_env_setting("POSTGRES_DB", "perntodo")
POSTGRES_USER = get_env_setting("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = get_env_setting("POSTGRES_PASSWORD", "CHANGE_ME")
PG_DSN = get_env_setting(
    "PG_DSN",
    f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

PG_POOL_SIZE = get_env_int_setting("POSTGRES_POOL_SIZE", 10)
PG_MAX_OVERFLOW = get_env_int_setting("POSTGRES_MAX_OVERFLOW", 5)
PG_POOL_TIMEOUT = get_env_int_setting("POSTGRES_POOL_TIMEOUT", 30)
PG_POOL_RECYCLE = get_env_int_setting("POSTGRES_POOL_RECYCLE", 1800)
PG_POOL_PRE_PING = get_env_bool_setting("POSTGRES_POOL_PRE_PING", True)

_PG_SCHEME_RE = re.compile(r"^postgres(?:ql)?(\+[a-z0-9_]+)?://", flags=re.IGNORECASE)


def resolve_async_dsn(dsn: str) -> str:
    """Normalize a PostgreSQL DSN to the asyncpg driver.

    Non-PostgreSQL URLs (e.g. ``sqlite+aiosqlite://``) are returned as-is.
    """
    dsn = dsn.strip()
    return _PG_SCHEME_RE.sub("postgresql+asyncpg://", dsn)

# ─────────────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────────────

@lru_cache
def get_async_pg_engine() -> AsyncEngine:
    # Prefer explicit async DSN if provided
    dsn = get_env_setting("PG_DSN_ASYNC", "").strip() or PG_DSN
    dsn = resolve_async_dsn(dsn)

    hostname = urlparse(dsn).hostname
    if not dsn.startswith("postgresql+"):
        logger.info(f"Creating async engine for {dsn.split('://', 1)[0]} (no pool settings)")
        return create_async_engine(dsn, future=True)

    logger.info(f"Creating async PostgreSQL engine for {hostname} (pool_size={PG_POOL_SIZE})")
    return create_async_engine(
        dsn,
        pool_size=PG_POOL_SIZE,
        max_overflow=PG_MAX_OVERFLOW,
        pool_timeout=PG_POOL_TIMEOUT,
        pool_recycle=PG_POOL_RECYCLE,
        pool_pre_ping=PG_POOL_PRE_PING,
        echo_pool=False,
        future=True,
    )

# ─────────────────────────────────────────────────────────────────────
# Session factory / FastAPI dependency
# ─────────────────────────────────────────────────────────────────────

def get_async_pg_session_factory():
    return async_sessionmaker(bind=get_async_pg_engine(), expire_on_commit=False, class_=AsyncSession)

async def get_async_pg_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_async_pg_session_factory()() as session:
        try:
            yield session
        except HTTPException:
            # already logged and mapped by the route
            await session.rollback()
            raise
        except Exception as e:
            await session.rollback()
            logger.error(f"PostgreSQL session error: {e}")
            raise
        finally:
            await session.close()

# ─────────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────────

async def check_pg_health(engine: AsyncEngine = None) -> bool:
    engine = engine or get_async_pg_engine()
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return (result.scalar_one_or_none() == 1)
    except Exception as e:
        logger.error(f"PostgreSQL health check failed: {e}")
        return False
