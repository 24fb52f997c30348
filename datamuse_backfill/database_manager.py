#!/usr/bin/env python3
"""PostgreSQL connection manager with pooling, scoped to a single run."""

from typing import Optional, AsyncIterator
import logging
from contextlib import asynccontextmanager

import psycopg
from psycopg_pool import AsyncConnectionPool

from .secure_config import DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database connection manager wrapping an async connection pool.

    Constructed explicitly and passed to whatever needs storage access. Use it
    as an async context manager so the pool is closed on every exit path:

        async with DatabaseManager(config) as db:
            async with db.get_cursor() as cursor:
                await cursor.execute("SELECT 1")
    """

    def __init__(self, config: DatabaseConfig, pool: Optional[AsyncConnectionPool] = None):
        self.config_obj = config
        self.pool: Optional[AsyncConnectionPool] = pool
        self._initialized = pool is not None

    async def __aenter__(self) -> 'DatabaseManager':
        await self.open_pool()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close_pool()

    async def open_pool(self) -> None:
        """Setup the PostgreSQL connection pool"""
        if self._initialized:
            return

        try:
            self.pool = AsyncConnectionPool(
                conninfo=self.config_obj.get_connection_string(hide_password=False),
                min_size=1,
                max_size=self.config_obj.pool_size,
                timeout=self.config_obj.timeout,
                name="datamuse_backfill_pool",
                open=False,
            )
            await self.pool.open()
            self._initialized = True
            logger.info(
                "Database connection pool initialized: %s",
                self.config_obj.get_connection_string(hide_password=True),
            )
        except Exception as exc:
            logger.error(f"Failed to create PostgreSQL connection pool: {exc}")
            raise

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[psycopg.AsyncConnection]:
        """
        Get a database connection from the pool

        The connection commits when the block exits cleanly and rolls back
        when it raises.
        """
        if not self.pool:
            raise RuntimeError("Database connection pool is not initialized")

        async with self.pool.connection() as connection:
            try:
                yield connection
                await connection.commit()
            except Exception:
                await connection.rollback()
                raise

    @asynccontextmanager
    async def get_cursor(self) -> AsyncIterator[psycopg.AsyncCursor]:
        """Get a database cursor on a pooled connection (convenience method)"""
        async with self.get_connection() as conn:
            async with conn.cursor() as cursor:
                yield cursor

    async def test_connection(self) -> bool:
        """
        Test database connectivity

        Returns:
            True if connection successful, False otherwise
        """
        try:
            async with self.get_cursor() as cursor:
                await cursor.execute("SELECT NOW()")
                row = await cursor.fetchone()
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

        logger.info(f"Database connection successful: {row[0] if row else 'unknown'}")
        return True

    async def close_pool(self) -> None:
        """Close the connection pool"""
        if not self.pool:
            return
        try:
            await self.pool.close()
            logger.info("Database connection pool closed")
        except Exception as e:
            logger.error(f"Error closing connection pool: {e}")
        finally:
            self.pool = None
            self._initialized = False
