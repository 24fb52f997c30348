#!/usr/bin/env python3
"""Access to ``dictionary`` rows that still lack frequency ``info``."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import psycopg

from .database_manager import DatabaseManager

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a select or update against the dictionary table cannot complete."""


SELECT_PENDING_SQL = """
    SELECT word
    FROM dictionary d
    WHERE d."language" = %s
      AND d.source = %s
      AND d.info IS NULL
    ORDER BY d.created_at ASC
    LIMIT %s
"""

COUNT_PENDING_SQL = """
    SELECT COUNT(*)
    FROM dictionary d
    WHERE d."language" = %s
      AND d.source = %s
      AND d.info IS NULL
"""

UPDATE_INFO_SQL = """
    UPDATE dictionary
    SET info = %s
    WHERE word = %s
      AND "language" = %s
      AND source = %s
"""


class WordStore:
    """Selects pending words and writes their ``info`` payloads."""

    def __init__(
        self,
        db: DatabaseManager,
        language: str = 'english',
        source: str = 'wiktionary',
    ):
        self.db = db
        self.language = language
        self.source = source

    async def select_pending(self, limit: int) -> List[str]:
        """Return up to ``limit`` pending words, oldest first."""
        try:
            async with self.db.get_cursor() as cursor:
                await cursor.execute(SELECT_PENDING_SQL, (self.language, self.source, int(limit)))
                rows = await cursor.fetchall()
        except psycopg.Error as e:
            logger.error(f"Error querying words from database: {e}")
            raise StorageError(f"Could not select pending words: {e}") from e

        words = [row[0] for row in rows]
        logger.info(f"Found {len(words)} words needing frequency information")
        return words

    async def count_pending(self) -> int:
        try:
            async with self.db.get_cursor() as cursor:
                await cursor.execute(COUNT_PENDING_SQL, (self.language, self.source))
                row = await cursor.fetchone()
        except psycopg.Error as e:
            raise StorageError(f"Could not count pending words: {e}") from e
        return row[0] if row else 0

    async def update_info(self, word: str, info: Dict[str, Any]) -> bool:
        """Store ``info`` for ``word``; False when no row matched."""
        payload = json.dumps(info)
        try:
            async with self.db.get_cursor() as cursor:
                await cursor.execute(UPDATE_INFO_SQL, (payload, word, self.language, self.source))
                updated = cursor.rowcount > 0
        except psycopg.Error as e:
            logger.error(f'Error updating word info for "{word}": {e}')
            raise StorageError(f'Could not update info for "{word}": {e}') from e

        if updated:
            logger.debug(f"Updated info for word: {word}")
        else:
            logger.warning(f"No dictionary row matched word: {word}")
        return updated
