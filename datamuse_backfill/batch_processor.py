#!/usr/bin/env python3
"""Process one batch of pending words: look each up, write the result back."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .datamuse_client import FrequencyLookupClient
from .pacing import Pacer, as_pacer
from .word_store import StorageError, WordStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchResult:
    """Tally for a single batch."""

    processed: int = 0
    success: int = 0
    error: int = 0


class BatchProcessor:
    """Runs the select → lookup → update cycle for one batch."""

    def __init__(self, store: WordStore, client: FrequencyLookupClient):
        self.store = store
        self.client = client

    async def run_batch(self, batch_size: int, pacer: Union[Pacer, float] = 0.0) -> BatchResult:
        """Process up to ``batch_size`` pending words.

        Only a failure to select the batch propagates; per-word storage
        failures are counted as errors and the batch carries on.
        """
        pacer = as_pacer(pacer)
        logger.info("Starting word processing...")

        words = await self.store.select_pending(batch_size)
        result = BatchResult()
        if not words:
            logger.info("No words found that need frequency information")
            return result

        logger.info(f"Processing {len(words)} words...")

        for index, word in enumerate(words):
            updated = await self._process_word(word)

            result.processed += 1
            if updated:
                result.success += 1
                logger.info(f"✓ Successfully processed: {word}")
            else:
                result.error += 1
                logger.warning(f"✗ Failed to update database for: {word}")

            if index < len(words) - 1:
                await pacer.wait()

        logger.info("=== Batch Processing Summary ===")
        logger.info(f"Total words processed: {result.processed}")
        logger.info(f"Successful updates: {result.success}")
        logger.info(f"Errors: {result.error}")
        return result

    async def _process_word(self, word: str) -> bool:
        try:
            frequency = await self.client.lookup(word)
            return await self.store.update_info(word, frequency.to_info())
        except StorageError as e:
            logger.error(f'Error processing word "{word}": {e}')
            return False
