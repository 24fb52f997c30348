#!/usr/bin/env python3
"""
Continuous batch runner.

Repeats batches until the store runs dry. A short batch means the last page
was reached; an empty batch means nothing was left. A batch whose selection
fails is retried after the inter-batch pause, without limit unless
``max_selection_retries`` is set.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .batch_processor import BatchProcessor, BatchResult
from .pacing import Pacer, as_pacer
from .word_store import StorageError

logger = logging.getLogger(__name__)


class RunnerState(enum.Enum):
    RUNNING = "running"
    DONE = "done"


class SelectionRetriesExhausted(Exception):
    """Raised when batch selection keeps failing past the configured limit."""


@dataclass(slots=True)
class RunSummary:
    """Totals across every batch of a run."""

    batches: int = 0
    processed: int = 0
    success: int = 0
    error: int = 0
    selection_failures: int = 0

    @property
    def success_rate(self) -> float:
        if self.processed == 0:
            return 0.0
        return round(self.success / self.processed * 100, 2)

    def add(self, result: BatchResult) -> None:
        self.batches += 1
        self.processed += result.processed
        self.success += result.success
        self.error += result.error


class ContinuousRunner:
    """Drives a :class:`BatchProcessor` until every pending word is handled."""

    def __init__(self, processor: BatchProcessor, max_selection_retries: Optional[int] = None):
        self.processor = processor
        self.max_selection_retries = max_selection_retries
        self.state = RunnerState.RUNNING

    async def run(
        self,
        batch_size: int,
        per_call_delay: Union[Pacer, float],
        inter_batch_delay: Union[Pacer, float],
    ) -> RunSummary:
        per_call_pacer = as_pacer(per_call_delay)
        batch_pacer = as_pacer(inter_batch_delay)
        summary = RunSummary()
        consecutive_failures = 0
        batch_number = 1
        self.state = RunnerState.RUNNING

        logger.info("=== Starting Continuous Processing ===")
        logger.info(f"Batch size: {batch_size} words")
        logger.info(f"Delay between API calls: {per_call_pacer!r}")
        logger.info(f"Delay between batches: {batch_pacer!r}")

        while self.state is RunnerState.RUNNING:
            logger.info(f"Starting Batch #{batch_number}")
            try:
                result = await self.processor.run_batch(batch_size, per_call_pacer)
            except StorageError as e:
                consecutive_failures += 1
                summary.selection_failures += 1
                summary.error += 1
                logger.error(f"Error in batch #{batch_number}: {e}")
                if (
                    self.max_selection_retries is not None
                    and consecutive_failures > self.max_selection_retries
                ):
                    self.state = RunnerState.DONE
                    self._log_summary(summary)
                    raise SelectionRetriesExhausted(
                        f"Batch selection failed {consecutive_failures} times in a row"
                    ) from e
                logger.info("Taking a break before retrying...")
                await batch_pacer.wait()
                continue

            consecutive_failures = 0

            if result.processed == 0:
                logger.info("All words have been processed! No more words found.")
                self.state = RunnerState.DONE
                break

            summary.add(result)
            logger.info(
                f"Batch #{batch_number} completed: processed={result.processed} "
                f"success={result.success} errors={result.error}"
            )
            batch_number += 1

            if result.processed < batch_size:
                logger.info("All remaining words have been processed!")
                self.state = RunnerState.DONE
                break

            logger.info("Taking a break before next batch...")
            await batch_pacer.wait()

        self._log_summary(summary)
        return summary

    @staticmethod
    def _log_summary(summary: RunSummary) -> None:
        logger.info("=== FINAL PROCESSING SUMMARY ===")
        logger.info(f"Total batches processed: {summary.batches}")
        logger.info(f"Total words processed: {summary.processed}")
        logger.info(f"Total successful updates: {summary.success}")
        logger.info(f"Total errors: {summary.error}")
        logger.info(f"Selection failures: {summary.selection_failures}")
        logger.info(f"Success rate: {summary.success_rate:.2f}%")
