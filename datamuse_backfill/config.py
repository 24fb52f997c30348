#!/usr/bin/env python3
"""
Processing configuration for the Datamuse backfill
Batch sizing, pacing, and the lexical service endpoint
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

DATAMUSE_API_BASE_URL = 'https://api.datamuse.com'


@dataclass(frozen=True)
class BackfillConfig:
    """Settings that shape one backfill run"""

    batch_size: int = 1000
    per_call_delay: float = 0.2
    inter_batch_delay: float = 5.0
    api_base_url: str = DATAMUSE_API_BASE_URL
    request_timeout: float = 10.0
    language: str = 'english'
    source: str = 'wiktionary'
    max_selection_retries: Optional[int] = None

    def __post_init__(self):
        if self.batch_size < 0:
            raise ValueError("Batch size must not be negative")
        if self.per_call_delay < 0 or self.inter_batch_delay < 0:
            raise ValueError("Delays must not be negative")
        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")
        if self.max_selection_retries is not None and self.max_selection_retries < 0:
            raise ValueError("Max selection retries must not be negative")

    @classmethod
    def from_env(cls) -> 'BackfillConfig':
        """Build a config from BACKFILL_* environment variables, falling back to defaults"""
        defaults = cls()
        max_retries = os.getenv('BACKFILL_MAX_RETRIES')
        return cls(
            batch_size=int(os.getenv('BACKFILL_BATCH_SIZE', defaults.batch_size)),
            per_call_delay=float(os.getenv('BACKFILL_DELAY', defaults.per_call_delay)),
            inter_batch_delay=float(os.getenv('BACKFILL_BATCH_DELAY', defaults.inter_batch_delay)),
            api_base_url=os.getenv('BACKFILL_API_URL', defaults.api_base_url),
            request_timeout=float(os.getenv('BACKFILL_TIMEOUT', defaults.request_timeout)),
            language=os.getenv('BACKFILL_LANGUAGE', defaults.language),
            source=os.getenv('BACKFILL_SOURCE', defaults.source),
            max_selection_retries=int(max_retries) if max_retries else None,
        )

    def with_overrides(self, **overrides) -> 'BackfillConfig':
        """Return a copy with every non-None override applied"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
