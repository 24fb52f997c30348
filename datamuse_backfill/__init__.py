"""
Datamuse frequency backfill.

This package fills the ``info`` column of dictionary rows with word frequency
data from the Datamuse API:
- Configuration and database connection management
- The Datamuse lookup client and pacing policies
- Batch processing and the continuous runner
"""

from .batch_processor import BatchProcessor, BatchResult
from .config import BackfillConfig
from .database_manager import DatabaseManager
from .datamuse_client import (
    Found,
    FrequencyLookupClient,
    FrequencyResult,
    NotFound,
    TransportError,
)
from .pacing import FixedDelayPacer, TokenBucketPacer
from .runner import ContinuousRunner, RunSummary, SelectionRetriesExhausted
from .secure_config import DatabaseConfig, get_database_config
from .word_store import StorageError, WordStore

__version__ = "0.1.0"

__all__ = [
    'BackfillConfig',
    'BatchProcessor',
    'BatchResult',
    'ContinuousRunner',
    'DatabaseConfig',
    'DatabaseManager',
    'FixedDelayPacer',
    'Found',
    'FrequencyLookupClient',
    'FrequencyResult',
    'NotFound',
    'RunSummary',
    'SelectionRetriesExhausted',
    'StorageError',
    'TokenBucketPacer',
    'TransportError',
    'WordStore',
    'get_database_config',
]
