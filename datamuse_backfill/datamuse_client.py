#!/usr/bin/env python3
"""Datamuse API client for word frequency lookups.

Every lookup folds its failure modes into the returned
:class:`FrequencyResult` instead of raising, so a batch loop can record the
attempt and move on. Outcomes are tagged (:class:`Found`, :class:`NotFound`,
:class:`TransportError`) and flattened to the JSON stored in ``dictionary.info``
by :meth:`FrequencyResult.to_info`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import httpx

from .config import DATAMUSE_API_BASE_URL
from .pacing import Pacer, as_pacer

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Word not found in Datamuse database'
BLANK_WORD_MESSAGE = 'Word must be a non-empty string'
FREQUENCY_TAG_PREFIX = 'f:'


# ---------------------------------------------------------------------------
# Lookup outcomes


@dataclass(frozen=True, slots=True)
class Found:
    frequency: Optional[str]
    score: Optional[float]


@dataclass(frozen=True, slots=True)
class NotFound:
    message: str = NOT_FOUND_MESSAGE


@dataclass(frozen=True, slots=True)
class TransportError:
    message: str


Outcome = Union[Found, NotFound, TransportError]


@dataclass(frozen=True, slots=True)
class FrequencyResult:
    """Result of one lookup attempt."""

    outcome: Outcome
    fetched_at: str

    @property
    def frequency(self) -> Optional[str]:
        return self.outcome.frequency if isinstance(self.outcome, Found) else None

    @property
    def score(self) -> Optional[float]:
        return self.outcome.score if isinstance(self.outcome, Found) else None

    @property
    def error(self) -> Optional[str]:
        if isinstance(self.outcome, Found):
            return None
        return self.outcome.message

    @property
    def found(self) -> bool:
        return isinstance(self.outcome, Found)

    def to_info(self) -> Dict[str, Any]:
        """Flatten to the JSON payload persisted in ``dictionary.info``."""
        info: Dict[str, Any] = {
            'frequency': self.frequency,
            'score': self.score,
            'fetched_at': self.fetched_at,
        }
        if self.error is not None:
            info['error'] = self.error
        return info


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def extract_frequency(tags: Optional[Sequence[str]]) -> Optional[str]:
    """Return the value of the first ``f:<value>`` tag, if any."""
    for tag in tags or ():
        if isinstance(tag, str) and tag.startswith(FREQUENCY_TAG_PREFIX):
            return tag[len(FREQUENCY_TAG_PREFIX):]
    return None


# ---------------------------------------------------------------------------
# Client


class FrequencyLookupClient:
    """Looks up word frequencies on the Datamuse ``/words`` endpoint."""

    def __init__(
        self,
        base_url: str = DATAMUSE_API_BASE_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], str] = _utc_timestamp,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._clock = clock
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> 'FrequencyLookupClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_words(self, word: str) -> Any:
        response = await self._client.get(
            f"{self.base_url}/words",
            params={
                'sp': word,   # exact spelling
                'md': 'f',    # frequency metadata
                'max': 1,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def lookup(self, word: str) -> FrequencyResult:
        """Fetch frequency information for ``word``.

        Never raises: a blank word, a transport failure or an unusable
        response all come back as a :class:`TransportError` outcome. A blank
        word is answered without a request.
        """
        if not isinstance(word, str) or not word.strip():
            logger.warning(f"Skipping lookup for blank word: {word!r}")
            return FrequencyResult(TransportError(BLANK_WORD_MESSAGE), self._clock())

        logger.info(f"Fetching frequency data for word: {word}")
        try:
            data = await self._get_words(word)
        except (httpx.HTTPError, ValueError) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning(f'Error fetching frequency for word "{word}": {message}')
            return FrequencyResult(TransportError(message), self._clock())

        if not isinstance(data, list):
            message = f"Unexpected response payload: {type(data).__name__}"
            logger.warning(f'Error fetching frequency for word "{word}": {message}')
            return FrequencyResult(TransportError(message), self._clock())

        if not data:
            logger.info(f"Word not found in Datamuse: {word}")
            return FrequencyResult(NotFound(), self._clock())

        entry = data[0] if isinstance(data[0], dict) else {}
        outcome = Found(
            frequency=extract_frequency(entry.get('tags')),
            score=entry.get('score') or None,
        )
        return FrequencyResult(outcome, self._clock())

    async def lookup_many(
        self,
        words: Sequence[str],
        pacer: Union[Pacer, float] = 1.0,
    ) -> List[FrequencyResult]:
        """Look up several words in order, pacing between consecutive calls."""
        pacer = as_pacer(pacer)
        results: List[FrequencyResult] = []
        for index, word in enumerate(words):
            results.append(await self.lookup(word))
            if index < len(words) - 1:
                await pacer.wait()
        return results

    async def test_connection(self) -> bool:
        """Check the service; True when it answers with a success status."""
        try:
            await self._get_words('test')
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Datamuse API connection failed: {e}")
            return False

        logger.info("Datamuse API connection successful")
        return True
