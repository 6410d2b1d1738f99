"""
BASE DATA SOURCE - Abstract base class for screening data sources

Shared HTTP plumbing for RugCheck and GMGN: session handling, per-source
rate limiting, retry with exponential backoff, circuit breaker and cache.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional
import asyncio
import logging
import time

import aiohttp

from .cache import ReportCache
from .circuit_breaker import CircuitBreaker
from .errors import ReportNotFoundError, SourceUnavailableError

logger = logging.getLogger(__name__)

# Statuses that mean "the source answered, it just doesn't know this mint"
NOT_FOUND_STATUSES = (400, 404)


class BaseDataSource(ABC):
    """
    Abstract base class for screening data sources.

    Subclasses set ``source_name`` and implement ``fetch`` returning the
    raw payload(s) the normalizer needs for one mint.
    """

    source_name = 'base'

    def __init__(self, config: Dict = None, session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            config: source section of the screening config (base_url,
                timeout_seconds, max_retries, min_request_interval,
                backoff_base, cache, circuit)
            session: shared aiohttp session; one is created lazily if omitted
        """
        self.config = config or {}
        self.base_url = self.config.get('base_url', '').rstrip('/')
        self.timeout_seconds = float(self.config.get('timeout_seconds', 10))
        self.max_retries = max(1, int(self.config.get('max_retries', 3)))
        self.min_request_interval = float(self.config.get('min_request_interval', 0.2))
        self.backoff_base = float(self.config.get('backoff_base', 1.0))

        self.cache = ReportCache(self.config.get('cache'))
        circuit = self.config.get('circuit', {})
        self.breaker = CircuitBreaker(
            self.source_name,
            failure_threshold=circuit.get('failure_threshold', 0.6),
            timeout=circuit.get('timeout', 300),
        )

        self._session = session
        self._owns_session = session is None
        self._last_request = 0.0
        self._rate_lock = asyncio.Lock()
        self.last_request_time = None
        self.request_count = 0

    @abstractmethod
    async def fetch(self, mint: str) -> Dict:
        """
        Fetch everything this source knows about a mint.

        Raises:
            ReportNotFoundError: source has no data for the mint
            SourceUnavailableError: source unreachable or broken
        """
        pass

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the HTTP session if this source created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _rate_limit(self):
        """Enforce the minimum interval between requests to this source."""
        async with self._rate_lock:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self.min_request_interval:
                await asyncio.sleep(self.min_request_interval - elapsed)
            self._last_request = time.monotonic()

    def _update_rate_limit(self):
        self.last_request_time = datetime.now()
        self.request_count += 1

    async def _get_json(self, url: str, params: Dict = None, headers: Dict = None, mint: str = '') -> Dict:
        """
        GET a JSON document with retry and exponential backoff.

        200 returns the body; 400/404 raise ReportNotFoundError immediately;
        429, 5xx, timeouts and connection errors are retried; anything else
        fails straight away.
        """
        if not self.breaker.can_attempt():
            raise SourceUnavailableError(self.source_name, 'circuit open (API down)')

        session = await self._get_session()
        last_error = None

        for attempt in range(self.max_retries):
            await self._rate_limit()
            self._update_rate_limit()
            retryable = True

            try:
                async with session.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as resp:
                    if resp.status == 200:
                        try:
                            data = await resp.json(content_type=None)
                        except ValueError as e:
                            self._record_failure()
                            raise SourceUnavailableError(
                                self.source_name, f'malformed JSON: {e}', status=200
                            ) from e
                        self.breaker.record_success()
                        return data

                    if resp.status in NOT_FOUND_STATUSES:
                        self.breaker.record_success()
                        raise ReportNotFoundError(self.source_name, mint or url, status=resp.status)

                    body = await resp.text()
                    last_error = SourceUnavailableError(
                        self.source_name, f'HTTP {resp.status}: {body[:200]}', status=resp.status
                    )
                    retryable = resp.status == 429 or resp.status >= 500

            except asyncio.TimeoutError:
                last_error = SourceUnavailableError(self.source_name, f'timeout after {self.timeout_seconds}s')
            except aiohttp.ClientError as e:
                last_error = SourceUnavailableError(self.source_name, f'{type(e).__name__}: {e}')

            if not retryable or attempt == self.max_retries - 1:
                break

            delay = self.backoff_base * (2 ** attempt)  # 1s, 2s, 4s
            logger.debug(f"[{self.source_name.upper()}] retry {attempt + 1}/{self.max_retries - 1} in {delay:.1f}s ({last_error})")
            await asyncio.sleep(delay)

        self._record_failure()
        logger.warning(f"[{self.source_name.upper()}] ⚠️ request failed: {last_error}")
        raise last_error

    def _record_failure(self):
        if self.breaker.record_failure():
            logger.error(f"[{self.source_name.upper()}] ⛔ too many failures, pausing calls for {self.breaker.timeout}s")

    async def _cached(self, key: str, loader):
        """Return cache[key], loading and storing it on a miss."""
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"[{self.source_name.upper()}] cache hit {key}")
            return cached
        value = await loader()
        self.cache.set(key, value)
        return value

    def get_stats(self) -> Dict:
        return {
            'source': self.source_name,
            'request_count': self.request_count,
            'last_request': self.last_request_time.isoformat() if self.last_request_time else None,
            'cache': self.cache.get_stats(),
            'circuit': self.breaker.get_stats(),
        }

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
