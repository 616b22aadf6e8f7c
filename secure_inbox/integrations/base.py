"""
Reputation Client Base Implementation

Shared machinery for URL reputation providers: verdict caching,
de-duplication of concurrent lookups, credential rotation on rate
limits and the aiohttp transport.

Design Considerations:
- Cache, in-flight lookups and credential pool are instance state,
  never shared between providers
- Rate limits rotate credentials inside an explicitly bounded loop
- Every failure other than pool exhaustion fails open
- Failed lookups are not cached
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, TypeVar

import aiohttp

from secure_inbox.config.scanner_config import SCANNER_CONFIG
from secure_inbox.email_processing.models import ReputationVerdict
from secure_inbox.integrations.cache import ReputationCache
from secure_inbox.integrations.credentials import CredentialPool
from secure_inbox.integrations.exceptions import (
    CredentialsExhaustedError,
    QuotaExceededError,
    TransientProviderError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTP_TOO_MANY_REQUESTS = 429


class ReputationClient(ABC):
    """
    Base class for URL reputation providers.

    Subclasses implement ``_fetch_verdict`` using ``_call_with_rotation``
    and ``_request``; everything else (cache, de-duplication, fail-open
    handling) lives here.
    """

    provider_name = "provider"

    def __init__(
        self,
        api_keys: Iterable[str],
        cache_ttl: float = SCANNER_CONFIG["cache"]["ttl_seconds"],
        request_timeout: float = SCANNER_CONFIG["requests"]["timeout"],
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the client with its own credentials and cache.

        Args:
            api_keys: Ordered provider API keys, rotated on rate limits
            cache_ttl: Verdict cache lifetime in seconds
            request_timeout: Total timeout for a single HTTP request in seconds
            clock: Monotonic time source for cache expiry
        """
        self.credentials = CredentialPool(api_keys, name=self.provider_name)
        self.cache = ReputationCache(ttl_seconds=cache_ttl, clock=clock)
        self.request_timeout = request_timeout
        self._pending: Dict[str, "asyncio.Future[ReputationVerdict]"] = {}

        logger.info(
            f"{self.provider_name} client initialized with {len(self.credentials)} key(s), "
            f"cache TTL {cache_ttl}s"
        )

    async def check_url(self, url: str) -> ReputationVerdict:
        """
        Get the provider verdict for a URL.

        Serves fresh cached verdicts without a network call. Concurrent
        lookups for the same uncached URL share one provider request.

        Args:
            url: URL to check

        Returns:
            ReputationVerdict, fail-open on transient provider errors

        Raises:
            CredentialsExhaustedError: If every credential is rate limited
        """
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug(f"{self.provider_name} cache hit for {url}")
            return cached

        pending = self._pending.get(url)
        if pending is None:
            pending = asyncio.ensure_future(self._lookup(url))
            self._pending[url] = pending
            pending.add_done_callback(lambda future, key=url: self._forget_pending(key, future))
        else:
            logger.debug(f"{self.provider_name} joining in-flight lookup for {url}")

        return await asyncio.shield(pending)

    def _forget_pending(self, url: str, future: "asyncio.Future[ReputationVerdict]") -> None:
        if self._pending.get(url) is future:
            del self._pending[url]
        # Callers may all have been cancelled; mark the outcome as retrieved.
        if not future.cancelled():
            future.exception()

    async def _lookup(self, url: str) -> ReputationVerdict:
        try:
            verdict = await self._fetch_verdict(url)
        except TransientProviderError as e:
            logger.warning(f"{self.provider_name} check failed for {url}, treating as safe: {e}")
            return ReputationVerdict.fail_open(self.provider_name, str(e))

        self.cache.set(url, verdict)
        return verdict

    @abstractmethod
    async def _fetch_verdict(self, url: str) -> ReputationVerdict:
        """Query the provider and return a normalized verdict."""
        raise NotImplementedError("Must implement _fetch_verdict")

    async def _call_with_rotation(
        self,
        operation: str,
        send: Callable[[str], Awaitable[T]],
    ) -> T:
        """
        Run a provider call, rotating credentials on rate limits.

        Each key in the pool is tried at most once per call, so the loop
        ends after ``len(pool)`` rate-limited attempts.

        Args:
            operation: Short label for logging
            send: Coroutine function taking an API key

        Returns:
            Whatever ``send`` returns on success

        Raises:
            CredentialsExhaustedError: If every key was rate limited
        """
        attempts = 0
        while attempts < len(self.credentials):
            api_key, ticket = self.credentials.current()
            attempts += 1
            try:
                return await send(api_key)
            except QuotaExceededError:
                logger.warning(
                    f"{self.provider_name} {operation} rate limited "
                    f"(attempt {attempts}/{len(self.credentials)})"
                )
                self.credentials.rotate(ticket)

        raise CredentialsExhaustedError(
            self.provider_name,
            f"All {self.provider_name} API keys exhausted",
        )

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Perform one HTTP request and decode the JSON body.

        Raises:
            QuotaExceededError: On HTTP 429
            TransientProviderError: On network errors, timeouts, other
                non-2xx statuses or an undecodable body
        """
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, **kwargs) as response:
                    if response.status == HTTP_TOO_MANY_REQUESTS:
                        raise QuotaExceededError(
                            self.provider_name, f"{self.provider_name} quota exceeded"
                        )
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        logger.debug(f"{self.provider_name} error body: {error_text[:200]}")
                        raise TransientProviderError(
                            self.provider_name,
                            f"API request failed: {response.status}",
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransientProviderError(
                self.provider_name, f"{type(e).__name__}: {e}"
            ) from e

        if not isinstance(payload, dict):
            raise TransientProviderError(self.provider_name, "Malformed response payload")
        return payload


def safe_get(data: Optional[Dict[str, Any]], *path: str) -> Any:
    """Walk nested dictionaries, returning None if any level is missing."""
    current: Any = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
