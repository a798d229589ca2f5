"""
ScamFusion Base Registry Client

Abstract base class for fraud registry lookups.
Combines key normalization, the reputation cache, the session handshake, a
bounded timeout and API status tracking. A failed call invalidates the session
and is reported as an explicit failure, never as a clean verdict.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import aiohttp

from scamfusion.models.registry import RegistryVerdict
from scamfusion.services.enrichment.cache import ReputationCache
from scamfusion.services.enrichment.session import Session, SessionManager
from scamfusion.utils.constants import REGISTRY_HEADERS
from scamfusion.utils.helpers import utc_now
from scamfusion.utils.exceptions import (
    InvalidInputError,
    RegistryError,
    RemoteFailureError,
    RemoteTimeoutError,
    SessionInitError,
)

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=RegistryVerdict)


class APIStatus(str, Enum):
    """Registry availability status."""
    AVAILABLE = "available"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass
class APIStatusInfo:
    """Tracks registry status and usage."""
    provider_name: str
    status: APIStatus = APIStatus.UNKNOWN
    last_success: Optional[datetime] = None
    last_error: Optional[datetime] = None
    last_error_message: Optional[str] = None
    requests_made: int = 0
    requests_failed: int = 0
    cache_hits: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider_name,
            "status": self.status.value,
            "last_success": self.last_success.isoformat() if self.last_success else None,
            "last_error": self.last_error.isoformat() if self.last_error else None,
            "last_error_message": self.last_error_message,
            "requests_made": self.requests_made,
            "requests_failed": self.requests_failed,
            "cache_hits": self.cache_hits,
        }


@dataclass
class LookupResult(Generic[V]):
    """Result from a registry lookup."""
    success: bool
    key: str = ""
    value: Optional[V] = None
    error: Optional[RegistryError] = None
    provider: str = ""
    cached: bool = False

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


class BaseRegistryClient(ABC, Generic[V]):
    """
    Abstract base class for registry clients.

    Subclasses supply key normalization and the lookup request itself;
    caching, session lifecycle, timeouts and failure accounting live here.
    """

    provider_name: str = "base"
    init_path: str = "/"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        cache_max_entries: int = 100,
        cache_ttl_seconds: float = 15 * 60,
        session_ttl_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache: ReputationCache[str, V] = ReputationCache(
            max_entries=cache_max_entries,
            ttl_seconds=cache_ttl_seconds,
            clock=clock,
        )
        self.sessions = SessionManager(
            name=self.provider_name,
            initializer=self._init_session,
            ttl_seconds=session_ttl_seconds,
            clock=clock,
        )
        self._status = APIStatusInfo(provider_name=self.provider_name)
        self._in_flight: Dict[str, "asyncio.Future[LookupResult[V]]"] = {}

    @property
    def status(self) -> APIStatusInfo:
        return self._status

    @property
    def cache_size(self) -> int:
        return len(self.cache)

    def clear_cache(self) -> None:
        self.cache.clear()

    @abstractmethod
    def normalize_key(self, raw: str) -> str:
        """Reduce a raw identifier to its lookup key; empty when unusable."""
        pass

    @abstractmethod
    async def _fetch(self, key: str, session: Session) -> V:
        """Perform the remote lookup. Raise on any failure."""
        pass

    def _client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.timeout)

    async def _init_session(self) -> Dict[str, str]:
        """Load the registry's landing page and keep the cookies it sets."""
        async def handshake() -> Dict[str, str]:
            async with aiohttp.ClientSession(headers=REGISTRY_HEADERS) as http:
                async with http.get(
                    f"{self.base_url}{self.init_path}",
                    timeout=self._client_timeout(),
                ) as response:
                    if response.status >= 400:
                        raise SessionInitError(
                            f"{self.provider_name} session init returned HTTP {response.status}"
                        )
                    return {name: morsel.value for name, morsel in response.cookies.items()}

        try:
            return await asyncio.wait_for(handshake(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise SessionInitError(f"{self.provider_name} session init timed out") from e

    def _record_success(self) -> None:
        self._status.last_success = utc_now()
        self._status.requests_made += 1
        self._status.status = APIStatus.AVAILABLE

    def _record_failure(self, error_msg: str) -> None:
        self._status.last_error = utc_now()
        self._status.last_error_message = error_msg
        self._status.requests_made += 1
        self._status.requests_failed += 1
        self._status.status = APIStatus.ERROR

    def _fail(self, key: str, error: RegistryError) -> LookupResult[V]:
        self.sessions.invalidate()
        self._record_failure(error.message)
        logger.warning(f"{self.provider_name}: lookup failed ({error.message}), session invalidated")
        return LookupResult(success=False, key=key, error=error, provider=self.provider_name)

    def _describe(self, key: str) -> str:
        return key

    async def lookup(self, raw: str) -> LookupResult[V]:
        """
        Look up one identifier.

        Args:
            raw: Identifier as written in the text

        Returns:
            LookupResult; success=False carries the error and never a verdict

        Raises:
            InvalidInputError: Identifier normalizes to an empty key
        """
        key = self.normalize_key(raw)
        if not key:
            raise InvalidInputError(f"{self.provider_name}: unusable identifier")

        cached = self.cache.get(key)
        if cached is not None:
            self._status.cache_hits += 1
            logger.debug(f"{self.provider_name}: cache hit for {self._describe(key)}")
            return LookupResult(success=True, key=key, value=cached, provider=self.provider_name, cached=True)

        # One remote call per key; concurrent callers share its result
        pending = self._in_flight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._remote_lookup(key))
            self._in_flight[key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.debug(f"{self.provider_name}: joining in-flight lookup for {self._describe(key)}")

        # A cancelled caller must not cancel the shared call
        return await asyncio.shield(pending)

    async def _remote_lookup(self, key: str) -> LookupResult[V]:
        # Re-check: an earlier call may have filled the cache while this one was scheduled
        cached = self.cache.get(key)
        if cached is not None:
            self._status.cache_hits += 1
            return LookupResult(success=True, key=key, value=cached, provider=self.provider_name, cached=True)

        try:
            session = await self.sessions.ensure()
            verdict = await asyncio.wait_for(self._fetch(key, session), timeout=self.timeout)
        except SessionInitError as e:
            return self._fail(key, e)
        except asyncio.TimeoutError:
            return self._fail(key, RemoteTimeoutError(f"{self.provider_name} lookup timed out after {self.timeout}s"))
        except RegistryError as e:
            return self._fail(key, e)
        except aiohttp.ClientError as e:
            return self._fail(key, RemoteFailureError(f"{self.provider_name} connection error: {e}"))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            return self._fail(key, RemoteFailureError(f"{self.provider_name} unexpected response: {e}"))

        self.cache.put(key, verdict)
        self._record_success()
        logger.info(f"{self.provider_name}: {self._describe(key)} reports={verdict.report_count}")
        return LookupResult(success=True, key=key, value=verdict, provider=self.provider_name)
