"""
ScamFusion Session Manager

Keeps a time-bounded stateful session with a remote registry. The session is
created lazily, invalidated after any failed remote call, and re-created on the
next use. Concurrent callers share one re-initialization (double-checked lock).
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, Dict, Optional

from scamfusion.utils.exceptions import SessionInitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Explicit session value replayed on every lookup."""
    initialized_at: float
    valid: bool = True
    cookies: Dict[str, str] = field(default_factory=dict)


SessionInitializer = Callable[[], Awaitable[Dict[str, str]]]


class SessionManager:
    """
    Guards a single Session for one remote service.

    Args:
        name: Service name for logging
        initializer: Coroutine performing the handshake and returning cookies
        ttl_seconds: Session lifetime before a fresh handshake is required
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        name: str,
        initializer: SessionInitializer,
        ttl_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self._initializer = initializer
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._session: Optional[Session] = None
        self._lock = asyncio.Lock()
        self.initializations = 0

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def is_fresh(self, session: Optional[Session]) -> bool:
        return (
            session is not None
            and session.valid
            and self._clock() - session.initialized_at < self.ttl_seconds
        )

    async def ensure(self) -> Session:
        """
        Return a valid session, performing the handshake if needed.

        Raises:
            SessionInitError: Handshake failed; the session stays invalid
        """
        session = self._session
        if self.is_fresh(session):
            return session

        async with self._lock:
            # Another caller may have refreshed it while we waited
            session = self._session
            if self.is_fresh(session):
                return session

            logger.debug(f"{self.name}: initializing session")
            try:
                cookies = await self._initializer()
            except SessionInitError:
                raise
            except Exception as e:
                raise SessionInitError(f"{self.name} session init failed: {e}") from e

            self._session = Session(
                initialized_at=self._clock(),
                valid=True,
                cookies=dict(cookies or {}),
            )
            self.initializations += 1
            logger.info(f"{self.name}: session initialized")
            return self._session

    def invalidate(self) -> None:
        """Mark the current session expired; next ensure() re-initializes."""
        if self._session is not None and self._session.valid:
            self._session = replace(self._session, valid=False)
            logger.debug(f"{self.name}: session invalidated")
