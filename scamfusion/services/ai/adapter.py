"""
ScamFusion Secondary Model Adapter

Capability object around an optional inference backend. Absence of a model,
a failed load, an exhausted quota, a backend error or an unparsable answer all
come back as a failed ModelResult; nothing here raises into the fusion path.
"""

import asyncio
import logging
from typing import Optional

from scamfusion.config import Settings, get_settings
from scamfusion.services.ai.base import ModelBackend, ModelResult
from scamfusion.services.ai.local_backend import LocalServerBackend
from scamfusion.services.ai.parser import parse_model_response
from scamfusion.services.ai.quota import QuotaCounter
from scamfusion.utils.exceptions import (
    ModelError,
    ModelInferenceError,
    ModelNotReadyError,
    ModelQuotaExceededError,
)

logger = logging.getLogger(__name__)


class SecondaryModelAdapter:
    """
    Narrow contract to the secondary model.

    Usage:
        adapter = SecondaryModelAdapter(backend, QuotaCounter(50))
        adapter.initialize()
        if adapter.is_available():
            result = await adapter.analyze_async(prompt)
    """

    def __init__(
        self,
        backend: Optional[ModelBackend],
        quota: QuotaCounter,
        enabled: bool = True,
    ):
        self.backend = backend
        self.quota = quota
        self.enabled = enabled
        self._ready = False
        self.last_error: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SecondaryModelAdapter":
        settings = settings or get_settings()
        backend = None
        if settings.model_path:
            backend = LocalServerBackend(
                server_url=settings.model_server_url,
                model_path=settings.model_path,
                timeout=settings.model_timeout,
                max_tokens=settings.model_max_tokens,
                temperature=settings.model_temperature,
            )
        return cls(
            backend=backend,
            quota=QuotaCounter(settings.model_daily_quota),
            enabled=settings.model_enabled,
        )

    def initialize(self) -> ModelResult:
        """Load the backend once. Missing model is an expected, non-fatal outcome."""
        if not self.enabled:
            return self._failure(ModelNotReadyError("Secondary model disabled"))
        if self.backend is None:
            return self._failure(ModelNotReadyError("No model backend configured"))
        if self._ready:
            return ModelResult(success=True)

        try:
            self.backend.load()
        except ModelError as e:
            logger.info(f"Secondary model unavailable: {e.message}")
            return self._failure(e)

        self._ready = True
        logger.info(f"Secondary model ready ({self.backend.backend_name})")
        return ModelResult(success=True)

    def is_available(self) -> bool:
        return self.enabled and self._ready and not self.quota.exhausted

    def analyze(self, prompt: str) -> ModelResult:
        """
        Run one blocking inference and parse the answer.

        Args:
            prompt: Fully rendered prompt (instruction + input)
        """
        if not self.enabled or not self._ready or self.backend is None:
            return self._failure(ModelNotReadyError("Secondary model not initialized"))

        if not self.quota.try_acquire():
            return self._failure(ModelQuotaExceededError(
                f"Daily model quota of {self.quota.daily_limit} reached"
            ))

        try:
            output = self.backend.generate(prompt)
            verdict = parse_model_response(output.content)
        except ModelError as e:
            logger.warning(f"Secondary model declined: {e.message}")
            return self._failure(e)
        except Exception as e:
            logger.error(f"Secondary model backend error: {e}", exc_info=True)
            return self._failure(ModelInferenceError(
                f"{type(e).__name__} from {self.backend.backend_name}: {e}"
            ))

        self.last_error = None
        return ModelResult(
            success=True,
            value=verdict,
            metadata={"model": output.model, "tokens_used": output.tokens_used},
        )

    async def analyze_async(self, prompt: str) -> ModelResult:
        """Run analyze() in a worker thread so inference never blocks the event loop."""
        return await asyncio.to_thread(self.analyze, prompt)

    def close(self) -> None:
        if self.backend is not None:
            self.backend.close()
        self._ready = False

    def _failure(self, error: ModelError) -> ModelResult:
        self.last_error = error.message
        return ModelResult(success=False, error=error)
