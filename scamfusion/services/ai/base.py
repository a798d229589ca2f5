"""
ScamFusion Model Backend Base Class

Abstract base class for local inference backends. The contract is deliberately
narrow and synchronous: load once, generate text for a prompt, close.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from scamfusion.models.detection import ModelVerdict
from scamfusion.utils.exceptions import ModelError

logger = logging.getLogger(__name__)


@dataclass
class ModelOutput:
    """Raw text produced by a backend."""
    content: str
    model: str = ""
    tokens_used: int = 0
    finish_reason: str = "unknown"
    raw_response: Optional[Dict[str, Any]] = None


@dataclass
class ModelResult:
    """Result of one adapter call; a failure carries the error, never a verdict."""
    success: bool
    value: Optional[ModelVerdict] = None
    error: Optional[ModelError] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


class ModelBackend(ABC):
    """
    Abstract base class for inference backends.

    Implementations block while generating; callers run them off the event loop.
    """

    backend_name: str = "base"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        pass

    @abstractmethod
    def load(self) -> None:
        """
        Prepare the backend.

        Raises:
            ModelNotReadyError: Model artifact missing or backend unreachable
        """
        pass

    @abstractmethod
    def generate(self, prompt: str) -> ModelOutput:
        """
        Generate a completion for a fully rendered prompt.

        Raises:
            ModelInferenceError: Backend failed while generating
        """
        pass

    @abstractmethod
    def close(self) -> None:
        pass
