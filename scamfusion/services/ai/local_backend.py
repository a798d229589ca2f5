"""
ScamFusion Local Server Backend

Runs the secondary model through a llama.cpp-compatible completion server on
the local machine. The server is expected to have loaded ``model_path``; if the
artifact is absent the backend reports itself as not ready.
"""

import logging
import os
from typing import Optional

import httpx

from scamfusion.services.ai.base import ModelBackend, ModelOutput
from scamfusion.utils.constants import CHATML_END
from scamfusion.utils.exceptions import ModelInferenceError, ModelNotReadyError

logger = logging.getLogger(__name__)


class LocalServerBackend(ModelBackend):
    """
    llama.cpp server backend.

    Uses ``GET /health`` to confirm the server is up and ``POST /completion``
    to generate.
    """

    backend_name = "llama_server"

    def __init__(
        self,
        server_url: str = "http://127.0.0.1:8080",
        model_path: Optional[str] = None,
        timeout: float = 30.0,
        max_tokens: int = 256,
        temperature: float = 0.7,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__()
        self.server_url = server_url.rstrip("/")
        self.model_path = model_path
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        if not self.model_path or not os.path.exists(self.model_path):
            raise ModelNotReadyError(f"Model artifact not found: {self.model_path}")

        if self._client is None:
            self._client = httpx.Client(base_url=self.server_url, timeout=self.timeout)

        try:
            response = self._client.get("/health")
        except httpx.HTTPError as e:
            raise ModelNotReadyError(f"Model server unreachable: {e}") from e

        if response.status_code != 200:
            raise ModelNotReadyError(f"Model server not ready (HTTP {response.status_code})")

        self._loaded = True
        self.logger.info(f"Model server ready at {self.server_url}")

    def generate(self, prompt: str) -> ModelOutput:
        if not self._loaded or self._client is None:
            raise ModelNotReadyError("Backend not loaded")

        payload = {
            "prompt": prompt,
            "n_predict": self.max_tokens,
            "temperature": self.temperature,
            "stop": [CHATML_END],
        }

        try:
            response = self._client.post("/completion", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise ModelInferenceError(f"Generation timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ModelInferenceError(f"Generation failed: {e}") from e
        except ValueError as e:
            raise ModelInferenceError(f"Server returned non-JSON body: {e}") from e

        if not isinstance(data, dict):
            raise ModelInferenceError(f"Server returned {type(data).__name__}, expected an object")

        return ModelOutput(
            content=data.get("content", ""),
            model=data.get("model", os.path.basename(self.model_path or "")),
            tokens_used=data.get("tokens_predicted", 0),
            finish_reason="stop" if data.get("stop") else "length",
            raw_response=data,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        self._loaded = False
