"""
Language-model REST client.
Wraps POST /chat/completions of an OpenAI-compatible API (OpenAI, Ollama's /v1,
vLLM, …) for JSON-mode completions.
"""
import logging
from typing import Optional

import httpx

from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Thin client for an OpenAI-compatible chat completions endpoint.

    Built once from settings and passed to whoever needs it; holds no
    per-request state, so one instance serves every request.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or default_settings
        self.base_url = settings.LLM_BASE_URL.rstrip("/")
        self.model = settings.LLM_MODEL
        self.timeout = settings.LLM_TIMEOUT_SECONDS
        self.api_key = settings.LLM_API_KEY.strip()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def is_healthy(self) -> tuple[bool, Optional[str]]:
        """Returns (True, model_name) if the backend answers, (False, error) otherwise."""
        if not self.enabled:
            return False, "LLM_API_KEY is not set"
        try:
            resp = httpx.get(f"{self.base_url}/models", headers=self._headers(), timeout=5)
            resp.raise_for_status()
            return True, self.model
        except httpx.HTTPError as e:
            return False, str(e)

    def chat_json(self, messages: list[dict], temperature: float = 0.0) -> str:
        """
        Call /chat/completions in JSON-object mode and return the raw content
        of the first choice. Raises httpx.HTTPError on transport/status failure
        and KeyError/IndexError/ValueError on a malformed envelope.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }
        logger.debug("LLM chat request: model=%s, %d messages", self.model, len(messages))
        resp = httpx.post(
            f"{self.base_url}/chat/completions",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        content = resp.json()["choices"][0]["message"]["content"]
        logger.debug("LLM response length: %d chars", len(content or ""))
        return content or ""

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}
