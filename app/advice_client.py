"""
Language-model client used by the advice generator.

The advice generator only depends on the AdviceClient protocol: an object
with an async complete_json(prompt) method returning the parsed JSON
object the model produced. OpenAIChatClient is the production
implementation; tests inject a fake.

OpenAIChatClient talks to any OpenAI-compatible /chat/completions endpoint
over httpx, asking for a JSON-object response. It raises on every failure
(no API key, HTTP error, non-JSON content); the advice generator decides
what the user sees in that case.
"""

import json
from typing import Protocol

import httpx

from app.config import Settings


class AdviceClientError(Exception):
    """Raised when the language model cannot produce a usable answer."""


class AdviceClient(Protocol):
    async def complete_json(self, prompt: str) -> dict: ...

    async def aclose(self) -> None: ...


class OpenAIChatClient:
    """
    Chat-completions client for an OpenAI-compatible API.

    Args:
        api_key: Bearer token for the API. Without one, every call raises
                 AdviceClientError.
        base_url: API root, e.g. "https://api.openai.com/v1".
        model: Model name sent with each request.
        temperature: Sampling temperature.
        timeout: Per-request timeout in seconds.
        http_client: Optional pre-built httpx.AsyncClient (for tests).
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        )

    async def complete_json(self, prompt: str) -> dict:
        if not self.api_key:
            raise AdviceClientError("No language-model API key configured")

        response = await self._http.post(
            "/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "response_format": {"type": "json_object"},
                "temperature": self.temperature,
            },
        )
        response.raise_for_status()

        try:
            content = response.json()["choices"][0]["message"]["content"]
            payload = json.loads(content)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise AdviceClientError(f"Unexpected completion payload: {exc}") from exc

        if not isinstance(payload, dict):
            raise AdviceClientError("Completion is not a JSON object")
        return payload

    async def aclose(self) -> None:
        await self._http.aclose()
