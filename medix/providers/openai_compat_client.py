import logging

import httpx

from medix.config import Settings
from medix.providers.base import (
    GenerationOptions,
    ProviderError,
    ProviderNotConfigured,
    TextProvider,
    require_text,
)

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(TextProvider):
    """Any ``/chat/completions`` endpoint speaking the OpenAI message-list format."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.name = name
        self.model = model
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=3.0),
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        if not self._api_key:
            raise ProviderNotConfigured(f"{self.name} API key not configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        try:
            response = await self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{self.name} API failed with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(f"{self.name} request failed: {exc}") from exc

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError(f"Malformed {self.name} envelope") from exc
        return require_text(self.name, text)

    async def close(self) -> None:
        await self._client.aclose()


def sambanova_provider(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> OpenAICompatibleProvider:
    """SambaNova large-model backend (secondary)."""
    return OpenAICompatibleProvider(
        name="sambanova",
        base_url=settings.sambanova_base_url,
        api_key=settings.sambanova_api_key,
        model=settings.sambanova_model,
        timeout=settings.provider_timeout_seconds,
        transport=transport,
    )
