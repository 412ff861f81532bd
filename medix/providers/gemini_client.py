import httpx

from medix.config import Settings
from medix.providers.base import (
    GenerationOptions,
    ProviderError,
    ProviderNotConfigured,
    TextProvider,
    require_text,
)


class GeminiProvider(TextProvider):
    """Gemini ``generateContent`` (single-prompt envelope). Tertiary backend.

    The endpoint has no system role here, so the system prompt is folded
    into the one prompt text ahead of the user content.
    """

    name = "gemini"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = settings.gemini_model
        self._api_key = settings.gemini_api_key
        self._client = httpx.AsyncClient(
            base_url=settings.gemini_base_url,
            timeout=httpx.Timeout(settings.provider_timeout_seconds, connect=3.0),
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
            raise ProviderNotConfigured("Gemini API key not configured")

        generation_config = {
            "temperature": options.temperature,
            "maxOutputTokens": options.max_tokens,
        }
        if options.json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload = {
            "contents": [{"parts": [{"text": f"{system_prompt}\n\n{user_prompt}"}]}],
            "generationConfig": generation_config,
        }
        try:
            response = await self._client.post(
                f"/models/{self.model}:generateContent",
                params={"key": self._api_key},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"Gemini API failed with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError("Malformed Gemini envelope") from exc
        return require_text(self.name, text)

    async def close(self) -> None:
        await self._client.aclose()
