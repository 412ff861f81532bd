from groq import AsyncGroq

from medix.config import Settings
from medix.providers.base import (
    GenerationOptions,
    ProviderError,
    ProviderNotConfigured,
    TextProvider,
    require_text,
)


class GroqProvider(TextProvider):
    """Groq chat completions (message-list envelope). Primary, fast backend."""

    name = "groq"

    def __init__(self, settings: Settings, client: AsyncGroq | None = None) -> None:
        self.model = settings.groq_model
        self._api_key = settings.groq_api_key
        self._client = client
        if self._client is None and self._api_key:
            self._client = AsyncGroq(
                api_key=self._api_key,
                timeout=settings.provider_timeout_seconds,
                max_retries=0,
            )

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        if self._client is None:
            raise ProviderNotConfigured("Groq API key not configured")

        kwargs = {}
        if options.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=options.temperature,
            max_tokens=options.max_tokens,
            **kwargs,
        )
        try:
            text = completion.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise ProviderError(f"Malformed Groq envelope: {exc}") from exc
        return require_text(self.name, text)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
