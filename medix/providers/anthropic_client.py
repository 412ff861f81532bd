import logging

from anthropic import AsyncAnthropic

from medix.config import Settings
from medix.providers.base import (
    GenerationOptions,
    ProviderError,
    ProviderNotConfigured,
    TextProvider,
    require_text,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(TextProvider):
    """Anthropic messages API. System prompt travels outside the message list."""

    name = "anthropic"

    def __init__(
        self, settings: Settings, client: AsyncAnthropic | None = None
    ) -> None:
        self.model = settings.anthropic_model
        self._client = client
        if self._client is None and settings.anthropic_api_key:
            self._client = AsyncAnthropic(
                api_key=settings.anthropic_api_key,
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
            raise ProviderNotConfigured("Anthropic API key not configured")

        # No native JSON mode; the system prompt already demands a bare object.
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        try:
            text = response.content[0].text
        except (AttributeError, IndexError) as exc:
            raise ProviderError(f"Malformed Anthropic envelope: {exc}") from exc

        logger.debug(
            "Anthropic usage: in=%d out=%d stop=%s",
            response.usage.input_tokens,
            response.usage.output_tokens,
            response.stop_reason,
        )
        return require_text(self.name, text)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
