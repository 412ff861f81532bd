from abc import ABC, abstractmethod
from dataclasses import dataclass


class ProviderError(Exception):
    """A backend call failed: transport, auth, non-2xx, or malformed envelope."""


class ProviderNotConfigured(ProviderError):
    """The backend has no credentials and cannot be called."""


@dataclass(frozen=True)
class GenerationOptions:
    temperature: float = 0.3
    max_tokens: int = 2048
    json_mode: bool = True


@dataclass
class ProviderCallRecord:
    provider_name: str
    latency_ms: int
    success: bool
    used_fallback: bool
    error: str | None = None


class TextProvider(ABC):
    """One generative backend, normalized to system prompt + user prompt -> text."""

    name: str
    model: str

    @property
    @abstractmethod
    def configured(self) -> bool: ...

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        """Return the completion text. Raise ``ProviderError`` on any failure."""

    async def close(self) -> None:
        return None


def require_text(provider: str, text: str | None) -> str:
    if not text or not text.strip():
        raise ProviderError(f"{provider} returned an empty completion")
    return text
