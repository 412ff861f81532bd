import asyncio
import logging
from typing import Any

from medix.prompts import REPAIR_FALLBACK_SYSTEM_PROMPT, build_repair_prompt
from medix.providers.base import GenerationOptions, TextProvider
from medix.structured.extractor import extract
from medix.structured.schemas import ResultModel, SchemaKind
from medix.structured.validator import validate

logger = logging.getLogger(__name__)

# Raw text embedded in a repair prompt is capped to keep the call bounded
MAX_RAW_REPAIR_CHARS = 4000


class RepairLoop:
    """Single-shot self-correction against one fixed low-temperature backend."""

    def __init__(
        self,
        provider: TextProvider | None,
        options: GenerationOptions,
        timeout: float = 12.0,
    ) -> None:
        self._provider = provider
        self._options = options
        self._timeout = timeout

    @property
    def provider(self) -> TextProvider | None:
        return self._provider

    async def repair(
        self,
        invalid_value: Any,
        errors: list[dict[str, Any]],
        kind: SchemaKind,
        system_prompt: str | None = None,
    ) -> ResultModel | None:
        """Ask the backend to correct ``invalid_value``; ``None`` if that fails."""
        if self._provider is None or not self._provider.configured:
            logger.warning("Repair skipped: no repair backend configured")
            return None

        if isinstance(invalid_value, str):
            invalid_value = invalid_value[:MAX_RAW_REPAIR_CHARS]

        prompt = build_repair_prompt(invalid_value, errors)
        try:
            text = await asyncio.wait_for(
                self._provider.generate(
                    system_prompt or REPAIR_FALLBACK_SYSTEM_PROMPT,
                    prompt,
                    self._options,
                ),
                timeout=self._timeout,
            )
        except Exception as exc:
            logger.error("Repair call to %s failed: %s", self._provider.name, exc)
            return None

        repaired = extract(text)
        if repaired is None:
            logger.warning("Repair output from %s was not parseable", self._provider.name)
            return None

        outcome = validate(repaired, kind)
        if not outcome.ok:
            logger.warning(
                "Repaired %s output still invalid: %s", SchemaKind(kind).value, outcome.errors
            )
            return None

        logger.info("Repair via %s succeeded", self._provider.name)
        return outcome.data
