import re

_VAGUE_PATTERNS = [
    re.compile(r"^(?:i\s*)?(?:feel|am)\s*(?:bad|sick|ill|unwell)$", re.IGNORECASE),
    re.compile(r"^(?:help|medicine|drug)$", re.IGNORECASE),
]

TOO_SHORT_REASON = "Please provide more detail about your symptoms for accurate guidance."
TOO_VAGUE_REASON = (
    "Your description is too general. Please describe specific symptoms "
    '(e.g., "headache with fever for 2 days").'
)


def too_short(symptoms: str, min_length: int) -> str | None:
    """Reason the symptom text is below ``min_length`` characters, else ``None``."""
    if len((symptoms or "").strip()) < min_length:
        return TOO_SHORT_REASON
    return None


def needs_more_info(symptoms: str, min_length: int = 10) -> str | None:
    """Reason the description is too thin for medicine suggestions, else ``None``."""
    reason = too_short(symptoms, min_length)
    if reason is not None:
        return reason
    text = symptoms.strip()
    for pattern in _VAGUE_PATTERNS:
        if pattern.match(text):
            return TOO_VAGUE_REASON
    return None
