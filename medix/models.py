import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from medix.structured.schemas import DiagnoseResult, TriageResult

# Patterns that indicate prompt injection attempts
_INJECTION_PATTERNS = re.compile(
    r"(?:ignore\s+(?:all\s+)?previous\s+instructions"
    r"|you\s+are\s+now\s+(?:a\s+)?(?:different|new)\s+(?:ai|assistant|model)"
    r"|system\s*:\s*you\s+are"
    r"|<\s*(?:system|admin|root)\s*>"
    r"|IGNORE\s+ALL\s+RULES"
    r"|override\s+(?:safety|content)\s+(?:filter|policy))",
    re.IGNORECASE,
)

_LEADING_INT = re.compile(r"^\s*(\d+)")

DETERMINISTIC_FALLBACK = "deterministic-fallback"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PatientInput(BaseModel):
    """Patient intake. Frozen: no pipeline stage may alter what was received."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    symptoms: str = Field(..., min_length=3, max_length=5_000)
    age: int | None = Field(default=None, ge=0)
    gender: Gender | None = None
    duration: str | None = None
    allergies: str | None = None
    current_medications: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "currentMedications", "current_medications", "currentMeds"
        ),
    )
    pregnant: bool = False

    @field_validator("symptoms", mode="before")
    @classmethod
    def strip_symptoms(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("symptoms")
    @classmethod
    def check_prompt_injection(cls, v: str) -> str:
        if _INJECTION_PATTERNS.search(v):
            raise ValueError("Input contains disallowed instruction patterns")
        return v

    @field_validator("age", mode="before")
    @classmethod
    def parse_age(cls, v: Any) -> int | None:
        """Leading-integer parse ("30 years" -> 30); anything else is unknown."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v)
        if isinstance(v, str):
            match = _LEADING_INT.match(v)
            return int(match.group(1)) if match else None
        return None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("duration", "allergies", "current_medications", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TriageResponse(TriageResult):
    safety_notes: list[str] = Field(default_factory=list)
    provider_used: str | None = None
    provider_name: str | None = None
    repaired: bool = False
    latency_ms: int = 0
    request_id: str = ""


class DiagnoseResponse(DiagnoseResult):
    provider_used: str | None = None
    provider_name: str | None = None
    repaired: bool = False
    latency_ms: int = 0
    request_id: str = ""


class ProviderStatus(BaseModel):
    name: str
    tier: str
    model: str
    configured: bool


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = "0.1.0"
    environment: str
    providers: list[ProviderStatus] = Field(default_factory=list)
    fallback_order: list[str] = Field(default_factory=list)
    checks: dict[str, str] = Field(default_factory=dict)
    uptime: str = "0s"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
