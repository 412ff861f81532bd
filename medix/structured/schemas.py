"""Output contracts for generated triage and medicine-suggestion results.

Each result type carries its own defaults, so every call site (the pipeline,
the deterministic fallbacks, the HTTP layer) shares one authoritative
definition of what a valid result looks like.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_CITATION_TITLE = "Unknown Source"
DEFAULT_FORMULA = "N/A"
DEFAULT_DOSAGE = "Consult a doctor"
DEFAULT_MEDICINE_TYPE = "OTC"
DEFAULT_MEDICINE_WARNING = "Consult healthcare professional before use"
DEFAULT_GENERAL_ADVICE = "Please consult a healthcare professional."


class SchemaKind(str, Enum):
    TRIAGE = "triage"
    DIAGNOSE = "diagnose"


class Urgency(str, Enum):
    EMERGENCY = "EMERGENCY"
    URGENT = "URGENT"
    ROUTINE = "ROUTINE"
    SELF_CARE = "SELF_CARE"


class ResultModel(BaseModel):
    """Accepts camelCase or snake_case keys; serializes as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Citation(ResultModel):
    title: str = DEFAULT_CITATION_TITLE
    url: str = ""
    quote: str = ""


class TriageResult(ResultModel):
    urgency: Urgency
    red_flags: list[str] = Field(default_factory=list)
    summary: str = Field(..., min_length=1)
    next_steps: list[str] = Field(default_factory=list)
    questions: list[str] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)


class Medicine(ResultModel):
    name: str
    # Chemical structure (e.g. C13H18O2), not the drug name
    formula: str = DEFAULT_FORMULA
    brands: list[str] = Field(default_factory=list)
    dosage: str = DEFAULT_DOSAGE
    usage: str = ""
    type: str = DEFAULT_MEDICINE_TYPE
    warning: str = DEFAULT_MEDICINE_WARNING


class DiagnoseResult(ResultModel):
    medicines: list[Medicine] = Field(default_factory=list)
    general_advice: str = DEFAULT_GENERAL_ADVICE
    see_doctor: bool = True
    safety_notes: list[str] = Field(default_factory=list)


RESULT_SCHEMAS: dict[SchemaKind, type[ResultModel]] = {
    SchemaKind.TRIAGE: TriageResult,
    SchemaKind.DIAGNOSE: DiagnoseResult,
}
