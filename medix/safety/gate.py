"""Deterministic pre-generation safety checks.

Runs before any generative call and never depends on model cooperation.
Rules are data: adding an emergency pattern means adding a row to
``EMERGENCY_RULES``, not a new branch.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from medix.models import PatientInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SafetyRule:
    pattern: re.Pattern
    reason: str


@dataclass
class SafetyAssessment:
    blocked: bool = False
    emergency_detected: bool = False
    warnings: list[str] = field(default_factory=list)
    safety_notes: list[str] = field(default_factory=list)


def _rule(pattern: str, reason: str) -> SafetyRule:
    return SafetyRule(re.compile(pattern, re.IGNORECASE), reason)


EMERGENCY_RULES: list[SafetyRule] = [
    _rule(
        r"chest\s*pain.*(?:breath|breathing|shortness)",
        "Chest pain with breathing difficulty: possible cardiac event",
    ),
    _rule(
        r"(?:shortness|difficulty)\s*(?:of\s*)?breath.*chest",
        "Breathing difficulty with chest symptoms: possible cardiac event",
    ),
    _rule(
        r"(?:can'?t|cannot|unable)\s*(?:to\s*)?breathe",
        "Severe breathing difficulty: requires immediate attention",
    ),
    _rule(
        r"(?:stroke|paralysis|face\s*droop|slurred\s*speech|can'?t\s*move\s*(?:my\s*)?(?:arm|leg|face))",
        "Possible stroke symptoms: FAST protocol applies",
    ),
    _rule(
        r"(?:seizure|convulsion|fitting)",
        "Seizure activity: requires emergency evaluation",
    ),
    _rule(
        r"(?:unconscious|passed\s*out|not\s*responsive|unresponsive)",
        "Loss of consciousness: requires emergency care",
    ),
    _rule(
        r"(?:severe|heavy|uncontrolled)\s*bleeding",
        "Severe bleeding: requires immediate medical intervention",
    ),
    _rule(
        r"(?:anaphyla|throat\s*(?:closing|swelling).*allerg)",
        "Possible anaphylaxis: use an EpiPen if available and call emergency services",
    ),
    _rule(
        r"(?:suicid|self.?harm|want\s*to\s*die|kill\s*myself)",
        "Mental health emergency: contact a crisis helpline immediately",
    ),
    _rule(
        r"(?:poison|overdose|swallowed\s*(?:a\s*)?(?:chemical|bleach|pills))",
        "Possible poisoning or overdose: call poison control immediately",
    ),
]

PREGNANCY_NOTE = (
    "Patient is pregnant: no medication suggestions will be provided. "
    "Please consult your OB/GYN or healthcare provider."
)
INFANT_NOTE = (
    "Patient is an infant (<2 years): no OTC medication suggestions. "
    "Consult a pediatrician immediately."
)
CHILD_NOTE = (
    "Patient is a child: dosages must be pediatric-appropriate. Consult a pediatrician."
)
ELDERLY_NOTE = (
    "Patient is elderly: drug interactions and kidney/liver function should be considered."
)

INFANT_MAX_AGE = 2
CHILD_MAX_AGE = 12
ELDERLY_MIN_AGE = 65

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_age(age: Any) -> int | None:
    """Integer age, or ``None`` when absent or unparseable."""
    if age is None or isinstance(age, bool):
        return None
    if isinstance(age, int):
        return age if age >= 0 else None
    match = _LEADING_INT.match(str(age))
    return int(match.group(1)) if match else None


def assess(patient: PatientInput) -> SafetyAssessment:
    """Evaluate every rule against the intake; all triggered rules contribute."""
    assessment = SafetyAssessment()

    for rule in EMERGENCY_RULES:
        if rule.pattern.search(patient.symptoms):
            assessment.emergency_detected = True
            assessment.warnings.append(rule.reason)

    if patient.pregnant:
        assessment.blocked = True
        assessment.safety_notes.append(PREGNANCY_NOTE)

    age = parse_age(patient.age)
    if age is not None:
        if age < INFANT_MAX_AGE:
            assessment.blocked = True
            assessment.safety_notes.append(INFANT_NOTE)
        elif age < CHILD_MAX_AGE:
            assessment.safety_notes.append(CHILD_NOTE)
        elif age > ELDERLY_MIN_AGE:
            assessment.safety_notes.append(ELDERLY_NOTE)

    if assessment.emergency_detected or assessment.blocked:
        logger.info(
            "Safety gate: emergency=%s blocked=%s warnings=%d",
            assessment.emergency_detected,
            assessment.blocked,
            len(assessment.warnings),
        )
    return assessment
