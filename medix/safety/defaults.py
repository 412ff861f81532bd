"""Hardcoded results for paths that must not depend on a generative backend."""

from medix.structured.schemas import Citation, DiagnoseResult, TriageResult, Urgency

EMERGENCY_SUMMARY = (
    "Emergency symptoms detected. Please seek immediate medical attention "
    "or call emergency services."
)
EMERGENCY_NEXT_STEPS = [
    "Call your local emergency number immediately",
    "Do not drive yourself; have someone take you or wait for an ambulance",
    "If available, use any prescribed emergency medication (e.g., EpiPen, nitroglycerin)",
]

UNAVAILABLE_SUMMARY = (
    "Unable to reach AI services. Based on general guidance, please monitor your symptoms."
)
UNVALIDATED_SUMMARY = (
    "AI analysis completed but its output could not be validated. "
    "Please consult a healthcare professional."
)

BLOCKED_ADVICE = (
    "Based on your risk factors (pregnancy, age, or specific symptoms), we cannot "
    "provide automated medicine suggestions. Please consult a specialist."
)
EMERGENCY_ADVICE = (
    "Your symptoms may need emergency care. Do not self-medicate; "
    "seek immediate medical attention."
)
UNAVAILABLE_ADVICE = (
    "Medicine suggestions are unavailable right now. "
    "Please consult a doctor or pharmacist before taking any medication."
)

# Fallback reasons
PROVIDERS_EXHAUSTED = "providers_exhausted"
VALIDATION_FAILED = "validation_failed"
PIPELINE_ERROR = "pipeline_error"


def emergency_triage(warnings: list[str]) -> TriageResult:
    return TriageResult(
        urgency=Urgency.EMERGENCY,
        red_flags=list(warnings) or ["Emergency symptoms reported"],
        summary=EMERGENCY_SUMMARY,
        next_steps=list(EMERGENCY_NEXT_STEPS),
        questions=[],
        citations=[
            Citation(
                title="WHO Emergency Care",
                url="https://www.who.int/emergencies",
                quote="Seek immediate medical attention for life-threatening symptoms.",
            )
        ],
    )


def fallback_triage(reason: str) -> TriageResult:
    if reason == PROVIDERS_EXHAUSTED:
        return TriageResult(
            urgency=Urgency.ROUTINE,
            summary=UNAVAILABLE_SUMMARY,
            next_steps=[
                "Visit a healthcare provider if symptoms persist beyond 48 hours",
                "Stay hydrated and rest",
            ],
            questions=[
                "How long have you experienced these symptoms?",
                "Do you have any chronic conditions?",
            ],
            citations=[
                Citation(
                    title="WHO General Health",
                    url="https://www.who.int",
                    quote="Seek medical advice if symptoms persist.",
                )
            ],
        )
    return TriageResult(
        urgency=Urgency.ROUTINE,
        summary=UNVALIDATED_SUMMARY,
        next_steps=["Visit a doctor for proper evaluation"],
    )


def blocked_diagnose(emergency: bool) -> DiagnoseResult:
    return DiagnoseResult(
        medicines=[],
        general_advice=EMERGENCY_ADVICE if emergency else BLOCKED_ADVICE,
        see_doctor=True,
    )


def fallback_diagnose() -> DiagnoseResult:
    return DiagnoseResult(
        medicines=[],
        general_advice=UNAVAILABLE_ADVICE,
        see_doctor=True,
    )
