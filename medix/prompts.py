import json
from typing import Any

from medix.models import PatientInput
from medix.services.reference_store import ReferenceDocument

TRIAGE_SYSTEM_PROMPT = """You are AI Medix Triage Engine, a medical triage assistant. Classify \
the urgency of the patient's symptoms and give structured, cautious guidance.

Return ONLY a single valid JSON object. No markdown, no code fences, no commentary.

JSON schema:
{
  "urgency": "EMERGENCY" | "URGENT" | "ROUTINE" | "SELF_CARE",
  "redFlags": ["dangerous symptoms detected"],
  "summary": "Brief clinical summary of the situation",
  "nextSteps": ["actionable steps the patient should take"],
  "questions": ["follow-up questions that would sharpen the assessment"],
  "citations": [{"title": "source name", "url": "source URL", "quote": "relevant excerpt"}]
}

Classification rules:
1. EMERGENCY: chest pain with shortness of breath, severe bleeding, stroke signs (FAST), \
anaphylaxis, loss of consciousness, seizures, severe burns, poisoning
2. URGENT: high fever (>39.4C / 103F) lasting more than 48h, moderate dehydration, persistent \
vomiting, severe pain, head injury with confusion
3. ROUTINE: mild to moderate symptoms, chronic condition flare-ups, infections that may need \
prescription treatment, injuries that need medical evaluation
4. SELF_CARE: common cold, mild headache, minor cuts, mild allergies, muscle soreness

Safety rules:
- Pregnant patient: escalate urgency by one level and recommend an OB/GYN consultation
- Child (<12): escalate urgency by one level
- Elderly (>65): note age-related risks
- Always cite at least one source from WHO, NHS or MedlinePlus
- When in doubt, choose the higher urgency
- NEVER diagnose definitively; use phrases such as "may indicate" or "could suggest"
"""

DIAGNOSE_SYSTEM_PROMPT = """You are AI Medix, a cautious medical assistant. Suggest \
over-the-counter (OTC) medicines and general self-care advice.
NEVER suggest prescription-only drugs, antibiotics, or controlled substances.
ALWAYS advise the user to consult a doctor.

Instructions:
1. Provide 4 to 5 distinct medicine options when symptoms allow.
2. Respect the patient's age strictly.
   - Child (<12 years): pediatric formulations only (syrups, drops, chewables) with \
age-appropriate dosage such as "5ml every 6 hours". Never give adult dosages to children.
3. "formula" is the chemical structure (e.g. C13H18O2), NOT the drug name.

Return ONLY a single valid JSON object:
{
  "medicines": [
    {
      "name": "Generic name",
      "formula": "Chemical structure",
      "brands": ["Brand 1", "Brand 2"],
      "dosage": "General dosage",
      "usage": "Indication",
      "type": "OTC",
      "warning": "Key interactions and warnings"
    }
  ],
  "generalAdvice": "Non-pharmacological advice (rest, fluids, diet)",
  "seeDoctor": true,
  "safetyNotes": ["Safety warnings specific to this patient"]
}"""

REPAIR_FALLBACK_SYSTEM_PROMPT = "You are a JSON repair assistant. Output only valid JSON."

DIAGNOSE_TASK = (
    "Task: recommend safe OTC medicines for these symptoms. "
    'If the symptoms are severe, return no medicines and set "seeDoctor" to true.'
)


def build_user_content(patient: PatientInput) -> str:
    """Render patient intake as one line per present field, symptoms first."""
    lines = [f"Symptoms: {patient.symptoms}"]
    if patient.age is not None:
        lines.append(f"Age: {patient.age}")
    if patient.gender is not None:
        lines.append(f"Gender: {patient.gender.value}")
    if patient.duration:
        lines.append(f"Duration: {patient.duration}")
    if patient.allergies:
        lines.append(f"Known Allergies: {patient.allergies}")
    if patient.current_medications:
        lines.append(f"Current Medications: {patient.current_medications}")
    if patient.pregnant:
        lines.append("Patient is pregnant")
    return "\n".join(lines)


def build_diagnose_content(patient: PatientInput) -> str:
    return f"{build_user_content(patient)}\n\n{DIAGNOSE_TASK}"


def format_reference_context(references: list[ReferenceDocument]) -> str:
    if not references:
        return ""

    sources = "\n\n".join(
        f"[Source {i}: {ref['title']}]\n{ref['excerpt']}\nURL: {ref['url']}"
        for i, ref in enumerate(references, start=1)
    )
    return (
        "\n\n--- REFERENCE MEDICAL LITERATURE ---\n"
        "Ground your response in these sources and cite them in the citations array.\n\n"
        f"{sources}\n"
        "--- END REFERENCES ---"
    )


def build_repair_prompt(invalid_value: Any, errors: list[dict[str, Any]]) -> str:
    if isinstance(invalid_value, str):
        original = invalid_value
    else:
        original = json.dumps(invalid_value, indent=2, default=str)
    return (
        "The following JSON output failed validation. Fix it to match the required schema.\n\n"
        f"Validation errors: {json.dumps(errors)}\n\n"
        f"Original output:\n{original}\n\n"
        "Return ONLY the corrected JSON object. No explanation, no markdown."
    )
