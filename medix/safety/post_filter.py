"""Denylist enforcement on generated medicine suggestions.

Runs on every validated medicine list, whatever the model did upstream.
"""

import logging
import re
from dataclasses import dataclass

from medix.structured.schemas import Medicine

logger = logging.getLogger(__name__)

DEFAULT_WARNING = (
    "Consult a healthcare professional before use. This is general OTC guidance only."
)
GUIDANCE_TYPE = "OTC Guidance"

# Dosage-form wording; only read from name and formula, never from usage text
_TOPICAL = re.compile(r"\b(?:topical|cream|ointment|lotion)\b", re.IGNORECASE)


@dataclass(frozen=True)
class DenyRule:
    pattern: re.Pattern
    label: str
    exempt: re.Pattern | None = None

    def matches(self, text: str, form: str) -> bool:
        if not self.pattern.search(text):
            return False
        return not (self.exempt and self.exempt.search(form))


def _deny(pattern: str, label: str, exempt: re.Pattern | None = None) -> DenyRule:
    return DenyRule(re.compile(pattern, re.IGNORECASE), label, exempt)


DENY_RULES: list[DenyRule] = [
    _deny(
        r"antibiotic|amoxicillin|penicillin|azithromycin|ciprofloxacin|doxycycline|cephalexin",
        "antibiotic",
    ),
    _deny(r"(?<!non-)(?<!non )opioid|opiate", "opioid"),
    _deny(
        r"morphine|codeine|tramadol|oxycodone|hydrocodone|fentanyl|hydromorphone|methadone|tapentadol",
        "opioid analogue",
    ),
    _deny(
        r"benzodiazepine|diazepam|alprazolam|lorazepam|clonazepam",
        "benzodiazepine",
    ),
    _deny(r"insulin", "insulin"),
    _deny(r"chemotherapy|methotrexate|cyclophosphamide", "chemotherapy agent"),
    _deny(
        r"steroid|prednisone|prednisolone|dexamethasone",
        "systemic steroid",
        exempt=_TOPICAL,
    ),
]


def denied_label(medicine: Medicine) -> str | None:
    """Label of the first deny rule the medicine trips, else ``None``."""
    form = f"{medicine.name} {medicine.formula}"
    text = f"{form} {medicine.usage}"
    for rule in DENY_RULES:
        if rule.matches(text, form):
            return rule.label
    return None


def filter_medicines(medicines: list[Medicine]) -> list[Medicine]:
    """Drop denylisted entries; annotate survivors with a warning and guidance type."""
    kept: list[Medicine] = []
    for med in medicines:
        label = denied_label(med)
        if label is not None:
            logger.warning("Post-filter removed %r (%s)", med.name, label)
            continue
        kept.append(
            med.model_copy(
                update={
                    "warning": med.warning if med.warning.strip() else DEFAULT_WARNING,
                    "type": GUIDANCE_TYPE,
                }
            )
        )
    return kept
