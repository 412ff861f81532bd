"""Pure logic tests for the safety gate; no backend calls."""

import pytest

from medix.models import PatientInput
from medix.safety.gate import (
    CHILD_NOTE,
    ELDERLY_NOTE,
    EMERGENCY_RULES,
    INFANT_NOTE,
    PREGNANCY_NOTE,
    assess,
    parse_age,
)


def _patient(symptoms: str = "runny nose and sneezing", **kwargs) -> PatientInput:
    return PatientInput(symptoms=symptoms, **kwargs)


class TestEmergencyPatterns:
    @pytest.mark.parametrize(
        "symptoms",
        [
            "chest pain and shortness of breath",
            "I cannot breathe properly",
            "signs of a stroke, face droop",
            "had a seizure this morning",
            "he passed out and is unconscious",
            "severe bleeding from a cut",
            "anaphylaxis after peanuts",
            "I want to die",
            "my child swallowed bleach",
            "possible overdose of sleeping pills",
        ],
    )
    def test_emergency_detected(self, symptoms):
        result = assess(_patient(symptoms))
        assert result.emergency_detected is True
        assert result.warnings

    def test_case_insensitive(self):
        result = assess(_patient("CHEST PAIN WITH DIFFICULTY BREATHING"))
        assert result.emergency_detected is True

    def test_all_matching_rules_contribute(self):
        result = assess(_patient("chest pain and can't breathe"))
        assert len(result.warnings) >= 2
        assert any("cardiac" in w for w in result.warnings)
        assert any("breathing difficulty" in w for w in result.warnings)

    def test_warnings_follow_rule_order(self):
        result = assess(_patient("seizure then severe bleeding"))
        reasons = [rule.reason for rule in EMERGENCY_RULES]
        indices = [reasons.index(w) for w in result.warnings]
        assert indices == sorted(indices)

    def test_no_emergency_for_mild_symptoms(self):
        result = assess(_patient("mild headache"))
        assert result.emergency_detected is False
        assert result.warnings == []
        assert result.blocked is False

    def test_emergency_alone_does_not_block(self):
        result = assess(_patient("had a seizure"))
        assert result.blocked is False


class TestPregnancy:
    def test_pregnancy_blocks(self):
        result = assess(_patient(pregnant=True))
        assert result.blocked is True
        assert PREGNANCY_NOTE in result.safety_notes
        assert result.emergency_detected is False


class TestAgeTiers:
    @pytest.mark.parametrize("age", [0, 1])
    def test_infant_blocked(self, age):
        result = assess(_patient(age=age))
        assert result.blocked is True
        assert result.safety_notes == [INFANT_NOTE]

    @pytest.mark.parametrize("age", [2, 5, 11])
    def test_child_note_only(self, age):
        result = assess(_patient(age=age))
        assert result.blocked is False
        assert result.safety_notes == [CHILD_NOTE]

    @pytest.mark.parametrize("age", [12, 30, 65])
    def test_adult_no_note(self, age):
        result = assess(_patient(age=age))
        assert result.safety_notes == []

    def test_elderly_note_only(self):
        result = assess(_patient(age=70))
        assert result.blocked is False
        assert result.safety_notes == [ELDERLY_NOTE]

    def test_unknown_age_ignored(self):
        result = assess(_patient(age="unknown"))
        assert result.safety_notes == []
        assert result.blocked is False

    def test_notes_accumulate_in_rule_order(self):
        result = assess(_patient("had a seizure", pregnant=True, age=1))
        assert result.emergency_detected is True
        assert result.blocked is True
        assert result.safety_notes == [PREGNANCY_NOTE, INFANT_NOTE]


class TestParseAge:
    @pytest.mark.parametrize(
        "value,expected",
        [(30, 30), ("30", 30), ("30 years", 30), (None, None), ("abc", None), (-1, None)],
    )
    def test_parse_age(self, value, expected):
        assert parse_age(value) == expected
