import pytest

from medix.safety.intake import needs_more_info, too_short


@pytest.mark.parametrize("symptoms", ["", "   ", "cough", "help me"])
def test_short_descriptions_rejected(symptoms):
    assert "more detail" in needs_more_info(symptoms)


@pytest.mark.parametrize("symptoms", ["I am unwell", "feel unwell", "medicine", "I feel sick"])
def test_vague_phrases_rejected(symptoms):
    assert "too general" in needs_more_info(symptoms, min_length=5)


def test_specific_description_accepted():
    assert needs_more_info("headache with fever for 2 days") is None


@pytest.mark.parametrize(
    "symptoms,min_length,rejected",
    [("rash", 3, False), ("rash", 5, True), ("  rash  ", 5, True)],
)
def test_too_short_uses_threshold(symptoms, min_length, rejected):
    assert (too_short(symptoms, min_length) is not None) is rejected
