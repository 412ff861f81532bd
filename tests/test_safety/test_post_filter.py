"""Denylist enforcement on medicine suggestions."""

import pytest

from medix.safety.post_filter import (
    DEFAULT_WARNING,
    GUIDANCE_TYPE,
    denied_label,
    filter_medicines,
)
from medix.structured.schemas import Medicine


def _med(name: str, formula: str = "N/A", usage: str = "", **kwargs) -> Medicine:
    return Medicine(name=name, formula=formula, usage=usage, **kwargs)


class TestDenylist:
    def test_antibiotic_in_formula_removed(self):
        meds = [_med("Paracetamol", "C8H9NO2"), _med("Amoxil", "antibiotic")]
        result = filter_medicines(meds)
        assert [m.name for m in result] == ["Paracetamol"]

    @pytest.mark.parametrize(
        "name",
        ["Codeine linctus", "Tramadol", "Morphine syrup", "Oxycodone", "Diazepam", "Insulin glargine"],
    )
    def test_controlled_names_removed(self, name):
        assert filter_medicines([_med(name)]) == []

    def test_match_in_usage_removed(self):
        meds = [_med("Mystery tablet", usage="a benzodiazepine for anxiety")]
        assert filter_medicines(meds) == []

    def test_systemic_steroid_removed(self):
        meds = [_med("Prednisolone", usage="oral steroid for inflammation")]
        assert filter_medicines(meds) == []

    def test_topical_steroid_cream_retained(self):
        meds = [_med("Hydrocortisone 1% cream", "C21H30O5", usage="mild steroid for itchy skin")]
        result = filter_medicines(meds)
        assert len(result) == 1
        assert result[0].name == "Hydrocortisone 1% cream"

    @pytest.mark.parametrize(
        "name,usage",
        [
            ("Dexamethasone", "oral steroid, take one gel capsule daily"),
            ("Prednisone", "oral tablets; use a moisturising lotion for dry skin"),
            ("Prednisolone gel caps", "oral steroid"),
        ],
    )
    def test_topical_wording_outside_dosage_form_not_exempt(self, name, usage):
        assert filter_medicines([_med(name, usage=usage)]) == []

    def test_topical_form_in_formula_retained(self):
        meds = [_med("Betamethasone", "topical corticosteroid", usage="steroid for eczema")]
        assert len(filter_medicines(meds)) == 1

    def test_non_opioid_label_retained(self):
        meds = [_med("Paracetamol", "C8H9NO2", usage="non-opioid analgesic")]
        assert len(filter_medicines(meds)) == 1

    def test_denied_label_reports_rule(self):
        assert denied_label(_med("Ciprofloxacin")) == "antibiotic"
        assert denied_label(_med("Cetirizine", "C21H25ClN2O3")) is None


class TestAnnotation:
    def test_type_normalized(self):
        result = filter_medicines([_med("Cetirizine", type="OTC")])
        assert result[0].type == GUIDANCE_TYPE

    def test_existing_warning_preserved(self):
        result = filter_medicines([_med("Ibuprofen", warning="Take with food")])
        assert result[0].warning == "Take with food"

    def test_blank_warning_replaced(self):
        result = filter_medicines([_med("Ibuprofen", warning="  ")])
        assert result[0].warning == DEFAULT_WARNING

    def test_input_not_mutated(self):
        original = _med("Ibuprofen", type="OTC")
        filter_medicines([original])
        assert original.type == "OTC"
