import json
from unittest.mock import AsyncMock

import pytest

from medix.config import Settings, get_settings
from medix.models import PatientInput
from medix.providers.adapter import ProviderAdapter
from medix.providers.base import GenerationOptions
from medix.service import TriageService
from medix.structured.repair import RepairLoop


_BACKEND_ENV = (
    "GROQ_API_KEY",
    "SAMBANOVA_API_KEY",
    "GEMINI_API_KEY",
    "ANTHROPIC_API_KEY",
    "PROVIDER_ORDER",
    "REPAIR_PROVIDER",
    "REFERENCE_DSN",
    "GCP_PROJECT_ID",
    "MIN_SYMPTOM_LENGTH",
)


@pytest.fixture(autouse=True)
def isolate_backend_env(monkeypatch):
    """Keep host credentials and overrides out of Settings()."""
    for name in _BACKEND_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(
        env="test",
        groq_api_key="test-groq",
        sambanova_api_key="test-sambanova",
        gemini_api_key="test-gemini",
        anthropic_api_key="",
        provider_timeout_seconds=2.0,
    )


@pytest.fixture
def make_provider():
    """Factory for backend fakes with a configurable completion or failure."""

    def _make(
        name: str,
        text: str | dict | None = None,
        error: BaseException | None = None,
        configured: bool = True,
    ):
        provider = AsyncMock()
        provider.name = name
        provider.model = f"{name}-model"
        provider.configured = configured
        if isinstance(text, dict):
            text = json.dumps(text)
        if error is not None:
            provider.generate.side_effect = error
        else:
            provider.generate.return_value = text
        return provider

    return _make


@pytest.fixture
def build_service():
    """Wire a TriageService around fake backends (no network)."""

    def _build(providers, repair_provider=None, reference_store=None):
        adapter = ProviderAdapter(providers, timeout=2.0)
        repair_loop = RepairLoop(
            repair_provider, GenerationOptions(temperature=0.1), timeout=2.0
        )
        return TriageService(
            adapter,
            repair_loop,
            GenerationOptions(),
            reference_store=reference_store,
        )

    return _build


@pytest.fixture
def headache_patient():
    return PatientInput(symptoms="mild headache", age=30)


@pytest.fixture
def emergency_patient():
    return PatientInput(symptoms="chest pain and can't breathe")


@pytest.fixture
def sample_triage_payload():
    return {
        "urgency": "SELF_CARE",
        "redFlags": [],
        "summary": "Mild tension-type headache may be related to stress or dehydration.",
        "nextSteps": ["Rest in a quiet room", "Drink water", "See a doctor if it persists"],
        "questions": ["Have you had a fever?"],
        "citations": [
            {
                "title": "NHS Headaches",
                "url": "https://www.nhs.uk/conditions/headaches/",
                "quote": "Most headaches go away on their own.",
            }
        ],
    }


@pytest.fixture
def sample_diagnose_payload():
    return {
        "medicines": [
            {
                "name": "Paracetamol",
                "formula": "C8H9NO2",
                "brands": ["Panadol", "Tylenol"],
                "dosage": "500mg every 6 hours",
                "usage": "Pain and fever relief",
                "type": "OTC",
                "warning": "Do not exceed 4g per day",
            },
            {
                "name": "Ibuprofen",
                "formula": "C13H18O2",
                "brands": ["Advil"],
                "dosage": "200mg every 6 hours with food",
                "usage": "Pain relief",
            },
            {
                "name": "Amoxicillin",
                "formula": "antibiotic C16H19N3O5S",
                "brands": ["Amoxil"],
                "dosage": "500mg",
                "usage": "Bacterial infection",
            },
        ],
        "general_advice": "Rest and stay hydrated.",
        "see_doctor": True,
        "safety_notes": ["Avoid ibuprofen with stomach ulcers"],
    }
