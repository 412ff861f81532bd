from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from medix.api import diagnose, health, triage
from medix.main import app
from medix.middleware.rate_limit import limiter
from medix.models import DiagnoseResponse, TriageResponse
from medix.structured.schemas import Medicine, Urgency


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def triage_response():
    return TriageResponse(
        urgency=Urgency.SELF_CARE,
        summary="Likely a tension headache.",
        next_steps=["Rest", "Hydrate"],
        provider_used="primary",
        provider_name="groq",
        latency_ms=42,
        request_id="req-001",
    )


@pytest.fixture
def diagnose_response():
    return DiagnoseResponse(
        medicines=[
            Medicine(name="Paracetamol", formula="C8H9NO2", type="OTC Guidance"),
        ],
        general_advice="Rest and drink fluids.",
        provider_used="primary",
        provider_name="groq",
        request_id="req-002",
    )


@pytest.fixture
def mock_service(triage_response, diagnose_response):
    """Mock TriageService with two configured backends and no reference store."""
    service = AsyncMock()
    service.run_triage.return_value = triage_response
    service.run_diagnose.return_value = diagnose_response

    groq = MagicMock()
    groq.name, groq.model, groq.configured = "groq", "llama-3.3-70b-versatile", True
    gemini = MagicMock()
    gemini.name, gemini.model, gemini.configured = "gemini", "gemini-1.5-flash", False

    service.adapter = MagicMock()
    service.adapter.providers = [groq, gemini]
    service.reference_store = None
    return service


@pytest_asyncio.fixture
async def client(mock_service):
    for module in (triage, diagnose, health):
        module.set_dependencies(mock_service)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    for module in (triage, diagnose, health):
        module.set_dependencies(None)
