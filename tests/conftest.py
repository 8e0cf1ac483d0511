"""Shared fixtures: settings, canned model outputs and stage doubles."""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from lead_intake.config import Settings
from lead_intake.prompts import analyst_instructions, composer_instructions, signature_html
from lead_intake.services.analyzer import LeadAnalyzer
from lead_intake.services.composer import EmailComposer
from lead_intake.services.intake import validate_lead
from lead_intake.services.llm import LLMClient


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        azure_tenant_id="tenant-123",
        azure_client_id="client-456",
        azure_client_secret="secret-789",
        sender_email_address="yousef@advancify.test",
    )


@pytest.fixture
def sara_payload():
    return {
        "name": "Sara",
        "email": "sara@x.com",
        "description": "We are drowning in WhatsApp leads, need 24/7 coverage",
        "preferred_language": "English",
    }


@pytest.fixture
def sara_lead(sara_payload):
    return validate_lead(sara_payload)


@pytest.fixture
def sara_lead_arabic(sara_payload):
    return validate_lead({**sara_payload, "preferred_language": "Arabic"})


@pytest.fixture
def analysis_data():
    return {
        "name": "Sara",
        "language": "English",
        "business_context": "We are drowning in WhatsApp leads, need 24/7 coverage",
        "industry": "b2b_services",
        "decision": "good_fit",
        "confidence": 9,
        "justification": "Stated need for round-the-clock lead handling matches the chat assistant.",
        "emotional_state": "overwhelmed",
        "urgency_level": "high",
        "company_stage": "unknown",
        "recommended_services": [
            {"service": "24/7 Virtual Chat Assistant", "description": "Answers and qualifies WhatsApp leads around the clock."}
        ],
    }


@pytest.fixture
def not_a_fit_data(analysis_data):
    return {
        **analysis_data,
        "decision": "not_a_fit",
        "confidence": 2,
        "justification": "No overlap with automation services.",
        "emotional_state": "neutral",
        "recommended_services": [],
    }


@pytest.fixture
def email_data():
    return {
        "subject": "Your WhatsApp leads, covered 24/7",
        "subject_variations": ["Never miss a WhatsApp lead", "24/7 coverage for Sara"],
        "body": "<p>Hi Sara,</p><p>Quick question about your WhatsApp backlog...</p>",
        "psychology_techniques": ["authority", "reciprocity"],
        "emotional_adaptation": "Simplified message for an overwhelmed reader",
        "industry_template": "B2B Services & Consulting",
        "confidence_level": "high",
        "estimated_performance": {"open_rate": "52%", "reply_rate": "18%", "meeting_probability": "11%"},
        "personalization_depth": "high",
        "natural_language_score": "8/10",
    }


def completion(content):
    """Shape of an openai ChatCompletion, as far as LLMClient reads it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client_factory():
    """Build a mocked AsyncOpenAI whose completions return the given bodies in order."""
    def _build(*responses):
        client = MagicMock()
        contents = [r if isinstance(r, str) else json.dumps(r) for r in responses]
        client.chat.completions.create = AsyncMock(side_effect=[completion(c) for c in contents])
        return client
    return _build


@pytest.fixture
def stages_factory(settings, openai_client_factory):
    """Real analyzer and composer sharing one mocked model backend."""
    def _build(*responses):
        openai_client = openai_client_factory(*responses)
        llm = LLMClient(openai_client, settings.openai_model)
        analyzer = LeadAnalyzer(llm, analyst_instructions(settings))
        composer = EmailComposer(
            llm,
            composer_instructions(settings),
            signature=signature_html(settings),
            sender_name=settings.sender_name,
        )
        return analyzer, composer, openai_client
    return _build


@pytest.fixture
def mailer():
    mock = MagicMock()
    mock.deliver = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def archive():
    mock = MagicMock()
    mock.archive = AsyncMock(return_value=None)
    mock.exists = AsyncMock(return_value=False)
    return mock
