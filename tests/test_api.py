"""
Tests for the HTTP surface
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from lead_intake.errors import AIProcessingError, ArchivalError, CredentialError, DuplicateLeadError
from lead_intake.main import app
from lead_intake.routes.leads import get_pipeline
from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.email import ComposedEmail
from lead_intake.services.pipeline import PipelineResult


@pytest.fixture
def pipeline():
    mock = MagicMock()
    mock.run = AsyncMock()
    return mock


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def success_result(analysis_data, email_data):
    return PipelineResult(
        analysis=LeadAnalysis.model_validate(analysis_data),
        email=ComposedEmail.model_validate(email_data),
        delivered=True,
    )


class TestProcessLead:

    @pytest.mark.parametrize("path", ["/api/process-lead", "/process"])
    def test_success(self, client, pipeline, sara_payload, success_result, path):
        pipeline.run.return_value = success_result

        response = client.post(path, json=sara_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["analysis"]["decision"] == "good_fit"
        assert body["metrics"] == {"open_rate": 52.0, "reply_rate": 18.0, "meeting_probability": 11.0}
        pipeline.run.assert_awaited_once()

    def test_suppressed_email_has_null_metrics(self, client, pipeline, sara_payload, not_a_fit_data):
        pipeline.run.return_value = PipelineResult(
            analysis=LeadAnalysis.model_validate(not_a_fit_data), email=None, delivered=False
        )

        response = client.post("/api/process-lead", json=sara_payload)

        assert response.status_code == 200
        assert response.json()["metrics"] is None

    @pytest.mark.parametrize("field", ["name", "email", "description"])
    def test_missing_field_returns_400_without_pipeline(self, client, pipeline, sara_payload, field):
        del sara_payload[field]

        response = client.post("/api/process-lead", json=sara_payload)

        assert response.status_code == 400
        assert response.json() == {"error": f'"{field}" is required'}
        pipeline.run.assert_not_called()

    def test_invalid_json_returns_400(self, client, pipeline):
        response = client.post(
            "/api/process-lead",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body."}
        pipeline.run.assert_not_called()

    def test_deeply_nested_json_returns_400(self, client, pipeline):
        """JSON nested past the parser's recursion limit is rejected like any bad body"""
        depth = 100_000
        response = client.post(
            "/api/process-lead",
            content=("[" * depth + "]" * depth).encode(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body."}
        pipeline.run.assert_not_called()

    def test_unsupported_language_returns_400(self, client, pipeline, sara_payload):
        response = client.post("/api/process-lead", json={**sara_payload, "preferred_language": "French"})

        assert response.status_code == 400
        assert response.json()["error"].startswith('"preferred_language"')
        pipeline.run.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            AIProcessingError("AI response is not valid JSON", stage="analysis"),
            CredentialError("Token exchange failed (401)"),
            ArchivalError("Archive write failed"),
        ],
    )
    def test_stage_failures_collapse_to_workflow_error(self, client, pipeline, sara_payload, error):
        pipeline.run.side_effect = error

        response = client.post("/api/process-lead", json=sara_payload)

        assert response.status_code == 500
        assert response.json() == {"error": "Workflow Error", "details": error.message}

    def test_unexpected_error_returns_500(self, client, pipeline, sara_payload):
        pipeline.run.side_effect = RuntimeError("boom")

        response = client.post("/api/process-lead", json=sara_payload)

        assert response.status_code == 500
        assert response.json() == {"error": "Workflow Error", "details": "boom"}

    def test_duplicate_returns_409(self, client, pipeline, sara_payload):
        pipeline.run.side_effect = DuplicateLeadError("Lead already processed.")

        response = client.post("/api/process-lead", json=sara_payload)

        assert response.status_code == 409
        assert response.json() == {"error": "Lead already processed."}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
