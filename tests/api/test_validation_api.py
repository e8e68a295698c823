"""Tests for the Bundle-Sentinel validation API.

This test suite covers:
- Root endpoint
- Health check endpoint (reachable and unreachable terminology server)
- Bundle validation endpoint and its OperationOutcome rendering
- Error handling
"""

import json
import logging
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_app_config, get_orchestrator, get_terminology_adapter
from src.api.main import app
from src.api.models.outcome import NO_ISSUES_MESSAGE
from src.domain.constants import SNOMED_SYSTEM
from src.domain.models import Issue
from src.domain.ports import InvalidDocumentError, Result
from src.domain.services import CompletenessChecker, TerminologyValidator, ValidationOrchestrator
from src.infrastructure.config_manager import AppConfig, TerminologyConfig
from src.infrastructure.logging_config import StructuredFormatter
from src.main import NESTING_TOO_DEEP

from tests.factories import make_bundle, snomed

VALIDATE_URL = "/api/validate/bundle"


@pytest.fixture
def orchestrator(fake_terminology):
    return ValidationOrchestrator([CompletenessChecker(), TerminologyValidator(fake_terminology)])


@pytest.fixture
def mock_terminology_adapter():
    """Create a mock terminology adapter whose ping succeeds."""
    mock = Mock()
    mock.ping = Mock(return_value=Result.success_result(12.5))
    return mock


@pytest.fixture
def app_config():
    return AppConfig(terminology=TerminologyConfig(base_url="http://snowstorm.test:8080"))


@pytest.fixture
def client(orchestrator, mock_terminology_adapter, app_config):
    """Create a test client with the pipeline dependencies overridden."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_terminology_adapter] = lambda: mock_terminology_adapter
    app.dependency_overrides[get_app_config] = lambda: app_config

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


class TestRootEndpoint:
    """Test the root endpoint."""

    def test_root_endpoint_returns_info(self, client):
        """Test that root endpoint returns API information."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "1.0.0"
        assert data["docs"] == "/api/docs"
        assert data["health"] == "/api/health"
        assert data["validate"] == VALIDATE_URL


class TestHealthEndpoint:
    """Test the health check endpoint."""

    def test_health_check_reachable(self, client):
        """Test health check when the terminology server answers."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert data["terminology"]["status"] == "reachable"
        assert data["terminology"]["base_url"] == "http://snowstorm.test:8080"
        assert data["terminology"]["mode"] == "validate-code"
        assert data["terminology"]["response_time_ms"] == 12.5

    def test_health_check_unreachable(self, client, mock_terminology_adapter):
        """Test that an unreachable terminology server degrades the service."""
        mock_terminology_adapter.ping.return_value = Result.failure_result(
            "connection refused", error_type="ConnectError"
        )

        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["terminology"]["status"] == "unreachable"
        assert data["terminology"]["response_time_ms"] is None

    def test_health_check_failure(self, client, mock_terminology_adapter):
        """Test that an unexpected error in the health check returns 500."""
        mock_terminology_adapter.ping.side_effect = RuntimeError("boom")

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json()["detail"] == "Health check failed"


class TestValidateBundleEndpoint:
    """Test POST /api/validate/bundle."""

    def test_valid_bundle(self, client, complete_bundle):
        """Test that a clean bundle yields a single informational issue."""
        response = client.post(VALIDATE_URL, json=complete_bundle)

        assert response.status_code == 200
        assert response.json() == {
            "resourceType": "OperationOutcome",
            "issue": [{
                "severity": "information",
                "code": "informational",
                "diagnostics": NO_ISSUES_MESSAGE,
            }],
        }

    def test_missing_resources(self, client):
        """Test that missing resource types are reported."""
        bundle = make_bundle({"resourceType": "Patient"}, {"resourceType": "Encounter"})

        response = client.post(VALIDATE_URL, json=bundle)

        assert response.status_code == 200
        issues = response.json()["issue"]
        assert len(issues) == 1
        assert issues[0]["severity"] == "error"
        assert issues[0]["code"] == "required"
        assert issues[0]["diagnostics"] == "Bundle is missing required resources: Condition, Organization"
        assert "location" not in issues[0]

    def test_invalid_code_has_location(self, client, complete_bundle):
        """Test that a rejected code is reported with its coding location."""
        complete_bundle["entry"][2]["resource"]["code"]["coding"].append(snomed("999999"))

        response = client.post(VALIDATE_URL, json=complete_bundle)

        issues = response.json()["issue"]
        assert len(issues) == 1
        assert issues[0]["code"] == "code-invalid"
        assert "999999" in issues[0]["diagnostics"]
        assert issues[0]["location"] == [f"Coding({SNOMED_SYSTEM}|999999)"]

    def test_non_bundle_root(self, client):
        """Test that a non-Bundle root is a finding, not a request error."""
        response = client.post(VALIDATE_URL, json={"resourceType": "Patient", "id": "p1"})

        assert response.status_code == 200
        issues = response.json()["issue"]
        assert len(issues) == 1
        assert issues[0]["code"] == "structure"
        assert issues[0]["diagnostics"].startswith("Root resource must be a Bundle")

    def test_json_array_body(self, client):
        """Test that any well-formed JSON value is accepted."""
        response = client.post(VALIDATE_URL, json=[1, 2, 3])

        assert response.status_code == 200
        assert response.json()["issue"][0]["code"] == "structure"

    @pytest.mark.parametrize("body", [b"{not json", b"", b"\xc3\x28"])
    def test_malformed_json(self, client, body):
        """Test that a malformed body is rejected with 400."""
        response = client.post(
            VALIDATE_URL, content=body, headers={"Content-Type": "application/fhir+json"}
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Malformed JSON document")

    def test_terminology_unreachable(self, client, complete_bundle, fake_terminology):
        """Test that unreachable lookups fail closed as invalid codes."""
        fake_terminology.unreachable_codes = {"22298006", "80891009"}

        response = client.post(VALIDATE_URL, json=complete_bundle)

        issues = response.json()["issue"]
        assert [i["code"] for i in issues] == ["code-invalid", "code-invalid"]

    def test_get_not_allowed(self, client):
        """Test that the endpoint only accepts POST."""
        response = client.get(VALIDATE_URL)

        assert response.status_code == 405

    def test_process_time_header(self, client, complete_bundle):
        """Test that the logging middleware adds X-Process-Time."""
        response = client.post(VALIDATE_URL, json=complete_bundle)

        assert "X-Process-Time" in response.headers

    def test_deeply_nested_body_rejected(self, client):
        """Test that nesting beyond the JSON parser's limit is a 400, not a 500."""
        depth = 100_000
        body = (
            '{"resourceType": "Bundle", "entry": [{"resource": {"resourceType": "Patient", "extension": '
            + "[" * depth + "]" * depth
            + "}}]}"
        )

        response = client.post(
            VALIDATE_URL, content=body.encode(), headers={"Content-Type": "application/fhir+json"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == NESTING_TOO_DEEP

    def test_moderately_nested_body_accepted(self, client, complete_bundle):
        """Test that nesting within the parser's limit is validated normally."""
        nested = []
        for _ in range(200):
            nested = [nested]
        complete_bundle["entry"][0]["resource"]["extension"] = nested

        response = client.post(VALIDATE_URL, json=complete_bundle)

        assert response.status_code == 200
        assert response.json()["issue"][0]["diagnostics"] == NO_ISSUES_MESSAGE


@pytest.fixture
def failing_client(mock_terminology_adapter, app_config):
    """Create a test client whose orchestrator raises a configurable error."""
    broken = Mock()
    app.dependency_overrides[get_orchestrator] = lambda: broken
    app.dependency_overrides[get_terminology_adapter] = lambda: mock_terminology_adapter
    app.dependency_overrides[get_app_config] = lambda: app_config

    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client, broken
    finally:
        app.dependency_overrides.clear()


class TestErrorHandling:
    """Test failures inside the pipeline."""

    def test_module_failure_returns_500(self, failing_client):
        """Test that an exception raised by a module becomes a 500."""
        test_client, broken = failing_client
        broken.validate.side_effect = RuntimeError("boom")

        response = test_client.post(VALIDATE_URL, json=make_bundle())

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"

    def test_invalid_document_returns_400(self, failing_client):
        """Test that InvalidDocumentError is reported as a client error."""
        test_client, broken = failing_client
        broken.validate.side_effect = InvalidDocumentError("Cannot validate a missing document")

        response = test_client.post(VALIDATE_URL, json=make_bundle())

        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request", "detail": "Cannot validate a missing document"}

    def test_internal_pydantic_error_returns_500(self, failing_client):
        """Test that a ValidationError raised server-side is not a client error."""
        test_client, broken = failing_client

        def build_bad_issue(document):
            return Issue(severity="error", message="")

        broken.validate.side_effect = build_bad_issue

        response = test_client.post(VALIDATE_URL, json=make_bundle())

        assert response.status_code == 500


class TestRequestLogging:
    """Test the request context attached to log records."""

    def test_request_context_in_json_logs(self, client, complete_bundle, caplog):
        """Test that request fields reach the JSON formatter as separate keys."""
        caplog.set_level(logging.INFO, logger="src.api.middleware")

        client.post(VALIDATE_URL, json=complete_bundle)

        records = [
            r for r in caplog.records
            if r.name == "src.api.middleware" and hasattr(r, "status_code")
        ]
        assert len(records) == 1
        entry = json.loads(StructuredFormatter().format(records[0]))
        assert entry["method"] == "POST"
        assert entry["endpoint"] == VALIDATE_URL
        assert entry["status_code"] == 200
        assert entry["client_ip"] == "testclient"
        assert entry["duration_ms"] >= 0
        assert entry["level"] == "INFO"
