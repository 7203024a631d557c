# src/kyros_discovery/tests/test_formspree.py
"""
Unit tests for the Formspree integration.

Tests cover:
- Endpoint resolution per environment and explicit override
- ConfigError when no form id resolves
- Lead payload construction from wizard state
- Submission success, validation errors and retry behaviour
- Session configuration and cleanup
"""
import json
import os
from unittest.mock import MagicMock, patch

import pytest
import requests
from pydantic import ValidationError
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import ReadTimeout

from kyros_discovery.config import ConfigError, KyrosConfig
from kyros_discovery.formspree import (
    FormspreeClient,
    FormspreeError,
    FormspreeValidationError,
    build_lead_payload,
    get_formspree_endpoint,
)
from kyros_discovery.knowledge_base import DEFAULT_RESULT
from kyros_discovery.models import LeadSubmission, WizardState

ENDPOINT = "https://formspree.io/f/prodform"


def _settings(**env):
    with patch.dict(os.environ, env, clear=True):
        return KyrosConfig()


def _response(status_code, body=None, reason=""):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = ENDPOINT
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


@pytest.fixture
def prod_settings():
    return _settings(APP_ENV="production", FORMSPREE_FORM_ID="prodform")


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.post.return_value = _response(200, {"ok": True, "next": "https://formspree.io/thanks"})
    return session


@pytest.fixture
def client(mock_session, prod_settings):
    return FormspreeClient(session=mock_session, settings=prod_settings)


@pytest.fixture
def completed_state():
    return WizardState(
        problem_text="Proposals take 3 hours",
        why_answers=["Copy-paste", "No templates", "", "", ""],
        current_step=5,
        analysis_result=DEFAULT_RESULT,
    )


class TestGetFormspreeEndpoint:
    """Tests for get_formspree_endpoint()."""

    @pytest.mark.unit
    def test_explicit_form_id_wins(self, prod_settings):
        assert get_formspree_endpoint("override", settings=prod_settings) == (
            "https://formspree.io/f/override"
        )

    @pytest.mark.unit
    def test_development_prefers_dev_form_id(self):
        settings = _settings(
            APP_ENV="development", FORMSPREE_FORM_ID="shared", FORMSPREE_FORM_ID_DEV="dev"
        )
        assert get_formspree_endpoint(settings=settings) == "https://formspree.io/f/dev"

    @pytest.mark.unit
    def test_development_falls_back_to_shared_form_id(self):
        settings = _settings(APP_ENV="development", FORMSPREE_FORM_ID="shared")
        assert get_formspree_endpoint(settings=settings) == "https://formspree.io/f/shared"

    @pytest.mark.unit
    def test_production_ignores_dev_form_id(self):
        settings = _settings(
            APP_ENV="production", FORMSPREE_FORM_ID="shared", FORMSPREE_FORM_ID_DEV="dev"
        )
        assert get_formspree_endpoint(settings=settings) == "https://formspree.io/f/shared"

    @pytest.mark.unit
    def test_production_without_form_id_raises(self):
        settings = _settings(APP_ENV="production", FORMSPREE_FORM_ID_DEV="dev")
        with pytest.raises(ConfigError) as exc_info:
            get_formspree_endpoint(settings=settings)
        assert "FORMSPREE_FORM_ID" in str(exc_info.value)

    @pytest.mark.unit
    def test_development_without_any_form_id_raises(self):
        settings = _settings(APP_ENV="development")
        with pytest.raises(ConfigError):
            get_formspree_endpoint(settings=settings)


class TestBuildLeadPayload:
    """Tests for build_lead_payload()."""

    @pytest.mark.unit
    def test_contact_details_only(self):
        lead = build_lead_payload("ops@example.com", name="Sam", company="Acme")

        assert lead.email == "ops@example.com"
        assert lead.name == "Sam"
        assert lead.company == "Acme"
        assert lead.problem == ""
        assert lead.whys == []

    @pytest.mark.unit
    def test_includes_discovery_run(self, completed_state):
        lead = build_lead_payload("ops@example.com", state=completed_state)

        assert lead.problem == "Proposals take 3 hours"
        assert lead.whys == ["Copy-paste", "No templates", "", "", ""]
        assert lead.root_cause == DEFAULT_RESULT.root_cause
        assert lead.recommended_solutions == [
            "Discovery sprint", "Signal instrumentation", "Knowledge cleanup",
        ]

    @pytest.mark.unit
    def test_state_without_result(self):
        state = WizardState(problem_text="Problem", current_step=1)
        lead = build_lead_payload("ops@example.com", state=state)
        assert lead.root_cause == ""
        assert lead.recommended_solutions == []

    @pytest.mark.unit
    def test_answer_positions_kept_with_blank_answer(self):
        state = WizardState(
            problem_text="Problem",
            why_answers=["First", "", "Third", "Fourth", "Fifth"],
            current_step=5,
        )
        lead = build_lead_payload("ops@example.com", state=state)
        assert lead.whys[2] == "Third"
        assert len(lead.whys) == 5

    @pytest.mark.unit
    def test_invalid_email_raises(self):
        with pytest.raises(ValidationError):
            build_lead_payload("not-an-email")


class TestFormspreeClientInit:
    """Tests for client construction."""

    @pytest.mark.unit
    def test_endpoint_resolved_at_init(self, client):
        assert client.endpoint == ENDPOINT

    @pytest.mark.unit
    def test_timeout_from_settings(self, mock_session):
        settings = _settings(
            APP_ENV="production", FORMSPREE_FORM_ID="prodform", FORMSPREE_TIMEOUT_SECONDS="7"
        )
        client = FormspreeClient(session=mock_session, settings=settings)
        assert client.request_timeout == 7

    @pytest.mark.unit
    def test_missing_configuration_raises(self, mock_session):
        with pytest.raises(ConfigError):
            FormspreeClient(session=mock_session, settings=_settings(APP_ENV="production"))

    @pytest.mark.unit
    def test_session_headers(self, client, mock_session):
        assert mock_session.headers["Accept"] == "application/json"

    @pytest.mark.unit
    def test_does_not_close_injected_session(self, client, mock_session):
        with client:
            pass
        mock_session.close.assert_not_called()

    @pytest.mark.unit
    def test_closes_own_session(self, prod_settings):
        with patch("kyros_discovery.formspree.requests.Session") as session_class:
            session_class.return_value.headers = {}
            with FormspreeClient(settings=prod_settings):
                pass
            session_class.return_value.close.assert_called_once()


class TestFormspreeClientSubmit:
    """Tests for FormspreeClient.submit()."""

    @pytest.mark.unit
    def test_submit_lead(self, client, mock_session):
        lead = LeadSubmission(email="ops@example.com", message="Hello")

        result = client.submit(lead)

        assert result.success is True
        assert result.status_code == 200
        assert result.submission_id == lead.id
        assert result.endpoint == ENDPOINT
        assert result.next_url == "https://formspree.io/thanks"

        args, kwargs = mock_session.post.call_args
        assert args[0] == ENDPOINT
        assert kwargs["json"]["email"] == "ops@example.com"
        assert "id" not in kwargs["json"]
        assert kwargs["timeout"] == 15

    @pytest.mark.unit
    def test_submit_plain_dict(self, client, mock_session):
        result = client.submit({"email": "ops@example.com", "id": "abc"})

        assert result.submission_id == "abc"
        assert mock_session.post.call_args.kwargs["json"] == {"email": "ops@example.com"}

    @pytest.mark.unit
    def test_submit_with_non_json_body(self, client, mock_session):
        mock_session.post.return_value = _response(200)
        result = client.submit({"email": "ops@example.com"})
        assert result.next_url is None
        assert result.submission_id == "adhoc"

    @pytest.mark.unit
    def test_validation_error_not_retried(self, client, mock_session):
        mock_session.post.return_value = _response(
            422, {"errors": [{"field": "email", "message": "should be an email"}]}
        )

        with pytest.raises(FormspreeValidationError) as exc_info:
            client.submit({"email": "bad"})

        assert "should be an email" in str(exc_info.value)
        assert exc_info.value.status_code == 422
        assert mock_session.post.call_count == 1

    @pytest.mark.unit
    def test_other_client_error(self, client, mock_session):
        mock_session.post.return_value = _response(404, reason="Not Found")

        with pytest.raises(FormspreeError) as exc_info:
            client.submit({"email": "ops@example.com"})

        assert not isinstance(exc_info.value, FormspreeValidationError)
        assert "404" in str(exc_info.value)
        assert "Not Found" in str(exc_info.value)

    @pytest.mark.unit
    def test_server_error_retried_then_succeeds(self, client, mock_session):
        mock_session.post.side_effect = [
            _response(502, reason="Bad Gateway"),
            RequestsConnectionError("reset"),
            _response(200, {"ok": True}),
        ]

        with patch("kyros_discovery.formspree.time.sleep") as mock_sleep:
            result = client.submit({"email": "ops@example.com"})

        assert result.success is True
        assert mock_session.post.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @pytest.mark.unit
    def test_gives_up_after_max_retries(self, client, mock_session):
        mock_session.post.side_effect = RequestsConnectionError("down")

        with patch("kyros_discovery.formspree.time.sleep"):
            with pytest.raises(FormspreeError) as exc_info:
                client.submit({"email": "ops@example.com"})

        assert "3 attempts" in str(exc_info.value)
        assert exc_info.value.status_code is None
        assert mock_session.post.call_count == 3


class TestFormspreeClientRetryPolicy:
    """Tests for which failures are replayed."""

    @pytest.mark.unit
    def test_rate_limit_retried(self, client, mock_session):
        mock_session.post.side_effect = [
            _response(429, reason="Too Many Requests"),
            _response(200, {"ok": True}),
        ]

        with patch("kyros_discovery.formspree.time.sleep") as mock_sleep:
            result = client.submit({"email": "ops@example.com"})

        assert result.success is True
        assert mock_session.post.call_count == 2
        mock_sleep.assert_called_once_with(1.0)

    @pytest.mark.unit
    def test_service_unavailable_retried(self, client, mock_session):
        mock_session.post.side_effect = [
            _response(503, reason="Service Unavailable"),
            _response(200, {"ok": True}),
        ]

        with patch("kyros_discovery.formspree.time.sleep"):
            client.submit({"email": "ops@example.com"})

        assert mock_session.post.call_count == 2

    @pytest.mark.unit
    def test_internal_server_error_not_retried(self, client, mock_session):
        mock_session.post.return_value = _response(500, reason="Internal Server Error")

        with patch("kyros_discovery.formspree.time.sleep") as mock_sleep:
            with pytest.raises(FormspreeError) as exc_info:
                client.submit({"email": "ops@example.com"})

        assert exc_info.value.status_code == 500
        assert mock_session.post.call_count == 1
        mock_sleep.assert_not_called()

    @pytest.mark.unit
    def test_read_timeout_not_replayed(self, client, mock_session):
        mock_session.post.side_effect = ReadTimeout("read timed out")

        with patch("kyros_discovery.formspree.time.sleep") as mock_sleep:
            with pytest.raises(FormspreeError) as exc_info:
                client.submit({"email": "ops@example.com"})

        assert isinstance(exc_info.value.__cause__, ReadTimeout)
        assert mock_session.post.call_count == 1
        mock_sleep.assert_not_called()
