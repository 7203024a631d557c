"""Formspree contact form integration.

Resolves the form identifier for the active environment and posts lead
submissions to the Formspree endpoint. The discovery widget itself only
links to the contact page; this client is what the contact page posts
through.

Usage:
    >>> endpoint = get_formspree_endpoint()
    >>> with FormspreeClient() as client:
    ...     client.submit(build_lead_payload("ops@example.com", state))
"""

import time
from typing import Any, Dict, Optional, Union

import requests
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import HTTPError, RequestException

from .config import ConfigError, KyrosConfig, config
from .logging_utils import get_logger
from .models import FormSubmission, LeadSubmission, WizardState

FORMSPREE_BASE_URL = "https://formspree.io/f"

# Statuses returned before the submission is stored
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503})

logger = get_logger(__name__)


class FormspreeError(Exception):
    """Raised when a form submission fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FormspreeValidationError(FormspreeError):
    """Raised when Formspree rejects the submitted fields."""

    pass


def get_formspree_endpoint(
    form_id: Optional[str] = None,
    settings: Optional[KyrosConfig] = None,
) -> str:
    """Get the Formspree endpoint URL for the active environment.

    An explicit ``form_id`` always wins. Otherwise development prefers
    FORMSPREE_FORM_ID_DEV and falls back to FORMSPREE_FORM_ID; every other
    environment uses FORMSPREE_FORM_ID only.

    Args:
        form_id: Optional form identifier overriding configuration.
        settings: Optional configuration override. Defaults to the global config.

    Returns:
        The endpoint URL, ``https://formspree.io/f/{form_id}``.

    Raises:
        ConfigError: If no form identifier can be resolved.
    """
    if form_id:
        return f"{FORMSPREE_BASE_URL}/{form_id}"

    settings = settings or config
    if settings.is_development():
        resolved = settings.FORMSPREE_FORM_ID_DEV or settings.FORMSPREE_FORM_ID
    else:
        resolved = settings.FORMSPREE_FORM_ID

    if not resolved:
        raise ConfigError(
            "Formspree form ID is not configured. "
            "Please set FORMSPREE_FORM_ID in your environment variables."
        )

    return f"{FORMSPREE_BASE_URL}/{resolved}"


def build_lead_payload(
    email: str,
    state: Optional[WizardState] = None,
    name: str = "",
    company: str = "",
    message: str = "",
) -> LeadSubmission:
    """Package contact details and a discovery run into a lead submission.

    Args:
        email: Prospect email address.
        state: Optional wizard state; answers and result are attached when present.
        name: Optional prospect name.
        company: Optional company name.
        message: Optional free-form note.

    Raises:
        pydantic.ValidationError: If the email address is invalid.
    """
    lead: Dict[str, Any] = {
        "email": email,
        "name": name,
        "company": company,
        "message": message,
    }

    if state is not None:
        lead["problem"] = state.problem_text
        lead["whys"] = list(state.why_answers)
        if state.analysis_result is not None:
            lead["root_cause"] = state.analysis_result.root_cause
            lead["recommended_solutions"] = [
                s.title for s in state.analysis_result.solutions
            ]

    return LeadSubmission(**lead)


class FormspreeClient:
    """Client for posting submissions to a Formspree form.

    Attributes:
        endpoint: Resolved Formspree endpoint URL.
        max_retries: Maximum number of attempts for transient failures (default: 3).
        retry_delay: Initial delay between retries in seconds (default: 1.0).
        request_timeout: Request timeout in seconds.
        session: Requests session for connection pooling.
    """

    max_retries: int = 3
    retry_delay: float = 1.0

    def __init__(
        self,
        form_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[KyrosConfig] = None,
        request_timeout: Optional[int] = None,
    ):
        """Initialize the client.

        Raises:
            ConfigError: If no form identifier can be resolved.
        """
        settings = settings or config
        self.endpoint = get_formspree_endpoint(form_id, settings=settings)
        self.request_timeout = (
            request_timeout if request_timeout is not None
            else settings.FORMSPREE_TIMEOUT_SECONDS
        )
        self.logger = logger
        self.session = session or requests.Session()
        self._owns_session = session is None
        self._configure_session()

    def _configure_session(self) -> None:
        """Formspree answers with JSON only when asked for it."""
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "Kyros-Discovery/1.0",
        })

    def submit(self, submission: Union[LeadSubmission, Dict[str, Any]]) -> FormSubmission:
        """Post a submission to the form.

        Args:
            submission: A LeadSubmission or a plain dictionary of form fields.

        Returns:
            FormSubmission describing the accepted submission.

        Raises:
            FormspreeValidationError: If Formspree rejects the fields (HTTP 422).
            FormspreeError: If the request fails after all retries.
        """
        if isinstance(submission, LeadSubmission):
            submission_id = submission.id
            payload = submission.model_dump(exclude={"id"})
        else:
            payload = dict(submission)
            submission_id = str(payload.pop("id", "")) or "adhoc"

        self.logger.info(
            "Submitting form",
            extra={"endpoint": self.endpoint, "submission_id": submission_id},
        )

        response = self._post_with_retry(payload)
        body = self._json_body(response)

        self.logger.info(
            "Form submitted",
            extra={"submission_id": submission_id, "status_code": response.status_code},
        )

        return FormSubmission(
            submission_id=submission_id,
            endpoint=self.endpoint,
            success=True,
            status_code=response.status_code,
            next_url=body.get("next"),
        )

    def _post_with_retry(self, payload: Dict[str, Any]) -> requests.Response:
        """POST with exponential backoff.

        Only failures where Formspree cannot have stored the submission are
        retried: connection errors and HTTP 429, 502 and 503. Anything else,
        a read timeout included, is reported without replaying the POST.
        """
        last_exception: Optional[RequestException] = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.post(
                    self.endpoint, json=payload, timeout=self.request_timeout
                )
                response.raise_for_status()
                return response

            except HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status not in RETRYABLE_STATUS_CODES:
                    raise self._http_error(e.response) from e
                last_exception = e

            except RequestsConnectionError as e:
                last_exception = e

            except RequestException as e:
                self.logger.error(
                    "Form submission outcome unknown, not retrying",
                    extra={"attempt": attempt + 1, "error": str(e)},
                )
                raise FormspreeError(f"Form submission failed: {e}") from e

            wait_time = self.retry_delay * (2 ** attempt)
            if attempt < self.max_retries - 1:
                self.logger.warning(
                    "Form submission failed, retrying",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "wait_seconds": wait_time,
                        "error": str(last_exception),
                    },
                )
                time.sleep(wait_time)

        self.logger.error(
            "Form submission failed after all retries",
            extra={"attempts": self.max_retries, "error": str(last_exception)},
        )
        raise FormspreeError(
            f"Form submission failed after {self.max_retries} attempts: {last_exception}"
        ) from last_exception

    def _http_error(self, response: requests.Response) -> FormspreeError:
        body = self._json_body(response)
        messages = [
            err.get("message", "") for err in body.get("errors", []) if isinstance(err, dict)
        ]
        detail = "; ".join(m for m in messages if m) or response.reason or "rejected"

        if response.status_code == 422:
            return FormspreeValidationError(
                f"Formspree rejected the submission: {detail}",
                status_code=response.status_code,
            )
        return FormspreeError(
            f"Formspree returned HTTP {response.status_code}: {detail}",
            status_code=response.status_code,
        )

    @staticmethod
    def _json_body(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "FormspreeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
