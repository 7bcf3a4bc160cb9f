"""Failure taxonomy for calls against the Jira REST API.

Every failure raised while talking to Jira is normalised into a JiraApiError
with one of three reasons:

- NOT_INITIALIZED: the client was used before host and credentials were set
- UNAUTHORIZED: Jira rejected the credentials (401/403)
- OTHER: anything else, with the HTTP status and body when there was a response

JiraApiError is only ever built by classify_failure().
"""

from enum import Enum

import httpx

from jiranote.models import ApiResponse

UNAUTHORIZED_STATUSES = frozenset({401, 403})


class JiraApiErrorReason(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    UNAUTHORIZED = "unauthorized"
    OTHER = "other"


class JiraNotInitializedError(RuntimeError):
    """Raised when the Jira client is used before host and credentials are configured."""

    def __init__(self, message: str = "Jira client is not initialized. Configure host, username and API key.") -> None:
        super().__init__(message)


class UnexpectedResponseError(ValueError):
    """Jira answered, but not with the shape we asked for."""


class JiraApiError(Exception):
    def __init__(self, reason: JiraApiErrorReason, message: str, response: ApiResponse | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.response = response

    @property
    def status(self) -> int | None:
        return self.response.status if self.response else None


def _response_snapshot(response: httpx.Response) -> ApiResponse:
    try:
        body = response.json()
    except ValueError:
        body = response.text or None
    return ApiResponse(status=response.status_code, body=body)


def classify_failure(exc: BaseException) -> JiraApiError:
    """Normalise any failure raised by the Jira client into a JiraApiError.

    Already-classified errors are returned unchanged.
    """
    if isinstance(exc, JiraApiError):
        return exc
    if isinstance(exc, JiraNotInitializedError):
        return JiraApiError(JiraApiErrorReason.NOT_INITIALIZED, str(exc))
    if isinstance(exc, httpx.HTTPStatusError):
        response = _response_snapshot(exc.response)
        if response.status in UNAUTHORIZED_STATUSES:
            return JiraApiError(
                JiraApiErrorReason.UNAUTHORIZED,
                f"Jira rejected the credentials (HTTP {response.status})",
                response,
            )
        return JiraApiError(JiraApiErrorReason.OTHER, f"Jira API returned HTTP {response.status}", response)
    return JiraApiError(JiraApiErrorReason.OTHER, str(exc) or type(exc).__name__)
