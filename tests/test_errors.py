"""Tests for jiranote.errors.classify_failure."""

import httpx
import pytest

from jiranote.errors import JiraApiError, JiraApiErrorReason, JiraNotInitializedError, classify_failure


def _status_error(status: int, **kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://acme.atlassian.net/rest/api/3/issue/picker")
    response = httpx.Response(status, request=request, **kwargs)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestClassifyFailure:
    def test_not_initialized(self) -> None:
        err = classify_failure(JiraNotInitializedError())
        assert err.reason is JiraApiErrorReason.NOT_INITIALIZED
        assert err.response is None

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_rejection_is_unauthorized(self, status: int) -> None:
        err = classify_failure(_status_error(status, json={"errorMessages": ["nope"]}))
        assert err.reason is JiraApiErrorReason.UNAUTHORIZED
        assert err.status == status

    def test_404_keeps_status_and_body(self) -> None:
        err = classify_failure(_status_error(404, json={"errorMessages": ["Not found"]}))
        assert err.reason is JiraApiErrorReason.OTHER
        assert err.status == 404
        assert err.response is not None
        assert err.response.body == {"errorMessages": ["Not found"]}

    def test_non_json_body_kept_as_text(self) -> None:
        err = classify_failure(_status_error(502, text="Bad Gateway"))
        assert err.reason is JiraApiErrorReason.OTHER
        assert err.response is not None
        assert err.response.body == "Bad Gateway"

    def test_transport_error_has_no_response(self) -> None:
        err = classify_failure(httpx.ConnectError("connection refused"))
        assert err.reason is JiraApiErrorReason.OTHER
        assert err.response is None
        assert "connection refused" in str(err)

    def test_arbitrary_exception_is_other(self) -> None:
        err = classify_failure(ValueError())
        assert err.reason is JiraApiErrorReason.OTHER
        assert str(err) == "ValueError"

    def test_already_classified_returned_unchanged(self) -> None:
        original = classify_failure(_status_error(401))
        assert classify_failure(original) is original

    def test_returns_exception_instance(self) -> None:
        assert isinstance(classify_failure(RuntimeError("boom")), JiraApiError)
