"""Tests for the resilient request executor."""

from unittest.mock import call

import pytest
import requests

from mad_client.application.exceptions import MissingConfigException
from mad_client.domain.value_objects.service_request import ServiceRequest
from mad_client.infrastructure.config.settings import Settings
from mad_client.infrastructure.exceptions import (
    ExternalServiceException,
    NetworkException,
)
from mad_client.infrastructure.external.request_executor import (
    SUBSCRIPTION_KEY_HEADER,
    RequestExecutor,
    build_headers,
)
from mad_client.infrastructure.resilience.retry import RetryPolicy
from tests.fixtures.response_factories import (
    MODEL_NOT_EXIST_BODY,
    MODELS_URL,
    make_response,
)


@pytest.fixture
def executor(mock_session, mock_sleep):
    """Executor with the default backoff sequence and no real waits."""
    return RequestExecutor(
        "test-key",
        backoff_ms=[100, 500, 1000],
        session=mock_session,
        sleep=mock_sleep,
    )


class TestBuildHeaders:
    """Test per-attempt header construction"""

    def test_auth_and_content_type_attached(self):
        headers = build_headers("secret", ServiceRequest.get())

        assert headers == {
            SUBSCRIPTION_KEY_HEADER: "secret",
            "Content-Type": "application/json",
        }

    def test_extra_headers_cannot_override_auth(self):
        request = ServiceRequest(
            "GET", headers={SUBSCRIPTION_KEY_HEADER: "other", "x-trace": "1"}
        )

        headers = build_headers("secret", request)

        assert headers[SUBSCRIPTION_KEY_HEADER] == "secret"
        assert headers["x-trace"] == "1"


class TestRequestExecutorInit:
    """Test RequestExecutor construction"""

    def test_missing_key_rejected(self, mock_session):
        with pytest.raises(MissingConfigException):
            RequestExecutor("", session=mock_session)

    def test_from_settings(self, mad_env, mock_session):
        mad_env.setenv("MAD_BACKOFF_MS", "0")
        mad_env.setenv("MAD_REQUEST_TIMEOUT", "5")
        mock_session.request.return_value = make_response(200, "OK", "body")

        executor = RequestExecutor.from_settings(Settings(), session=mock_session)

        assert executor.execute(ServiceRequest.get(), MODELS_URL) == "body"
        _, kwargs = mock_session.request.call_args
        assert kwargs["timeout"] == 5.0
        assert kwargs["headers"][SUBSCRIPTION_KEY_HEADER] == "test-key"

    def test_from_settings_without_key(self, monkeypatch):
        monkeypatch.delenv("MAD_SUBSCRIPTION_KEY", raising=False)

        with pytest.raises(MissingConfigException):
            RequestExecutor.from_settings(Settings())


class TestRequestExecutorExecute:
    """Test RequestExecutor.execute outcomes"""

    def test_no_content_returns_empty_string(self, executor, mock_session):
        mock_session.request.return_value = make_response(204, "No Content")

        result = executor.execute(ServiceRequest.delete(), f"{MODELS_URL}/abc")

        assert result == ""
        mock_session.request.assert_called_once_with(
            "DELETE",
            f"{MODELS_URL}/abc",
            headers={
                SUBSCRIPTION_KEY_HEADER: "test-key",
                "Content-Type": "application/json",
            },
            data=None,
            timeout=None,
        )

    def test_created_returns_location_header(self, executor, mock_session):
        location = f"{MODELS_URL}/45aad126"
        mock_session.request.return_value = make_response(
            201, "Created", '{"not": "returned"}', headers={"Location": location}
        )

        result = executor.execute(
            ServiceRequest("POST", body='{"slidingWindow": 200}'), MODELS_URL
        )

        assert result == location
        _, kwargs = mock_session.request.call_args
        assert kwargs["data"] == b'{"slidingWindow": 200}'

    def test_ok_returns_body(self, executor, mock_session):
        mock_session.request.return_value = make_response(
            200, "OK", '{"models": [], "currentCount": 0, "maxCount": 100}'
        )

        result = executor.execute(ServiceRequest.get(), MODELS_URL)

        assert result == '{"models": [], "currentCount": 0, "maxCount": 100}'

    def test_query_params_appended(self, executor, mock_session):
        mock_session.request.return_value = make_response(200, "OK", "{}")

        executor.execute(ServiceRequest.get(), MODELS_URL, {"skip": "0", "top": "5"})

        args, _ = mock_session.request.call_args
        assert args[1] == f"{MODELS_URL}?skip=0&top=5"

    def test_rate_limit_sleeps_then_retries(self, executor, mock_session, mock_sleep):
        mock_session.request.side_effect = [
            make_response(429, "Too Many Requests", "throttled", {"Retry-After": "7"}),
            make_response(200, "OK", "payload"),
        ]

        result = executor.execute(ServiceRequest.get(), MODELS_URL)

        assert result == "payload"
        assert mock_session.request.call_count == 2
        # Retry-After wait first, then the first backoff delay
        assert mock_sleep.call_args_list == [call(7), call(0.1)]

    def test_rate_limit_result_never_returned(self, executor, mock_session, mock_sleep):
        mock_session.request.return_value = make_response(
            429, "Too Many Requests", "throttled", {"Retry-After": "2"}
        )

        with pytest.raises(ExternalServiceException) as exc_info:
            executor.execute(ServiceRequest.get(), MODELS_URL)

        assert exc_info.value.status_code == 429
        assert mock_session.request.call_count == 4
        assert mock_sleep.call_args_list.count(call(2)) == 4

    def test_exhaustion_surfaces_last_failure(self, executor, mock_session, mock_sleep):
        mock_session.request.side_effect = [
            make_response(500, "Internal Server Error", f"attempt {i}")
            for i in range(1, 5)
        ]

        with pytest.raises(ExternalServiceException) as exc_info:
            executor.execute(ServiceRequest.get(), MODELS_URL, {"top": "1"})

        error = exc_info.value
        assert mock_session.request.call_count == 4
        assert mock_sleep.call_args_list == [call(0.1), call(0.5), call(1.0)]
        assert error.status_code == 500
        assert error.response_body == "attempt 4"
        assert error.request_url == f"{MODELS_URL}?top=1"
        assert "500 Internal Server Error" in str(error)

    def test_eventual_success_hides_transient_errors(self, executor, mock_session):
        mock_session.request.side_effect = [
            make_response(503, "Service Unavailable", "busy"),
            requests.ConnectionError("connection reset"),
            make_response(204, "No Content"),
        ]

        assert executor.execute(ServiceRequest.delete(), f"{MODELS_URL}/abc") == ""
        assert mock_session.request.call_count == 3

    def test_network_error_after_retries(self, executor, mock_session):
        mock_session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(NetworkException) as exc_info:
            executor.execute(ServiceRequest.get(), MODELS_URL)

        assert "read timed out" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.Timeout)
        assert mock_session.request.call_count == 4

    def test_delete_unknown_model_reports_vendor_code(self, executor, mock_session):
        mock_session.request.return_value = make_response(
            404, "Not Found", MODEL_NOT_EXIST_BODY
        )

        with pytest.raises(ExternalServiceException) as exc_info:
            executor.execute(ServiceRequest.delete(), f"{MODELS_URL}/FAKE_MODEL_ID")

        assert "ModelNotExist" in str(exc_info.value)
        assert f"requestUrl: {MODELS_URL}/FAKE_MODEL_ID" in str(exc_info.value)

    def test_failure_message_includes_request_body(self, mock_session, mock_sleep):
        executor = RequestExecutor(
            "test-key", backoff_ms=[], session=mock_session, sleep=mock_sleep
        )
        mock_session.request.return_value = make_response(
            400, "Bad Request", '{"code": "InvalidTimestampFormat"}'
        )

        with pytest.raises(ExternalServiceException) as exc_info:
            executor.execute(
                ServiceRequest("POST", body='{"endTime": "FAKE_END_TIME"}'), MODELS_URL
            )

        assert 'requestBody: {"endTime": "FAKE_END_TIME"}' in str(exc_info.value)
        assert "InvalidTimestampFormat" in str(exc_info.value)
        assert mock_session.request.call_count == 1

    def test_response_released_on_every_path(self, executor, mock_session):
        responses = [
            make_response(500, "Internal Server Error", "boom"),
            make_response(201, "Created", headers={"Location": "loc"}),
        ]
        mock_session.request.side_effect = responses

        executor.execute(ServiceRequest("POST", body="{}"), MODELS_URL)

        for response in responses:
            response.__exit__.assert_called_once()

    def test_headers_not_accumulated_across_attempts(self, executor, mock_session):
        mock_session.request.side_effect = [
            make_response(500, "Internal Server Error"),
            make_response(200, "OK", "ok"),
        ]

        executor.execute(ServiceRequest.get(), MODELS_URL)

        first, second = mock_session.request.call_args_list
        assert first.kwargs["headers"] == second.kwargs["headers"]
        assert len(second.kwargs["headers"]) == 2

    def test_custom_retry_policy(self, mock_session):
        executor = RequestExecutor(
            "test-key", session=mock_session, retry_policy=RetryPolicy.no_retry()
        )
        mock_session.request.return_value = make_response(503, "Service Unavailable")

        with pytest.raises(ExternalServiceException):
            executor.execute(ServiceRequest.get(), MODELS_URL)

        assert mock_session.request.call_count == 1


class TestRequestExecutorLifecycle:
    """Test session ownership"""

    def test_injected_session_not_closed(self, mock_session):
        with RequestExecutor("test-key", session=mock_session):
            pass

        mock_session.close.assert_not_called()

    def test_owned_session_closed(self, monkeypatch):
        closed = []
        monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(1))

        with RequestExecutor("test-key"):
            pass

        assert closed == [1]
