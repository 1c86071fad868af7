"""Resilient request executor for the Anomaly Detector REST API.

Sends a prepared request with the subscription key attached, classifies the
response and retries failed attempts along a fixed backoff sequence.
"""

import time

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import requests
import structlog

from mad_client.application.exceptions import MissingConfigException
from mad_client.domain.services.response_classifier import classify_response
from mad_client.domain.value_objects.response_outcome import (
    Failure,
    RateLimited,
    ResponseOutcome,
    result_text,
)
from mad_client.domain.value_objects.service_request import (
    ServiceRequest,
    build_target_uri,
)
from mad_client.infrastructure.config.settings import Settings, get_settings
from mad_client.infrastructure.exceptions import (
    ExternalServiceException,
    NetworkException,
    RateLimitException,
)
from mad_client.infrastructure.resilience.retry import (
    DEFAULT_BACKOFF_MS,
    RetryPolicy,
    with_retry,
)


logger = structlog.get_logger(__name__)

SERVICE_NAME = "Anomaly Detector"
SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"
CONTENT_TYPE = "application/json"


def build_headers(subscription_key: str, request: ServiceRequest) -> dict[str, str]:
    """Headers for a single attempt; auth and content type always win."""
    headers = dict(request.headers)
    headers[SUBSCRIPTION_KEY_HEADER] = subscription_key
    headers["Content-Type"] = CONTENT_TYPE
    return headers


class RequestExecutor:
    """Blocking executor backed by a ``requests.Session``.

    One executor owns one session and is not meant to be shared between
    threads. Use it as a context manager to close the session.
    """

    def __init__(
        self,
        subscription_key: str,
        backoff_ms: Sequence[int] = DEFAULT_BACKOFF_MS,
        session: requests.Session | None = None,
        timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        retry_policy: Callable[..., Any] | None = None,
    ):
        """Initialize the executor

        Args:
            subscription_key: Anomaly Detector subscription key
            backoff_ms: Delays between attempts, in milliseconds
            session: HTTP session (a new one is created when omitted)
            timeout: Per-attempt timeout in seconds (None waits indefinitely)
            sleep: Sleep function for rate-limit and backoff waits
            retry_policy: Overrides the policy built from ``backoff_ms``

        Raises:
            MissingConfigException: If the subscription key is empty
        """
        if not subscription_key:
            raise MissingConfigException("MAD_SUBSCRIPTION_KEY")

        self._subscription_key = subscription_key
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._timeout = timeout
        self._sleep = sleep
        self._retry_policy = retry_policy or RetryPolicy.backoff_sequence(
            backoff_ms, sleep=sleep
        )

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **kwargs: Any
    ) -> "RequestExecutor":
        """Build an executor from application settings."""
        settings = settings or get_settings()
        return cls(
            subscription_key=settings.get_required("subscription_key"),
            backoff_ms=settings.backoff_ms,
            timeout=settings.request_timeout,
            **kwargs,
        )

    def execute(
        self,
        request: ServiceRequest,
        base_path: str,
        query_params: Mapping[str, str] | None = None,
    ) -> str:
        """Send a request and return its result text.

        Args:
            request: The request to send
            base_path: Vendor endpoint URL without query string
            query_params: Query parameters, URL-encoded when non-empty

        Returns:
            ``""`` for No Content, the Location header for Created,
            otherwise the response body

        Raises:
            ExternalServiceException: Non-2xx response after all retries
            NetworkException: Transport failure after all retries
        """
        url = build_target_uri(base_path, query_params)
        return with_retry(self._retry_policy)(self._attempt)(request, url)

    def _attempt(self, request: ServiceRequest, url: str) -> str:
        data = request.body.encode("utf-8") if request.body is not None else None
        try:
            with self._session.request(
                request.method,
                url,
                headers=build_headers(self._subscription_key, request),
                data=data,
                timeout=self._timeout,
            ) as response:
                outcome = classify_response(
                    status_code=response.status_code,
                    reason=response.reason,
                    headers=response.headers,
                    body=response.content.decode("utf-8", errors="replace"),
                    request_url=url,
                    request_body=request.body,
                )
        except requests.RequestException as e:
            logger.warning(
                "Request failed", method=request.method, url=url, error=str(e)
            )
            raise NetworkException(request.method, url, str(e)) from e

        return self._resolve(outcome, request, url)

    def _resolve(
        self, outcome: ResponseOutcome, request: ServiceRequest, url: str
    ) -> str:
        if isinstance(outcome, RateLimited):
            logger.warning(
                "Rate limited, waiting before retry",
                method=request.method,
                url=url,
                retry_after=outcome.retry_after_seconds,
            )
            self._sleep(outcome.retry_after_seconds)
            raise RateLimitException(
                SERVICE_NAME,
                request.method,
                retry_after=outcome.retry_after_seconds,
                request_url=url,
            )
        if isinstance(outcome, Failure):
            logger.warning(
                "Request returned an error status",
                method=request.method,
                url=url,
                status_code=outcome.status_code,
            )
            raise ExternalServiceException.from_failure(
                SERVICE_NAME, request.method, outcome
            )
        return result_text(outcome)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "RequestExecutor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
