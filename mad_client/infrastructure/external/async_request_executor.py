"""Non-blocking variant of the request executor built on aiohttp.

Rate-limit and backoff waits use ``asyncio.sleep`` so the event loop keeps
serving other tasks while a request is waiting to be retried.
"""

import asyncio

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

import aiohttp
import structlog

from mad_client.application.exceptions import MissingConfigException
from mad_client.domain.services.response_classifier import classify_response
from mad_client.domain.value_objects.response_outcome import (
    Failure,
    RateLimited,
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
from mad_client.infrastructure.external.request_executor import (
    SERVICE_NAME,
    build_headers,
)
from mad_client.infrastructure.resilience.retry import (
    DEFAULT_BACKOFF_MS,
    RetryPolicy,
    with_retry,
)


logger = structlog.get_logger(__name__)


class AsyncRequestExecutor:
    """Executor backed by an ``aiohttp.ClientSession``.

    Examples:
        async with AsyncRequestExecutor(key) as executor:
            body = await executor.execute(ServiceRequest.get(), models_url)
    """

    def __init__(
        self,
        subscription_key: str,
        backoff_ms: Sequence[int] = DEFAULT_BACKOFF_MS,
        session: aiohttp.ClientSession | None = None,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        retry_policy: Callable[..., Any] | None = None,
    ):
        if not subscription_key:
            raise MissingConfigException("MAD_SUBSCRIPTION_KEY")

        self._subscription_key = subscription_key
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._sleep = sleep
        self._retry_policy = retry_policy or RetryPolicy.backoff_sequence(
            backoff_ms, sleep=sleep
        )

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **kwargs: Any
    ) -> "AsyncRequestExecutor":
        settings = settings or get_settings()
        return cls(
            subscription_key=settings.get_required("subscription_key"),
            backoff_ms=settings.backoff_ms,
            timeout=settings.request_timeout,
            **kwargs,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
        return self._session

    async def execute(
        self,
        request: ServiceRequest,
        base_path: str,
        query_params: Mapping[str, str] | None = None,
    ) -> str:
        """Send a request and return its result text.

        Same contract as ``RequestExecutor.execute``.
        """
        url = build_target_uri(base_path, query_params)
        return await with_retry(self._retry_policy, async_func=True)(self._attempt)(
            request, url
        )

    async def _attempt(self, request: ServiceRequest, url: str) -> str:
        session = self._get_session()
        data = request.body.encode("utf-8") if request.body is not None else None
        options: dict[str, Any] = {}
        if self._timeout is not None:
            options["timeout"] = aiohttp.ClientTimeout(total=self._timeout)
        try:
            async with session.request(
                request.method,
                url,
                headers=build_headers(self._subscription_key, request),
                data=data,
                **options,
            ) as response:
                body = (await response.read()).decode("utf-8", errors="replace")
                outcome = classify_response(
                    status_code=response.status,
                    reason=response.reason,
                    headers=response.headers,
                    body=body,
                    request_url=url,
                    request_body=request.body,
                )
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(
                "Request failed", method=request.method, url=url, error=str(e)
            )
            reason = str(e) or type(e).__name__
            raise NetworkException(request.method, url, reason) from e

        if isinstance(outcome, RateLimited):
            logger.warning(
                "Rate limited, waiting before retry",
                method=request.method,
                url=url,
                retry_after=outcome.retry_after_seconds,
            )
            await self._sleep(outcome.retry_after_seconds)
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

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AsyncRequestExecutor":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
