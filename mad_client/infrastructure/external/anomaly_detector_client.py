"""Anomaly Detector multivariate model client

Thin wrapper over the v1.1-preview multivariate model endpoints, sending
every call through the resilient request executor.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any
from urllib.parse import quote, urljoin

import structlog
from pydantic import ValidationError

from mad_client.application.dtos.mad_model_dto import ListModelsResponse, MADModel
from mad_client.common.logging import LogContext
from mad_client.domain.exceptions import InvalidRequestException, MADClientException
from mad_client.domain.value_objects.service_request import ServiceRequest
from mad_client.infrastructure.config.settings import Settings, get_settings
from mad_client.infrastructure.exceptions import ResponseParsingException
from mad_client.infrastructure.external.request_executor import (
    SERVICE_NAME,
    RequestExecutor,
)


logger = structlog.get_logger(__name__)

MODELS_PATH = "/anomalydetector/v1.1-preview/multivariate/models"


class AnomalyDetectorClient:
    """Client for listing and deleting multivariate anomaly detection models."""

    def __init__(self, executor: RequestExecutor, endpoint: str):
        """
        Args:
            executor: Executor used for every call
            endpoint: Resource endpoint URL (no trailing path)
        """
        self.executor = executor
        self.endpoint = endpoint.rstrip("/")

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **executor_kwargs: Any
    ) -> "AnomalyDetectorClient":
        """Create a client and its executor from application settings."""
        settings = settings or get_settings()
        executor = RequestExecutor.from_settings(settings, **executor_kwargs)
        return cls(executor, settings.endpoint)

    @property
    def models_url(self) -> str:
        return f"{self.endpoint}{MODELS_PATH}"

    def model_url(self, model_id: str) -> str:
        if not model_id or not model_id.strip():
            raise InvalidRequestException("model_id", "must not be empty")
        return f"{self.models_url}/{quote(model_id, safe='')}"

    def delete_model(
        self, model_id: str, params: Mapping[str, str] | None = None
    ) -> str:
        """Delete a model.

        Returns:
            The raw result text (empty on 204 No Content)

        Raises:
            ExternalServiceException: e.g. ``ModelNotExist`` for an unknown id
        """
        url = self.model_url(model_id)
        with LogContext(model_id=model_id):
            result = self.executor.execute(ServiceRequest.delete(), url, params)
            logger.info("Deleted model", model_id=model_id)
        return result

    def list_models_raw(self, params: Mapping[str, str] | None = None) -> str:
        """Return the undecoded list-models response body."""
        return self.executor.execute(ServiceRequest.get(), self.models_url, params)

    def list_models(
        self, params: Mapping[str, str] | None = None
    ) -> ListModelsResponse:
        """List models (one page).

        Args:
            params: Query parameters such as ``skip`` and ``top``

        Raises:
            ResponseParsingException: If the body is not a list-models document
        """
        return self._parse(self.list_models_raw(params))

    def iter_models(
        self, params: Mapping[str, str] | None = None
    ) -> Iterator[MADModel]:
        """Iterate over all models, following ``nextLink`` across pages."""
        page = self.list_models(params)
        seen_links: set[str] = set()
        while True:
            yield from page.models
            next_link = page.next_link
            if not next_link or next_link in seen_links:
                return
            seen_links.add(next_link)
            page = self._parse(
                self.executor.execute(
                    ServiceRequest.get(), urljoin(f"{self.endpoint}/", next_link)
                )
            )

    def delete_models(self, model_ids: Iterable[str]) -> list[str]:
        """Delete several models, continuing past failures.

        Returns:
            Ids whose deletion failed
        """
        failed: list[str] = []
        for model_id in model_ids:
            try:
                self.delete_model(model_id)
            except MADClientException as e:
                logger.error("Failed to delete model", model_id=model_id, error=str(e))
                failed.append(model_id)
        return failed

    @staticmethod
    def _parse(body: str) -> ListModelsResponse:
        try:
            return ListModelsResponse.model_validate_json(body)
        except ValidationError as e:
            raise ResponseParsingException(SERVICE_NAME, str(e), body) from e
