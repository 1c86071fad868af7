"""Factory functions for creating mock HTTP responses."""

import json

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from requests.structures import CaseInsensitiveDict


ENDPOINT = "https://westus2.api.cognitive.microsoft.com"
MODELS_URL = f"{ENDPOINT}/anomalydetector/v1.1-preview/multivariate/models"


def make_response(
    status_code: int = 200,
    reason: str = "OK",
    body: str | bytes = b"",
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """Create a mock requests response usable as a context manager."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.content = body.encode("utf-8") if isinstance(body, str) else body
    response.headers = CaseInsensitiveDict(headers or {})
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def make_async_response(
    status: int = 200,
    reason: str = "OK",
    body: str = "",
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """Create a mock aiohttp request context manager.

    The response itself is available as ``context.response``.
    """
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {})
    response.read = AsyncMock(return_value=body.encode("utf-8"))

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    context.response = response
    return context


def create_model_payload(**kwargs: Any) -> dict[str, Any]:
    """Create a list-models entry as returned by the service."""
    defaults = {
        "modelId": "45aad126-aafd-11ea-b8fb-d89ef3400c5f",
        "createdTime": "2021-01-01T00:00:00Z",
        "lastUpdatedTime": "2021-01-01T00:10:00Z",
        "status": "READY",
        "displayName": "madtest",
        "variablesCount": 3,
    }
    defaults.update(kwargs)
    return defaults


def create_list_models_body(
    models: list[dict[str, Any]] | None = None,
    current_count: int | None = None,
    max_count: int = 100,
    next_link: str | None = None,
) -> str:
    """Create a list-models response body."""
    models = models or []
    payload: dict[str, Any] = {
        "models": models,
        "currentCount": len(models) if current_count is None else current_count,
        "maxCount": max_count,
    }
    if next_link is not None:
        payload["nextLink"] = next_link
    return json.dumps(payload)


MODEL_NOT_EXIST_BODY = json.dumps(
    {
        "code": "ModelNotExist",
        "message": "The model does not exist. Please check the model ID.",
    }
)
