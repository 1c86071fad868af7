"""External services package."""

from mad_client.infrastructure.external.anomaly_detector_client import (
    MODELS_PATH,
    AnomalyDetectorClient,
)
from mad_client.infrastructure.external.async_request_executor import (
    AsyncRequestExecutor,
)
from mad_client.infrastructure.external.request_executor import RequestExecutor


__all__ = [
    "MODELS_PATH",
    "AnomalyDetectorClient",
    "AsyncRequestExecutor",
    "RequestExecutor",
]
