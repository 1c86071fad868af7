"""Domain value objects."""

from mad_client.domain.value_objects.response_outcome import (
    Created,
    Failure,
    NoContent,
    RateLimited,
    ResponseOutcome,
    Success,
    result_text,
)
from mad_client.domain.value_objects.service_request import (
    ServiceRequest,
    build_target_uri,
)
from mad_client.domain.value_objects.vendor_error_code import VendorErrorCode


__all__ = [
    "ResponseOutcome",
    "Success",
    "Created",
    "NoContent",
    "RateLimited",
    "Failure",
    "result_text",
    "ServiceRequest",
    "build_target_uri",
    "VendorErrorCode",
]
