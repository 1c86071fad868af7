"""
mad_client package

Resilient REST client for the Anomaly Detector multivariate model API.
"""

# Export exceptions for easier access
from mad_client.application.exceptions import (
    ConfigurationException,
    InvalidConfigException,
    MissingConfigException,
)
from mad_client.domain.exceptions import MADClientException
from mad_client.domain.value_objects.vendor_error_code import VendorErrorCode
from mad_client.infrastructure.exceptions import (
    ExternalServiceException,
    NetworkException,
    RateLimitException,
    ResponseParsingException,
)


__all__ = [
    # Base exception
    "MADClientException",
    # Configuration
    "ConfigurationException",
    "MissingConfigException",
    "InvalidConfigException",
    # Service calls
    "ExternalServiceException",
    "NetworkException",
    "RateLimitException",
    "ResponseParsingException",
    "VendorErrorCode",
]

__version__ = "0.1.0"
