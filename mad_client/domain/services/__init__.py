"""Domain services."""

from mad_client.domain.services.response_classifier import (
    classify_response,
    parse_retry_after,
)


__all__ = ["classify_response", "parse_retry_after"]
