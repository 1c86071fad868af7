"""Value object for an outbound request to the Anomaly Detector service."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlencode

from mad_client.domain.exceptions import InvalidRequestException


SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class ServiceRequest:
    """A prepared request, immutable once issued.

    The target URI is not part of the request; the executor combines the
    base path and query parameters at send time.

    Attributes:
        method: HTTP method
        body: Optional request body (JSON text)
        headers: Extra headers sent in addition to the auth/content-type pair
    """

    method: str
    body: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize the method and freeze the headers."""
        method = (self.method or "").upper()
        if method not in SUPPORTED_METHODS:
            raise InvalidRequestException(
                "method", f"unsupported HTTP method '{self.method}'"
            )
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def get(cls) -> "ServiceRequest":
        return cls("GET")

    @classmethod
    def delete(cls) -> "ServiceRequest":
        return cls("DELETE")

    @property
    def has_body(self) -> bool:
        return self.body is not None


def build_target_uri(base_path: str, query_params: Mapping[str, str] | None) -> str:
    """Append URL-encoded query parameters to a base path.

    Args:
        base_path: Fixed vendor endpoint path
        query_params: Query parameters; appended only when non-empty

    Returns:
        The full target URI
    """
    if not base_path:
        raise InvalidRequestException("base_path", "must not be empty")
    if not query_params:
        return base_path
    return f"{base_path}?{urlencode(dict(query_params))}"
