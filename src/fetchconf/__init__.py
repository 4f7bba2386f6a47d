"""fetchconf: immutable HTTP client configuration with interceptor chains."""

from .networking import (
    ErrorResponse,
    HttpClient,
    HttpClientConfiguration,
    HttpClientError,
    Interceptor,
    TransportError,
)

__all__ = [
    "ErrorResponse",
    "HttpClient",
    "HttpClientConfiguration",
    "HttpClientError",
    "Interceptor",
    "TransportError",
]
