"""Networking layer: configuration builder, interceptors and transport."""

from .client import HttpClient
from .config import HttpClientConfiguration
from .errors import ErrorResponse, HttpClientError, TransportError
from .interceptors import (
    Interceptor,
    LoggingInterceptor,
    is_success_response,
    reject_on_error,
)
from .types import Err, Ok, Result

__all__ = [
    "Err",
    "ErrorResponse",
    "HttpClient",
    "HttpClientConfiguration",
    "HttpClientError",
    "Interceptor",
    "LoggingInterceptor",
    "Ok",
    "Result",
    "TransportError",
    "is_success_response",
    "reject_on_error",
]
