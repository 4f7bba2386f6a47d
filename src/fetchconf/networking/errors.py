"""Error hierarchy for the networking layer."""

from __future__ import annotations

from typing import Any


class HttpClientError(Exception):
    """Base error for HttpClient failures."""


class ErrorResponse(HttpClientError):
    """A response whose status falls outside the 2xx range.

    The response object is carried unchanged so callers can inspect its
    status, headers and body.
    """

    def __init__(self, response: Any, status: int | None = None) -> None:
        message = (
            f"HTTP {status} error response"
            if status is not None
            else "HTTP error response"
        )
        super().__init__(message)
        self.response = response
        self.status = status


class TransportError(HttpClientError):
    """The transport failed before a response was received."""
