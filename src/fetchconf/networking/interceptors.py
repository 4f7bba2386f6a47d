"""Interceptor records and the built-in response handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .errors import ErrorResponse

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]

INTERCEPTOR_SLOTS = ("request", "request_error", "response", "response_error")


@dataclass(frozen=True)
class Interceptor:
    """Optional handlers run around the transport's send/receive cycle.

    ``request`` and ``request_error`` act as success and failure handlers for
    the outgoing request before it is sent. ``response`` and
    ``response_error`` act as success and failure handlers for the outcome
    after the transport completes. Every slot is optional; an interceptor
    with no handlers is a no-op.
    """

    request: Optional[Handler] = None
    request_error: Optional[Handler] = None
    response: Optional[Handler] = None
    response_error: Optional[Handler] = None


def get_handler(interceptor: Any, slot: str) -> Handler | None:
    """Return the callable bound to ``slot``, or None when absent."""
    handler = getattr(interceptor, slot, None)
    if handler is None or not callable(handler):
        return None
    return handler


def _read(response: Any, name: str) -> Any:
    if isinstance(response, Mapping):
        return response.get(name)
    return getattr(response, name, None)


def response_status(response: Any) -> int | None:
    """Return the numeric status of ``response`` if it exposes one."""
    for name in ("status_code", "status"):
        value = _read(response, name)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_success_response(response: Any) -> bool:
    """Return True unless the response signals an HTTP error.

    A known status must be within 200-299. An explicit ``ok`` of False is
    always a failure. Responses exposing neither are treated as successes.
    """
    status = response_status(response)
    if status is not None and not 200 <= status <= 299:
        return False
    return _read(response, "ok") is not False


def reject_on_error(response: Any) -> Any:
    """Raise ErrorResponse for non-2xx responses, else pass through."""
    if not is_success_response(response):
        status = response_status(response)
        logger.debug("Rejecting error response with status %s", status)
        raise ErrorResponse(response, status=status)
    return response


class LoggingInterceptor:
    """Log requests and responses passing through the chain."""

    def __init__(
        self,
        log: logging.Logger | None = None,
        level: int = logging.DEBUG,
    ) -> None:
        self._log = log or logger
        self._level = level

    def request(self, request: Any) -> Any:
        self._log.log(
            self._level,
            "HTTP request: %s %s",
            getattr(request, "method", None),
            getattr(request, "url", None),
        )
        return request

    def response(self, response: Any) -> Any:
        self._log.log(
            self._level,
            "HTTP response: %s %s",
            response_status(response),
            getattr(response, "url", None),
        )
        return response

    def response_error(self, error: Exception) -> Any:
        self._log.log(
            self._level, "HTTP error: %s: %s", type(error).__name__, error
        )
        raise error
