"""Synchronous HTTP client that consumes an HttpClientConfiguration.

The client owns request construction and sending; everything else comes from
the configuration. The base URL is prepended to relative URLs, defaults are
merged into requests the client builds itself, and interceptors run in
insertion order around the send.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Callable, Mapping, Union
from urllib.parse import urlsplit

import requests

from .config import HttpClientConfiguration
from .errors import ErrorResponse, HttpClientError, TransportError
from .interceptors import get_handler
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

# Keyword arguments accepted by requests.Request.
REQUEST_FIELDS = frozenset(
    {"headers", "files", "data", "params", "auth", "cookies", "hooks", "json"}
)
CREDENTIAL_MODES = frozenset({"omit", "same-origin", "include"})
DEFAULT_PORTS = {"http": 80, "https": 443}

_ABSOLUTE_URL = re.compile(r"^([a-z][a-z0-9+\-.]*:)?//", re.IGNORECASE)

Configurer = Union[
    HttpClientConfiguration,
    Callable[[HttpClientConfiguration], HttpClientConfiguration],
]


def _thaw(value: Any) -> Any:
    """Return mutable copies of frozen mappings for requests to consume."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return tuple(_thaw(v) for v in value)
    return value


def _origin(url: str) -> tuple[str, str, int | None] | None:
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return None
    scheme = parts.scheme.lower()
    return scheme, parts.hostname.lower(), parts.port or DEFAULT_PORTS.get(scheme)


class HttpClient:
    """HTTP client driven by an immutable configuration.

    Methods return a Result: ``Ok`` with the final response, or ``Err`` with
    the error that ended the interceptor chain. Error statuses are only
    failures when an interceptor such as ``reject_on_error`` makes them so.
    """

    def __init__(
        self,
        config: HttpClientConfiguration | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Base URL, request defaults and interceptors to use.
            session: Optional session to send requests through.
        """
        self._config = config or HttpClientConfiguration()
        self._session = session or requests.Session()

    @property
    def config(self) -> HttpClientConfiguration:
        return self._config

    def configure(self, config: Configurer) -> HttpClient:
        """Replace the configuration.

        Args:
            config: A configuration, or a callable receiving the current
                configuration and returning the new one.

        Returns:
            The client itself, for chaining.
        """
        if not isinstance(config, HttpClientConfiguration):
            config = config(self._config)
        if not isinstance(config, HttpClientConfiguration):
            raise TypeError(
                "configure callable must return an HttpClientConfiguration, "
                f"got {type(config).__name__}"
            )
        self._config = config
        return self

    @staticmethod
    def _build_url(config: HttpClientConfiguration, url: str) -> str:
        """Prepend the base URL to relative URLs."""
        base_url = config.base_url
        if not base_url or _ABSOLUTE_URL.match(url):
            return url
        return f"{base_url}{url}"

    @staticmethod
    def _request_options(
        source: Mapping[str, Any], label: str
    ) -> dict[str, Any]:
        options = {k: v for k, v in source.items() if k in REQUEST_FIELDS}
        ignored = sorted(set(source) - REQUEST_FIELDS - {"credentials"})
        if ignored:
            logger.debug("Ignoring unsupported %s options: %s", label, ignored)
        return options

    def _build_request(
        self,
        config: HttpClientConfiguration,
        url: str,
        method: str,
        init: Mapping[str, Any],
    ) -> requests.Request:
        """Construct a request, applying the configured defaults."""
        defaults = self._request_options(_thaw(config.defaults), "default")
        options = self._request_options(init, "request")
        headers = {
            **dict(defaults.pop("headers", None) or {}),
            **dict(options.pop("headers", None) or {}),
        }
        merged = {**defaults, **options}
        return requests.Request(
            method=method.upper(),
            url=self._build_url(config, url),
            headers=headers,
            **merged,
        )

    @staticmethod
    def _credentials_mode(
        config: HttpClientConfiguration, init: Mapping[str, Any], built: bool
    ) -> str:
        mode = init.get("credentials")
        if mode is None and built:
            mode = config.defaults.get("credentials")
        if mode is None:
            return "include"
        if mode not in CREDENTIAL_MODES:
            logger.debug("Unknown credentials mode %r, using 'include'", mode)
            return "include"
        return mode

    @staticmethod
    def _sends_cookies(
        config: HttpClientConfiguration, mode: str, url: str
    ) -> bool:
        if mode == "omit":
            return False
        if mode == "include":
            return True
        base_origin = _origin(config.base_url)
        if base_origin is None:
            return True
        return _origin(url) == base_origin

    @staticmethod
    def _run_interceptors(
        interceptors: tuple[Any, ...],
        success_slot: str,
        error_slot: str,
        value: Any,
        error: Exception | None,
        stop_on_response: bool = False,
    ) -> tuple[Any, Exception | None]:
        """Thread a value or an error through the interceptor chain."""
        for interceptor in interceptors:
            # A request handler answering with a response skips the send.
            if stop_on_response and isinstance(value, requests.Response):
                break
            slot = success_slot if error is None else error_slot
            handler = get_handler(interceptor, slot)
            if handler is None:
                continue
            try:
                value = handler(value if error is None else error)
                error = None
            except Exception as exc:
                error = exc
        return value, error

    def _send(
        self,
        config: HttpClientConfiguration,
        request: requests.Request | requests.PreparedRequest,
        credentials: str,
    ) -> requests.Response:
        if isinstance(request, requests.Request):
            prepared = self._session.prepare_request(request)
        else:
            prepared = request
        if not self._sends_cookies(config, credentials, prepared.url or ""):
            prepared.headers.pop("Cookie", None)
        logger.debug(
            "Sending %s %s (credentials=%s)",
            prepared.method,
            prepared.url,
            credentials,
        )
        return self._session.send(prepared, allow_redirects=True)

    def _build_meta(
        self,
        method: str,
        request_url: str,
        response: Any,
        context: Mapping[str, Any] | None,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from response and context."""
        meta: dict[str, Any] = {}
        meta["method"] = method
        meta["url"] = request_url
        if context:
            context_dict = dict(context)
            meta["context"] = context_dict
            for key, value in context_dict.items():
                meta.setdefault(key, value)

        if response is not None and hasattr(response, "status_code"):
            meta["status"] = response.status_code
            meta["status_code"] = response.status_code
            meta["url"] = getattr(response, "url", None) or request_url
            meta["reason"] = getattr(response, "reason", None)
            try:
                meta["elapsed_s"] = response.elapsed.total_seconds()
            except AttributeError:
                pass  # In case elapsed is not available or mocked
        if final_error is not None:
            meta["final_error"] = final_error

        return meta

    def fetch(
        self,
        resource: str | requests.Request,
        *,
        method: str = "GET",
        context: Mapping[str, Any] | None = None,
        **init: Any,
    ) -> Result[Any, Exception]:
        """Send a request through the configured interceptor chain.

        Args:
            resource: A URL, or a pre-built ``requests.Request``. Defaults
                are only applied when a URL is given.
            method: HTTP method used when building the request from a URL.
            context: Optional caller context copied into the metadata.
            **init: Per-request options (headers, params, data, json, auth,
                cookies, files, hooks, credentials) layered over defaults.

        Returns:
            Result containing the final response on success, or the error
            that ended the chain on failure.
        """
        config = self._config
        built = not isinstance(resource, requests.Request)
        if built:
            request: Any = self._build_request(config, resource, method, init)
        else:
            ignored = sorted(set(init) - {"credentials"})
            if ignored:
                logger.debug(
                    "Ignoring request options for a pre-built request: %s",
                    ignored,
                )
            # Interceptors must not reach the caller's request.
            request = copy.copy(resource)
            for name in ("headers", "params", "cookies"):
                setattr(request, name, copy.copy(getattr(resource, name)))
            request.url = self._build_url(config, request.url)
        request_method = (request.method or method).upper()
        request_url = request.url
        credentials = self._credentials_mode(config, init, built)

        value, error = self._run_interceptors(
            config.interceptors,
            "request",
            "request_error",
            request,
            None,
            stop_on_response=True,
        )

        if error is None and not isinstance(value, requests.Response):
            if isinstance(value, (requests.Request, requests.PreparedRequest)):
                try:
                    value = self._send(config, value, credentials)
                except requests.exceptions.RequestException as exc:
                    error = TransportError(str(exc))
                    error.__cause__ = exc
                    value = None
            else:
                error = HttpClientError(
                    "request interceptor returned "
                    f"{type(value).__name__}, expected a request or response"
                )
                value = None

        value, error = self._run_interceptors(
            config.interceptors, "response", "response_error", value, error
        )

        if error is not None:
            response = (
                error.response if isinstance(error, ErrorResponse) else None
            )
            logger.debug(
                "%s %s failed: %s", request_method, request_url, error
            )
            return Err(
                error,
                meta=self._build_meta(
                    request_method,
                    request_url,
                    response,
                    context,
                    final_error=type(error).__name__,
                ),
            )
        return Ok(
            value,
            meta=self._build_meta(request_method, request_url, value, context),
        )

    def get(self, url: str, **init: Any) -> Result[Any, Exception]:
        """Perform an HTTP GET request."""
        return self.fetch(url, method="GET", **init)

    def head(self, url: str, **init: Any) -> Result[Any, Exception]:
        """Perform an HTTP HEAD request."""
        return self.fetch(url, method="HEAD", **init)

    def post(self, url: str, **init: Any) -> Result[Any, Exception]:
        """Perform an HTTP POST request."""
        return self.fetch(url, method="POST", **init)
