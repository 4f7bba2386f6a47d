"""Configuration models for the HttpClient interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .interceptors import Interceptor, reject_on_error

logger = logging.getLogger(__name__)

STANDARD_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {"credentials": "same-origin"}
)


def freeze(value: Any) -> Any:
    """Return a read-only copy of nested mappings and lists in ``value``.

    Mappings become ``MappingProxyType`` and lists become tuples. Other
    objects are shared.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def _default_defaults() -> Mapping[str, Any]:
    """Return immutable empty request defaults mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class HttpClientConfiguration:
    """Immutable configuration consumed by an HttpClient at request time.

    Every ``with_*``/``add_*`` method returns a new configuration and leaves
    the receiver untouched, so calls can be chained::

        config = (
            HttpClientConfiguration()
            .with_base_url("/api")
            .use_standard_configuration()
        )
    """

    base_url: str = ""
    # Only applied when the client builds the request itself.
    defaults: Mapping[str, Any] = field(default_factory=_default_defaults)
    interceptors: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        # Freeze copied inputs, nested values included.
        object.__setattr__(self, "defaults", freeze(dict(self.defaults)))
        object.__setattr__(self, "interceptors", tuple(self.interceptors))

    @classmethod
    def create(
        cls, options: Mapping[str, Any] | None = None
    ) -> HttpClientConfiguration:
        """Build a configuration from a partial mapping of fields.

        Missing fields, and fields given as None, keep their defaults.
        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        options = dict(options or {})
        ignored = sorted(set(options) - known)
        if ignored:
            logger.debug("Ignoring unknown configuration options: %s", ignored)
        return cls(
            **{
                k: v
                for k, v in options.items()
                if k in known and v is not None
            }
        )

    def with_base_url(self, base_url: str) -> HttpClientConfiguration:
        """Return a copy whose base URL is ``base_url``."""
        return replace(self, base_url=base_url)

    def with_defaults(
        self, defaults: Mapping[str, Any]
    ) -> HttpClientConfiguration:
        """Return a copy whose defaults are replaced by ``defaults``.

        The previous defaults are discarded, not merged.
        """
        return replace(self, defaults=defaults)

    def add_interceptor(self, interceptor: Any) -> HttpClientConfiguration:
        """Return a copy with ``interceptor`` appended to the chain.

        Args:
            interceptor: An object with any of the ``request``,
                ``request_error``, ``response`` or ``response_error``
                handlers. ``request`` and ``request_error`` act as success
                and failure handlers for the request before it is sent;
                ``response`` and ``response_error`` do the same for the
                outcome after it has been received.
        """
        logger.debug(
            "Adding interceptor %s at position %d",
            type(interceptor).__name__,
            len(self.interceptors),
        )
        return replace(self, interceptors=self.interceptors + (interceptor,))

    def add_interceptors(
        self, interceptors: Iterable[Any]
    ) -> HttpClientConfiguration:
        """Append several interceptors, preserving their order."""
        config = self
        for interceptor in interceptors:
            config = config.add_interceptor(interceptor)
        return config

    def use_standard_configuration(self) -> HttpClientConfiguration:
        """Apply same-origin credentials and reject error responses.

        Existing defaults are replaced, not merged.
        """
        return self.with_defaults(STANDARD_DEFAULTS).reject_error_responses()

    def reject_error_responses(self) -> HttpClientConfiguration:
        """Make responses outside the 200-299 range fail.

        ``requests`` only raises for conditions that prevent a response from
        arriving, so an error status normally reaches the caller as a
        success. The appended interceptor raises ErrorResponse carrying the
        response instead.
        """
        return self.add_interceptor(Interceptor(response=reject_on_error))
