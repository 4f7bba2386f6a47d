"""Result types returned by the HttpClient."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome with request metadata."""

    value: T
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome with request metadata."""

    error: E
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> Literal[False]:
        return False


Result = Union[Ok[T], Err[E]]
