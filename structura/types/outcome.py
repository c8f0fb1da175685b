# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Ok/Err outcomes returned by record operations.

Pipeline and access failures are values, not exceptions: callers branch on
the outcome explicitly, either with ``is_ok()`` or with pattern matching:

    >>> match record.put("foo", "42"):
    ...     case Ok(new_record):
    ...         ...
    ...     case Err(error):
    ...         print(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .._errors import StructuraError

__all__ = ("Ok", "Err", "Outcome", "is_outcome")

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Outcome[U]]) -> Outcome[U]:
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True, init=False)
class Err(Generic[T]):
    """Failed outcome carrying the error that explains it.

    Accepts either a ``StructuraError`` or a plain reason string, which is
    wrapped so that every failure exposes ``message`` and ``details``.
    """

    error: StructuraError

    def __init__(self, error: StructuraError | str):
        if isinstance(error, str):
            error = StructuraError(error)
        elif not isinstance(error, StructuraError):
            raise TypeError(
                "Err expects a StructuraError or a reason string, "
                f"got {type(error).__name__}"
            )
        object.__setattr__(self, "error", error)

    @property
    def reason(self) -> str:
        return self.error.message

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        return self  # type: ignore[return-value]

    def flat_map(self, f: Callable[[T], Outcome[U]]) -> Outcome[U]:
        return self  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Err({type(self.error).__name__}({self.reason!r}))"


Outcome = Union[Ok[T], Err[T]]


def is_outcome(value: Any) -> bool:
    return isinstance(value, (Ok, Err))
