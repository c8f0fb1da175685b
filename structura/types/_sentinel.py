# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Final, Literal, TypeVar, Union

__all__ = (
    "Halt",
    "HaltType",
    "MaybeUndefined",
    "SingletonType",
    "T",
    "Undefined",
    "UndefinedType",
    "Unset",
    "UnsetType",
)

T = TypeVar("T")


class _SingletonMeta(type):
    """Metaclass that guarantees exactly one instance per subclass."""

    _cache: dict[type, SingletonType] = {}

    def __call__(cls, *a, **kw):
        if cls not in cls._cache:
            cls._cache[cls] = super().__call__(*a, **kw)
        return cls._cache[cls]


class SingletonType(metaclass=_SingletonMeta):
    """Base class for singleton sentinel types.

    Provides consistent interface for sentinel values with:
    - Identity preservation across deepcopy
    - Falsy boolean evaluation
    - Clear string representation
    """

    __slots__: tuple[str, ...] = ()

    def __deepcopy__(self, memo):
        return self

    def __copy__(self):
        return self

    def __bool__(self) -> bool:
        return False

    # concrete classes *must* override
    def __repr__(self) -> str: ...


class UndefinedType(SingletonType):
    """Sentinel for a field entirely missing from a record type.

    Example:
        >>> schema.get("nope") is Undefined
        True
    """

    __slots__ = ()

    def __repr__(self) -> Literal["Undefined"]:
        return "Undefined"

    def __reduce__(self):
        return "Undefined"


class UnsetType(SingletonType):
    """Sentinel for an optional argument the caller did not provide.

    Example:
        >>> def get(record, field, default=Unset):
        ...     if default is not Unset:
        ...         ...
    """

    __slots__ = ()

    def __repr__(self) -> Literal["Unset"]:
        return "Unset"

    def __reduce__(self):
        return "Unset"


class HaltType(SingletonType):
    """Sentinel a collect source yields to stop accumulation early.

    Everything collected before the sentinel is kept, everything after it is
    never requested from the source.
    """

    __slots__ = ()

    def __repr__(self) -> Literal["Halt"]:
        return "Halt"

    def __reduce__(self):
        return "Halt"


Undefined: Final = UndefinedType()
"""A field entirely missing from a record type"""
Unset: Final = UnsetType()
"""An argument present in a signature but not provided."""
Halt: Final = HaltType()
"""Stop collecting and finalize with what has been accumulated."""

MaybeUndefined = Union[T, UndefinedType]
