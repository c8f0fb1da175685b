# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""The ``record`` class decorator.

Example:
    >>> @record(coercion=["foo"], validation=["foo"], enumerable=True,
    ...         collectable="bar", generator={"foo": Gen("integers", 0, 1000)})
    ... class MyRecord:
    ...     foo: int = 42
    ...     bar: list = field(default_factory=list)
    ...
    ...     @staticmethod
    ...     def coerce_foo(value):
    ...         try:
    ...             return Ok(int(value))
    ...         except (TypeError, ValueError):
    ...             return Err(f"{value!r} is not a valid integer value")
    ...
    ...     @staticmethod
    ...     def validate_foo(value):
    ...         return Ok(value) if value >= 0 else Err("foo must be positive")
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, TypeVar

from . import access, collectable, enumerable
from . import generator as _generator
from ._errors import ConfigurationError
from .config import StructuraConfig
from .schema import Schema

__all__ = ("record",)

R = TypeVar("R", bound=type)


def _attach(cls: type, members: dict[str, Any]) -> None:
    for name, member in members.items():
        # members defined in the class body take precedence
        if name not in cls.__dict__:
            setattr(cls, name, member)


def _build(cls: R, config: StructuraConfig) -> R:
    if not dataclasses.is_dataclass(cls):
        try:
            cls = dataclasses.dataclass(frozen=True)(cls)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"{cls.__name__} cannot be made a frozen dataclass: {e}",
                cause=e,
            ) from e

    schema = Schema.resolve(cls, config)
    cls.__structura_schema__ = schema
    cls.__structura_generator__ = _generator.GeneratorComposer(schema)

    if config.access:
        _attach(
            cls,
            {
                "get": access.get,
                "fetch": access.fetch,
                "put": access.put,
                "put_many": access.put_many,
                "update": access.update,
                "pop": access.pop,
                "__getitem__": access.get,
            },
        )
    if config.enumerable:
        _attach(
            cls,
            {
                "__iter__": enumerable.pairs,
                "__len__": enumerable.count,
                "__bool__": enumerable.truthy,
                "__contains__": enumerable.member,
            },
        )
    if schema.collect_target is not None:
        _attach(cls, {"collect": collectable.collect})
    _attach(cls, {"generator": classmethod(_generator.generator)})
    return cls


def record(cls: R | None = None, /, **options: Any) -> R | Callable[[R], R]:
    """Declare record capabilities on a (frozen data)class.

    Options:
        access: get/fetch/put/put_many/update/pop and ``record[name]``,
            default ``True``
        coercion: ``True`` for every field or a list of field names; the
            class provides ``coerce_<name>(value) -> Ok | Err``
        validation: like ``coercion``, with ``validate_<name>(value)``
        enumerable: iterate ``(name, value)`` pairs, ``len()`` and ``in``
        collectable: name of the field ``collect`` accumulates into
        generator: field name to generator description, see
            ``structura.generator``

    Raises:
        ConfigurationError: If the options do not fit the declared fields
    """
    config = StructuraConfig.from_options(**options)

    def wrap(cls: R) -> R:
        return _build(cls, config)

    if cls is None:
        return wrap
    return wrap(cls)
