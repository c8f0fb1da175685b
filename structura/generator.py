# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Hypothesis strategies producing whole record values.

Per field, a generator description is one of:

* a ``SearchStrategy``, used as is;
* ``Gen(name, *args, **kwargs)``, a call to ``hypothesis.strategies.<name>``
  whose arguments may themselves be descriptions;
* a bare strategy name such as ``"integers"``;
* a zero-argument callable returning a strategy or a description, called
  every time a record generator is built.

Fields without a description generate their default value. Generated
records do not go through the field pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from hypothesis import strategies as st
from hypothesis.errors import InvalidArgument
from hypothesis.strategies import SearchStrategy

from ._errors import ConfigurationError
from .schema import FieldSpec, Schema, schema_of

__all__ = ("Gen", "GeneratorComposer", "resolve", "default_strategy", "generator")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, init=False)
class Gen:
    """Deferred call to a ``hypothesis.strategies`` function.

    Example:
        >>> Gen("lists", Gen("text", alphabet="abc"), max_size=3)
    """

    name: str
    args: tuple[Any, ...]
    kwargs: Mapping[str, Any]

    def __init__(self, name: str, *args: Any, **kwargs: Any):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "args", args)
        object.__setattr__(self, "kwargs", MappingProxyType(dict(kwargs)))

    def __repr__(self) -> str:
        params = [repr(a) for a in self.args]
        params += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"Gen({self.name!r}{''.join(', ' + p for p in params)})"


def _strategy_factory(name: str) -> Callable[..., SearchStrategy]:
    factory = getattr(st, name, None) if not name.startswith("_") else None
    if not callable(factory) or isinstance(factory, type):
        raise ConfigurationError(
            f"hypothesis.strategies has no strategy named {name!r}",
            details={"strategy": name},
        )
    return factory


def _resolve_arg(value: Any) -> Any:
    if isinstance(value, (Gen, SearchStrategy)):
        return resolve(value)
    if isinstance(value, list):
        return [_resolve_arg(v) for v in value]
    if isinstance(value, tuple):
        return tuple(_resolve_arg(v) for v in value)
    if isinstance(value, dict):
        return {k: _resolve_arg(v) for k, v in value.items()}
    return value


def resolve(description: Any) -> SearchStrategy:
    """Turn a generator description into a strategy.

    Raises:
        ConfigurationError: If the description names no strategy or the
            strategy rejects its arguments
    """
    if isinstance(description, SearchStrategy):
        return description
    if isinstance(description, str):
        description = Gen(description)
    if isinstance(description, Gen):
        factory = _strategy_factory(description.name)
        args = _resolve_arg(description.args)
        kwargs = _resolve_arg(dict(description.kwargs))
        try:
            strategy = factory(*args, **kwargs)
            # arguments are otherwise only checked on the first draw
            strategy.validate()
        except (InvalidArgument, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid arguments for {description!r}: {e}",
                details={"strategy": description.name},
                cause=e,
            ) from e
        return strategy
    if callable(description):
        produced = description()
        if callable(produced) and not isinstance(produced, SearchStrategy):
            raise ConfigurationError(
                f"Generator function {description!r} must return a strategy"
            )
        return resolve(produced)
    raise ConfigurationError(
        f"Not a generator description: {description!r}",
        details={"type": type(description).__name__},
    )


def default_strategy(spec: FieldSpec) -> SearchStrategy:
    """Constant generator over the field's default value."""
    if spec.default_factory is not None:
        return st.builds(spec.default_factory)
    return st.just(spec.default)


class GeneratorComposer:
    """Per record type field strategies, combined on demand.

    Static descriptions are resolved once, at construction; callables are
    kept and called each time ``compose`` runs.
    """

    __slots__ = ("schema", "_static", "_deferred")

    def __init__(self, schema: Schema):
        self.schema = schema
        static: dict[str, SearchStrategy] = {}
        deferred: dict[str, Callable[[], Any]] = {}
        for spec in schema.fields:
            desc = spec.generator
            if not spec.has_generator:
                static[spec.name] = default_strategy(spec)
            elif callable(desc) and not isinstance(
                desc, (Gen, SearchStrategy, str)
            ):
                deferred[spec.name] = desc
            else:
                static[spec.name] = resolve(desc)
        self._static = MappingProxyType(static)
        self._deferred = MappingProxyType(deferred)
        logger.debug(
            "Generator for %s: configured=%s deferred=%s",
            schema.record_type.__name__,
            [s.name for s in schema.fields if s.has_generator],
            list(deferred),
        )

    def field_strategy(self, name: str) -> SearchStrategy:
        if name in self._deferred:
            return resolve(self._deferred[name])
        return self._static[name]

    def compose(self) -> SearchStrategy:
        """Fresh strategy of whole records, fields drawn in declared order."""
        return st.builds(
            self.schema.record_type,
            **{name: self.field_strategy(name) for name in self.schema.names},
        )


def generator(record_type: type) -> SearchStrategy:
    """Strategy of instances of a ``@record`` type."""
    schema = schema_of(record_type)
    composer = record_type.__dict__.get("__structura_generator__")
    if composer is None:
        composer = GeneratorComposer(schema)
    return composer.compose()
