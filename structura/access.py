# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Read/write access to record fields.

Every write goes through the field pipeline and returns an outcome holding
a new record; the record passed in is never changed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ._errors import NotFoundError, PipelineFailure, UnknownFieldError
from .pipeline import apply, commit, run_pipeline
from .schema import FieldSpec, Schema, schema_of
from .types import Err, Ok, Outcome, Undefined, Unset

__all__ = ("get", "fetch", "put", "put_many", "update", "pop")


def _field(record: Any, name: str) -> tuple[Schema, FieldSpec | None]:
    schema = schema_of(record)
    schema.require("access")
    spec = schema.get(name)
    return schema, None if spec is Undefined else spec


def get(record: Any, name: str, default: Any = Unset) -> Any:
    """Value of field ``name``.

    Returns ``default`` for an undeclared field when one is given.

    Raises:
        UnknownFieldError: If ``name`` is undeclared and no default is given
    """
    _, spec = _field(record, name)
    if spec is None:
        if default is not Unset:
            return default
        raise UnknownFieldError(name, type(record))
    return getattr(record, name)


def fetch(record: Any, name: str) -> Outcome[Any]:
    """Outcome form of ``get``.

    Returns:
        Ok(value), or Err(NotFoundError) if ``name`` is not a declared field
    """
    _, spec = _field(record, name)
    if spec is None:
        return Err(NotFoundError(name, type(record)))
    return Ok(getattr(record, name))


def put(record: Any, name: str, value: Any) -> Outcome[Any]:
    """Coerce, validate and commit ``value`` into field ``name``.

    Returns:
        Ok(new_record), or Err(PipelineFailure | UnknownFieldError) with the
        original record left as it was
    """
    _, spec = _field(record, name)
    if spec is None:
        return Err(UnknownFieldError(name, type(record)))
    return apply(record, spec, value)


def put_many(record: Any, values: Mapping[str, Any]) -> Outcome[Any]:
    """Like ``put`` for several fields at once, all or nothing."""
    schema = schema_of(record)
    schema.require("access")
    changes = {}
    for name, value in values.items():
        if (spec := schema.get(name)) is Undefined:
            return Err(UnknownFieldError(name, type(record)))
        outcome = run_pipeline(spec, value)
        if outcome.is_err():
            return outcome
        changes[name] = outcome.unwrap()
    if not changes:
        return Ok(record)
    return commit(record, changes)


def update(
    record: Any, name: str, updater: Callable[[Any], Any]
) -> Outcome[Any]:
    """Fetch, transform with ``updater`` and put back through the pipeline."""
    current = fetch(record, name)
    if current.is_err():
        return current
    try:
        value = updater(current.unwrap())
    except (ValueError, TypeError) as e:
        return Err(
            PipelineFailure.from_stage(
                name, "update", current.unwrap(), str(e), cause=e
            )
        )
    return put(record, name, value)


def pop(record: Any, name: str) -> Outcome[tuple[Any, Any]]:
    """Read field ``name`` and reset it to its default.

    Records keep their full field set, so the field is not removed: the
    outcome holds ``(value, record_with_default)``. The reset bypasses the
    pipeline, the default is trusted.
    """
    _, spec = _field(record, name)
    if spec is None:
        return Err(UnknownFieldError(name, type(record)))
    value = getattr(record, name)
    return commit(record, {name: spec.make_default()}).map(
        lambda reset: (value, reset)
    )
