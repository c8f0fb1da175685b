# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Field pipeline: coercion, then validation, then commit.

Validation only ever sees coerced values. Nothing is committed unless both
stages succeed, so a rejected value leaves the record exactly as it was.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from typing import Any

from ._errors import PipelineFailure
from .schema import FieldSpec
from .types import Err, Ok, Outcome, is_outcome

__all__ = ("run_stage", "run_pipeline", "commit", "apply")

logger = logging.getLogger(__name__)


def run_stage(
    spec: FieldSpec,
    stage: str,
    hook: Callable[[Any], Any] | None,
    value: Any,
) -> Outcome[Any]:
    """Run one hook, normalising its result to an outcome.

    A missing hook is the identity stage. ``ValueError``/``TypeError`` raised
    by the hook count as a rejection carrying the exception text.
    """
    if hook is None:
        return Ok(value)
    try:
        result = hook(value)
    except (ValueError, TypeError) as e:
        logger.debug("%s_%s raised %r", stage, spec.name, e)
        return Err(
            PipelineFailure.from_stage(spec.name, stage, value, str(e), cause=e)
        )
    if not is_outcome(result):
        raise TypeError(
            f"{stage}_{spec.name} must return Ok or Err, "
            f"got {type(result).__name__}"
        )
    if result.is_err():
        logger.debug(
            "%s_%s rejected %r: %s", stage, spec.name, value, result.reason
        )
        return Err(
            PipelineFailure.from_stage(
                spec.name, stage, value, result.reason, cause=result.error
            )
        )
    return result


def run_pipeline(spec: FieldSpec, value: Any) -> Outcome[Any]:
    """Coerce then validate ``value`` for the field described by ``spec``."""
    coerce = spec.coerce if spec.coercible else None
    validate = spec.validate if spec.validatable else None
    return run_stage(spec, "coerce", coerce, value).flat_map(
        lambda coerced: run_stage(spec, "validate", validate, coerced)
    )


def commit(record: Any, changes: dict[str, Any]) -> Outcome[Any]:
    """New record with ``changes`` applied; ``record`` itself is untouched."""
    try:
        return Ok(dataclasses.replace(record, **changes))
    except (ValueError, TypeError) as e:
        name = next(iter(changes), None)
        return Err(
            PipelineFailure.from_stage(
                name, "commit", changes.get(name), str(e), cause=e
            )
        )


def apply(record: Any, spec: FieldSpec, value: Any) -> Outcome[Any]:
    """Pipeline ``value`` through ``spec`` and commit it into ``record``."""
    return run_pipeline(spec, value).flat_map(
        lambda final: commit(record, {spec.name: final})
    )
