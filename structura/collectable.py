# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Accumulating a stream of elements into a record's collection target.

Each container kind has one collector that knows how to start from the
current value, take one element and produce the final value. The collector
is picked once, from the target's value when collecting begins.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any, Mapping

from typing_extensions import override

from ._errors import TypeMismatchError
from .pipeline import commit
from .schema import ContainerKind, schema_of
from .types import Err, Halt, Outcome

__all__ = (
    "Collector",
    "SequenceCollector",
    "MappingCollector",
    "SetCollector",
    "TextCollector",
    "COLLECTORS",
    "collector_for",
    "collect",
)

logger = logging.getLogger(__name__)


class Collector(ABC):
    """Accumulate/finalize pair for one container kind."""

    kind: ContainerKind

    @abstractmethod
    def start(self, current: Any) -> Any:
        """Fresh accumulator seeded with the target's current value."""

    @abstractmethod
    def accumulate(self, acc: Any, element: Any, field: str) -> None:
        """Take one element or raise ``TypeMismatchError``."""

    @abstractmethod
    def finalize(self, acc: Any, current: Any) -> Any:
        """Value to store in the target field."""

    def mismatch(
        self, field: str, element: Any, expected: str
    ) -> TypeMismatchError:
        return TypeMismatchError.from_element(
            field, self.kind.value, element, expected
        )


class SequenceCollector(Collector):
    kind = ContainerKind.SEQUENCE

    @override
    def start(self, current):
        return list(current)

    @override
    def accumulate(self, acc, element, field):
        acc.append(element)

    @override
    def finalize(self, acc, current):
        return tuple(acc) if isinstance(current, tuple) else acc


class MappingCollector(Collector):
    """Elements are ``(key, value)`` pairs, the last value for a key wins."""

    kind = ContainerKind.MAPPING

    @override
    def start(self, current):
        return dict(current)

    @override
    def accumulate(self, acc, element, field):
        if not isinstance(element, (tuple, list)) or len(element) != 2:
            raise self.mismatch(field, element, "a (key, value) pair")
        key, value = element
        try:
            acc[key] = value
        except TypeError as e:
            raise self.mismatch(field, element, "a hashable key") from e

    @override
    def finalize(self, acc, current):
        return acc


class SetCollector(Collector):
    kind = ContainerKind.SET

    @override
    def start(self, current):
        return set(current)

    @override
    def accumulate(self, acc, element, field):
        try:
            acc.add(element)
        except TypeError as e:
            raise self.mismatch(field, element, "a hashable element") from e

    @override
    def finalize(self, acc, current):
        return frozenset(acc) if isinstance(current, frozenset) else acc


class TextCollector(Collector):
    """Fragments are concatenated in arrival order."""

    kind = ContainerKind.TEXT

    @override
    def start(self, current):
        return [current]

    @override
    def accumulate(self, acc, element, field):
        if not isinstance(element, str):
            raise self.mismatch(field, element, "a str fragment")
        acc.append(element)

    @override
    def finalize(self, acc, current):
        return "".join(acc)


COLLECTORS: Mapping[ContainerKind, Collector] = MappingProxyType(
    {
        c.kind: c
        for c in (
            SequenceCollector(),
            MappingCollector(),
            SetCollector(),
            TextCollector(),
        )
    }
)


def collector_for(value: Any) -> Collector | None:
    kind = ContainerKind.of(value)
    return COLLECTORS[kind] if kind is not None else None


def collect(record: Any, source: Iterable[Any]) -> Outcome[Any]:
    """Collect ``source`` into the record's collection target.

    Accumulation starts from the target's current value. ``source`` may be
    infinite as long as it eventually yields ``Halt``; whatever was collected
    before it is kept.

    Returns:
        Ok(new_record), or Err(TypeMismatchError) on the first element that
        does not fit, in which case nothing is written. A record that
        rejects the final value in ``__post_init__`` gives
        Err(PipelineFailure)
    """
    schema = schema_of(record)
    schema.require("collectable")
    name = schema.collect_target
    current = getattr(record, name)

    collector = collector_for(current)
    if collector is None:
        return Err(
            TypeMismatchError(
                f"collection target {name!r} holds a "
                f"{type(current).__name__}, not a collectable container",
                details={"field": name, "type": type(current).__name__},
            )
        )

    acc = collector.start(current)
    try:
        for element in source:
            if element is Halt:
                logger.debug("Collect into %r halted by source", name)
                break
            collector.accumulate(acc, element, name)
    except TypeMismatchError as e:
        logger.debug("Collect into %r aborted: %s", name, e)
        return Err(e)

    final = collector.finalize(acc, current)
    return commit(record, {name: final})
