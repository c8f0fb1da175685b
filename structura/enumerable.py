# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Read-only iteration over ``(name, value)`` pairs in declaration order."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .schema import schema_of

__all__ = (
    "EnumerableView",
    "pairs",
    "count",
    "truthy",
    "member",
    "to_list",
    "to_dict",
)


class EnumerableView:
    """Restartable view of a record's committed field values.

    Every ``iter()`` starts over from the first declared field; the view
    holds no position of its own.
    """

    __slots__ = ("_record", "_names")

    def __init__(self, record: Any):
        schema = schema_of(record)
        schema.require("enumerable")
        self._record = record
        self._names = schema.names

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        for name in self._names:
            yield name, getattr(self._record, name)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        name, value = item
        return name in self._names and getattr(self._record, name) == value

    def __repr__(self) -> str:
        return f"EnumerableView({self._record!r})"


def pairs(record: Any) -> Iterator[tuple[str, Any]]:
    return iter(EnumerableView(record))


def count(record: Any) -> int:
    return len(EnumerableView(record))


def truthy(record: Any) -> bool:
    """Records are always true, even with no fields to count."""
    return True


def member(record: Any, item: object) -> bool:
    return item in EnumerableView(record)


def to_list(record: Any) -> list[tuple[str, Any]]:
    return list(EnumerableView(record))


def to_dict(record: Any) -> dict[str, Any]:
    return dict(EnumerableView(record))
