# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

"""Schema - per record type description of fields and enabled capabilities.

A Schema is resolved once, when a record type is decorated, and attached to
the type. It is immutable afterwards; every record operation reads from it
and none writes to it.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from ._errors import ConfigurationError
from .config import StructuraConfig, settings
from .types import MaybeUndefined, Undefined, Unset

__all__ = (
    "ContainerKind",
    "FieldSpec",
    "Schema",
    "schema_of",
    "RESERVED_MEMBERS",
)

logger = logging.getLogger(__name__)

RESERVED_MEMBERS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "access": (
            "get",
            "fetch",
            "put",
            "put_many",
            "update",
            "pop",
        ),
        "collectable": ("collect",),
        "generator": ("generator",),
    }
)


class ContainerKind(str, Enum):
    """Structural kind of a collection target."""

    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SET = "set"
    TEXT = "text"

    @classmethod
    def of(cls, value: Any) -> ContainerKind | None:
        # str first, it is also a sequence
        if isinstance(value, str):
            return cls.TEXT
        if isinstance(value, dict):
            return cls.MAPPING
        if isinstance(value, (set, frozenset)):
            return cls.SET
        if isinstance(value, (list, tuple)):
            return cls.SEQUENCE
        return None


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Everything the pipeline and the generator need to know of a field."""

    name: str
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    coercible: bool = False
    validatable: bool = False
    coerce: Callable[[Any], Any] | None = None
    validate: Callable[[Any], Any] | None = None
    generator: Any = Unset

    def make_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    @property
    def has_generator(self) -> bool:
        return self.generator is not Unset


@dataclass(frozen=True, slots=True, init=False)
class Schema:
    """Ordered, immutable collection of FieldSpecs for one record type.

    Attributes:
        record_type: The decorated dataclass
        config: Parsed capability options
        fields: FieldSpecs in declaration order
        collect_target: Name of the collection target field, if any
        collect_kind: Container kind of the target's default value
    """

    record_type: type
    config: StructuraConfig
    fields: tuple[FieldSpec, ...]
    collect_target: str | None
    collect_kind: ContainerKind | None

    def __init__(
        self,
        record_type: type,
        config: StructuraConfig,
        fields: tuple[FieldSpec, ...] | list[FieldSpec] = (),
        *,
        collect_target: str | None = None,
        collect_kind: ContainerKind | None = None,
    ):
        if isinstance(fields, list):
            fields = tuple(fields)
        object.__setattr__(self, "record_type", record_type)
        object.__setattr__(self, "config", config)
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "collect_target", collect_target)
        object.__setattr__(self, "collect_kind", collect_kind)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get(self, name: str, /, default=Undefined) -> MaybeUndefined[FieldSpec]:
        for f in self.fields:
            if f.name == name:
                return f
        return default

    def enabled(self, capability: str) -> bool:
        match capability:
            case "access" | "enumerable":
                return getattr(self.config, capability)
            case "collectable":
                return self.collect_target is not None
            case "generator":
                return True
            case _:
                raise ValueError(f"Unknown capability: {capability}")

    def require(self, capability: str) -> None:
        """Fail if ``capability`` was not enabled for this record type."""
        if not self.enabled(capability):
            raise ConfigurationError(
                f"{capability} is not enabled for "
                f"{self.record_type.__name__}",
                details={"capability": capability},
            )

    @classmethod
    def resolve(cls, record_type: type, config: StructuraConfig) -> Schema:
        """Build and check the schema of a frozen dataclass.

        Raises:
            ConfigurationError: On any inconsistency between the options and
                the declared fields
        """
        owner = record_type.__name__
        if not dataclasses.is_dataclass(record_type):
            raise ConfigurationError(f"{owner} is not a dataclass")
        if not record_type.__dataclass_params__.frozen:
            raise ConfigurationError(
                f"{owner} must be a frozen dataclass, records are immutable"
            )

        declared = dataclasses.fields(record_type)
        if not_init := [f.name for f in declared if not f.init]:
            raise ConfigurationError(
                f"{owner} declares init=False fields {not_init}",
                details={"fields": not_init},
            )
        names = tuple(f.name for f in declared)

        if not config.access and (config.coercion or config.validation):
            raise ConfigurationError(
                f"{owner}: coercion and validation require access=True",
                details={
                    "coercion": config.coercion,
                    "validation": config.validation,
                },
            )

        def _check_subset(option: str, selected) -> None:
            if unknown := set(selected).difference(names):
                raise ConfigurationError(
                    f"{owner}: {option} refers to undeclared fields "
                    f"{sorted(unknown)}",
                    details={"option": option, "unknown": sorted(unknown)},
                )

        coercible = config.selected("coercion", names)
        validatable = config.selected("validation", names)
        _check_subset("coercion", coercible)
        _check_subset("validation", validatable)
        _check_subset("generator", config.generator)

        _check_reserved(owner, names, config)

        specs = []
        for f in declared:
            coerce = _lookup_hook(record_type, "coerce", f.name, coercible)
            validate = _lookup_hook(
                record_type, "validate", f.name, validatable
            )
            default, factory = _field_default(f)
            specs.append(
                FieldSpec(
                    name=f.name,
                    default=default,
                    default_factory=factory,
                    coercible=f.name in coercible,
                    validatable=f.name in validatable,
                    coerce=coerce,
                    validate=validate,
                    generator=config.generator.get(f.name, Unset),
                )
            )

        collect_kind = None
        if (target := config.collectable) is not None:
            _check_subset("collectable", (target,))
            spec = next(s for s in specs if s.name == target)
            initial = spec.make_default()
            collect_kind = ContainerKind.of(initial)
            if collect_kind is None:
                raise ConfigurationError(
                    f"{owner}: collection target {target!r} must default to "
                    "a list, tuple, dict, set, frozenset or str, got "
                    f"{type(initial).__name__}",
                    details={"field": target, "type": type(initial).__name__},
                )

        schema = cls(
            record_type,
            config,
            specs,
            collect_target=target,
            collect_kind=collect_kind,
        )
        logger.debug(
            "Resolved schema for %s: fields=%s coercion=%s validation=%s "
            "collect=%s(%s)",
            owner,
            names,
            sorted(coercible),
            sorted(validatable),
            target,
            collect_kind.value if collect_kind else None,
        )
        return schema


def _field_default(f: dataclasses.Field) -> tuple[Any, Callable | None]:
    if f.default is not dataclasses.MISSING:
        return f.default, None
    if f.default_factory is not dataclasses.MISSING:
        return None, f.default_factory
    return None, None


def _check_reserved(
    owner: str, names: tuple[str, ...], config: StructuraConfig
) -> None:
    reserved = set(RESERVED_MEMBERS["generator"])
    if config.access:
        reserved.update(RESERVED_MEMBERS["access"])
    if config.collectable is not None:
        reserved.update(RESERVED_MEMBERS["collectable"])
    if clash := reserved.intersection(names):
        raise ConfigurationError(
            f"{owner}: field names {sorted(clash)} collide with record "
            "methods",
            details={"fields": sorted(clash)},
        )


def _lookup_hook(
    record_type: type, stage: str, name: str, enabled: frozenset
) -> Callable[[Any], Any] | None:
    if name not in enabled:
        return None
    hook = getattr(record_type, f"{stage}_{name}", None)
    if hook is None:
        message = (
            f"{record_type.__name__} enables {stage} for {name!r} but does "
            f"not define {stage}_{name}(value); values pass through unchanged"
        )
        if settings.STRICT_HOOKS:
            raise ConfigurationError(
                message, details={"field": name, "stage": stage}
            )
        logger.warning(message)
        return None
    if not callable(hook):
        raise ConfigurationError(
            f"{record_type.__name__}.{stage}_{name} is not callable",
            details={"field": name, "stage": stage},
        )
    return hook


def schema_of(record: Any) -> Schema:
    """Schema attached to a record value or record type."""
    record_type = record if isinstance(record, type) else type(record)
    schema = getattr(record_type, "__structura_schema__", None)
    if not isinstance(schema, Schema) or schema.record_type is not record_type:
        raise ConfigurationError(
            f"{record_type.__name__} is not declared with @record",
            details={"record_type": record_type.__name__},
        )
    return schema
