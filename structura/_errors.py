# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "StructuraError",
    "ConfigurationError",
    "PipelineFailure",
    "UnknownFieldError",
    "NotFoundError",
    "TypeMismatchError",
)


class StructuraError(Exception):
    default_message: ClassVar[str] = "Structura error"
    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__ if hasattr(self, "__cause__") else None


class ConfigurationError(StructuraError):
    """Record declaration is inconsistent; raised while decorating."""

    default_message = "Invalid record configuration"
    __slots__ = ()


class PipelineFailure(StructuraError):
    """Coercion or validation rejected a value."""

    default_message = "Value rejected"
    __slots__ = ()

    @classmethod
    def from_stage(
        cls,
        field: str,
        stage: str,
        value: Any,
        reason: str,
        *,
        cause: Exception | None = None,
    ):
        details = {
            "field": field,
            "stage": stage,
            "value": value,
            "type": type(value).__name__,
        }
        return cls(reason, details=details, cause=cause)


class UnknownFieldError(StructuraError, KeyError):
    """Field is not declared on the record type."""

    default_message = "Unknown field"
    __slots__ = ()

    def __init__(self, field: str, record_type: type | None = None):
        owner = record_type.__name__ if record_type else "record"
        super().__init__(
            f"{owner} has no field {field!r}",
            details={"field": field, "record_type": owner},
        )


class NotFoundError(UnknownFieldError):
    """Outcome form of an unknown field lookup."""

    default_message = "Not found"
    __slots__ = ()


class TypeMismatchError(StructuraError, TypeError):
    """Element is incompatible with the container kind being collected into."""

    default_message = "Element does not fit the collection target"
    __slots__ = ()

    @classmethod
    def from_element(
        cls, field: str, kind: str, element: Any, expected: str
    ):
        return cls(
            f"cannot collect {element!r} into {kind} field {field!r}: "
            f"expected {expected}",
            details={
                "field": field,
                "kind": kind,
                "element": element,
                "expected": expected,
            },
        )
