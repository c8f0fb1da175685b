# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._errors import ConfigurationError

__all__ = ("StructuraConfig", "StructuraSettings", "settings")


class StructuraConfig(BaseModel):
    """Capability options accepted by the ``record`` decorator.

    ``coercion`` and ``validation`` take either a flag for every field or an
    explicit list of field names. ``collectable`` names the field that
    receives collected elements, ``False``/``None`` disables it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    access: StrictBool = True
    coercion: StrictBool | tuple[str, ...] = False
    validation: StrictBool | tuple[str, ...] = False
    enumerable: StrictBool = False
    collectable: str | None = None
    generator: dict[str, Any] = Field(default_factory=dict)

    @field_validator("collectable", mode="before")
    @classmethod
    def _validate_collectable(cls, v: Any) -> Any:
        if v is False:
            return None
        if v is True:
            raise ValueError(
                "collectable must be False or the name of a field"
            )
        return v

    @field_validator("generator", mode="before")
    @classmethod
    def _validate_generator(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, (list, tuple)):
            # keyword-list style: [("foo", desc), ("bar", desc)]
            return dict(v)
        return v

    @classmethod
    def from_options(cls, **options: Any) -> "StructuraConfig":
        """Parse decorator options, failing with ``ConfigurationError``."""
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid record options: {e.errors(include_url=False)}",
                details={"options": sorted(options)},
                cause=e,
            ) from e

    def selected(self, option: str, fields: tuple[str, ...]) -> frozenset:
        """Field names a coercion/validation option applies to."""
        value = getattr(self, option)
        if value is True:
            return frozenset(fields)
        if value is False:
            return frozenset()
        return frozenset(value)


class StructuraSettings(BaseSettings, frozen=True):
    """Process-wide settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="STRUCTURA_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: str = Field(
        default="WARNING", description="Level of the 'structura' logger"
    )
    STRICT_HOOKS: bool = Field(
        default=False,
        description=(
            "Treat a missing coerce_/validate_ hook as a configuration "
            "error instead of a warning"
        ),
    )

    # Class variable to store the singleton instance
    _instance: ClassVar[Any] = None


# Create a singleton instance
settings = StructuraSettings()
# Store the instance in the class variable for singleton pattern
StructuraSettings._instance = settings
