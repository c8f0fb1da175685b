# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    ConfigurationError,
    NotFoundError,
    PipelineFailure,
    StructuraError,
    TypeMismatchError,
    UnknownFieldError,
)
from .collectable import collect
from .config import StructuraSettings, settings
from .enumerable import EnumerableView
from .generator import Gen
from .record import record
from .schema import ContainerKind, Schema, schema_of
from .types import Err, Halt, Ok, Outcome, Undefined, Unset
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(settings.LOG_LEVEL.upper())

__all__ = (
    "__version__",
    "ConfigurationError",
    "ContainerKind",
    "EnumerableView",
    "Err",
    "Gen",
    "Halt",
    "NotFoundError",
    "Ok",
    "Outcome",
    "PipelineFailure",
    "Schema",
    "StructuraError",
    "StructuraSettings",
    "TypeMismatchError",
    "Undefined",
    "UnknownFieldError",
    "Unset",
    "collect",
    "logger",
    "record",
    "schema_of",
    "settings",
)
