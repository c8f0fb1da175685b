# Copyright (c) 2025, Structura contributors
#
# SPDX-License-Identifier: Apache-2.0

from ._sentinel import (
    Halt,
    HaltType,
    MaybeUndefined,
    SingletonType,
    T,
    Undefined,
    UndefinedType,
    Unset,
    UnsetType,
)
from .outcome import Err, Ok, Outcome, is_outcome

__all__ = (
    # Sentinel types
    "Halt",
    "Undefined",
    "Unset",
    "MaybeUndefined",
    "SingletonType",
    "HaltType",
    "UndefinedType",
    "UnsetType",
    "T",
    # Outcomes
    "Ok",
    "Err",
    "Outcome",
    "is_outcome",
)
