# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FlatState - Path-addressed mutable state for reactive UIs.

A lightweight, zero-dependency library for reading and mutating nested
dicts and lists through key paths, with a single synchronous subscriber
and scoped substates that share data by reference.
"""

__version__ = "0.1.0"

from .event import MutationEvent
from .exceptions import (
    FlatStateError,
    IndexOutOfBoundsError,
    InvalidPathError,
    InvalidRootError,
    InvalidTargetError,
    TypeMismatchError,
)
from .resolver import NOT_FOUND
from .state import FlatState, SubscriberCallback

__all__ = [
    # Core classes
    "FlatState",
    "MutationEvent",
    "SubscriberCallback",
    "NOT_FOUND",
    # Exceptions
    "FlatStateError",
    "InvalidPathError",
    "IndexOutOfBoundsError",
    "TypeMismatchError",
    "InvalidRootError",
    "InvalidTargetError",
]
