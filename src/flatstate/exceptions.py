# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FlatState exceptions."""

from __future__ import annotations


class FlatStateError(Exception):
    """Base exception for FlatState errors."""

    pass


class InvalidPathError(FlatStateError, ValueError):
    """Raised when a path is not a list/tuple, or is empty where a key is required."""

    pass


class IndexOutOfBoundsError(FlatStateError, IndexError):
    """Raised when a sequence index falls outside the range a write accepts."""

    pass


class TypeMismatchError(FlatStateError, TypeError):
    """Raised when a write meets a value of the wrong kind along its path."""

    pass


class InvalidRootError(FlatStateError, TypeError):
    """Raised when a FlatState is constructed on something that is not a container."""

    pass


class InvalidTargetError(FlatStateError, TypeError):
    """Raised when sub_state() targets a missing or non-container value."""

    pass
