# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path resolution over nested dict/list containers.

A path is a list or tuple of keys. An ``int`` key (never a ``bool``) is a
sequence index; any other key addresses a mapping.

Reads are tolerant: anything that cannot be reached resolves to
``NOT_FOUND``. Writes are strict: missing intermediates are created, typed
by the kind of the *next* key, and structural problems raise.

Example:
    >>> root = {}
    >>> container, key = resolve_for_write(root, ('a', 0, 'b'))
    >>> assign(container, key, 'x')
    >>> root
    {'a': [{'b': 'x'}]}
    >>> resolve_for_read(root, ('a', -1, 'b'))
    'x'
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, MutableMapping, MutableSequence, Sequence
from typing import Any

from .exceptions import IndexOutOfBoundsError, InvalidPathError, TypeMismatchError

logger = logging.getLogger(__name__)

Path = Sequence[Hashable]


class _NotFound:
    """Marker for "no value here", distinct from a stored None."""

    __slots__ = ()
    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NOT_FOUND'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'NOT_FOUND'


NOT_FOUND = _NotFound()


# ==================== Kind helpers ====================

def is_index(key: Any) -> bool:
    """True if key addresses a sequence position."""
    return isinstance(key, int) and not isinstance(key, bool)


def is_mapping(value: Any) -> bool:
    return isinstance(value, MutableMapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, MutableSequence) and not isinstance(value, (str, bytes, bytearray))


def is_container(value: Any) -> bool:
    return is_mapping(value) or is_sequence(value)


def normalize_index(index: int, length: int) -> int:
    """Map a negative index onto ``length + index``; non-negatives pass through."""
    if index < 0:
        return length + index
    return index


def validate_path(path: Any, *, allow_empty: bool = False) -> tuple:
    """Return path as a tuple, or raise InvalidPathError.

    Args:
        path: Candidate path. Must be a list or tuple of hashable keys.
        allow_empty: Accept a zero-length path (reads only).

    Raises:
        InvalidPathError: If path is not a list/tuple, is empty when
            allow_empty is False, or holds an unhashable key.
    """
    if not isinstance(path, (list, tuple)):
        raise InvalidPathError(
            f"path must be a list or tuple of keys, not {type(path).__name__}"
        )
    if not path and not allow_empty:
        raise InvalidPathError("path must contain at least one key")
    for position, key in enumerate(path):
        try:
            hash(key)
        except TypeError:
            raise InvalidPathError(
                f"Key {key!r} at position {position} of {list(path)!r} is not hashable"
            ) from None
    return tuple(path)


# ==================== Read ====================

def locate(root: Any, path: Path) -> tuple[Any, tuple]:
    """Return (value, keys) for path, with negative indices made concrete.

    Value is NOT_FOUND when path cannot be reached; keys is then the
    reachable prefix.
    """
    current = root
    keys = []
    for key in path:
        if is_sequence(current):
            if not is_index(key):
                return NOT_FOUND, tuple(keys)
            index = normalize_index(key, len(current))
            if index < 0 or index >= len(current):
                return NOT_FOUND, tuple(keys)
            current = current[index]
            keys.append(index)
        elif is_mapping(current):
            if is_index(key) or key not in current:
                return NOT_FOUND, tuple(keys)
            current = current[key]
            keys.append(key)
        else:
            return NOT_FOUND, tuple(keys)
    return current, tuple(keys)


def resolve_for_read(root: Any, path: Path) -> Any:
    """Return the value at path, or NOT_FOUND.

    Never raises for structural reasons: a missing key, a primitive in the
    middle of the path, a key of the wrong kind for its container, or an
    out-of-range index all yield NOT_FOUND. An empty path returns root.
    """
    return locate(root, path)[0]


# ==================== Write ====================

def _check_key(container: Any, key: Any, path: tuple, position: int) -> Any:
    """Validate key against container kind, returning the normalized key."""
    if is_sequence(container):
        if not is_index(key):
            raise TypeMismatchError(
                f"Key {key!r} at position {position} of {list(path)!r} "
                f"addresses a sequence and must be an int"
            )
        index = normalize_index(key, len(container))
        if index < 0:
            raise IndexOutOfBoundsError(
                f"Index {key} at position {position} of {list(path)!r} "
                f"is out of range for a sequence of length {len(container)}"
            )
        return index
    if is_mapping(container):
        if is_index(key):
            raise TypeMismatchError(
                f"Key {key!r} at position {position} of {list(path)!r} "
                f"addresses a mapping and cannot be an int"
            )
        return key
    raise TypeMismatchError(
        f"Cannot descend into {type(container).__name__} "
        f"at position {position} of {list(path)!r}"
    )


def _child(container: Any, key: Any) -> Any:
    if is_sequence(container):
        return container[key] if key < len(container) else None
    return container.get(key)


def assign(container: Any, key: Any, value: Any) -> None:
    """Store value under an already normalized key.

    An index equal to the sequence length appends; an index beyond it pads
    the gap with None.
    """
    if is_sequence(container):
        if key < len(container):
            container[key] = value
            return
        container.extend([None] * (key - len(container)))
        container.append(value)
    else:
        container[key] = value


def _new_container(next_key: Any) -> Any:
    return [] if is_index(next_key) else {}


def resolve_for_write(root: Any, path: Path) -> tuple[Any, Any]:
    """Walk path for writing, creating missing intermediates.

    The whole path is checked before anything is created: a write that
    raises leaves the tree untouched. Missing intermediates are built as a
    detached chain and attached with a single assignment.

    Returns:
        Tuple of (container, final_key) with final_key normalized and
        checked against the container kind.

    Raises:
        InvalidPathError: If path is empty or holds an unhashable key.
        IndexOutOfBoundsError: If a negative index is still negative
            after normalization.
        TypeMismatchError: If a key does not fit its container, or an
            intermediate holds a primitive.
    """
    path = validate_path(path)
    current = root
    last = len(path) - 1

    for i, key in enumerate(path[:-1]):
        key = _check_key(current, key, path, i)
        child = _child(current, key)

        if child is None:
            return _attach_chain(current, key, path, i)
        if not is_container(child):
            raise TypeMismatchError(
                f"{list(path[:i + 1])!r} holds a {type(child).__name__}, "
                f"cannot descend into it"
            )
        current = child

    return current, _check_key(current, path[last], path, last)


def _attach_chain(container: Any, key: Any, path: tuple, start: int) -> tuple[Any, Any]:
    """Create the missing containers below path[start] and hang them on container."""
    # every container from here on is new, so only a negative index can fail
    for position in range(start + 1, len(path)):
        next_key = path[position]
        if is_index(next_key) and next_key < 0:
            raise IndexOutOfBoundsError(
                f"Index {next_key} at position {position} of {list(path)!r} "
                f"is out of range for a sequence of length 0"
            )

    top = current = _new_container(path[start + 1])
    for position in range(start + 1, len(path) - 1):
        child = _new_container(path[position + 1])
        assign(current, path[position], child)
        current = child

    assign(container, key, top)
    logger.debug("Created %r below %r", list(path[start + 1:-1]), list(path[:start + 1]))
    return current, path[-1]
