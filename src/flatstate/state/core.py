# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FlatState - path-addressed mutable state over plain dicts and lists.

This module provides the FlatState class. It wraps a root container and lets
callers read and mutate nested data through key paths instead of manual
deep-nested object manipulation, notifying a single subscriber after every
committed write.

Key Features:
    - **Key paths**: Lists or tuples mixing mapping keys and list indices
    - **Autocreate**: Missing intermediates created as list or dict,
      depending on the kind of the next key
    - **Negative indices**: ``-1`` is the last element, as in Python
    - **Tolerant reads**: Unreachable values read as NOT_FOUND
    - **Strict writes**: Structural problems raise FlatStateError subclasses
    - **Substates**: Scoped views sharing the same data by reference

Example:
    Basic usage::

        state = FlatState()
        state.set(['form', 'name'], 'Alice')
        state.append(['form', 'tags'], 'admin')

        print(state.get(['form', 'tags', -1]))  # 'admin'
        print(state.snapshot())  # {'form': {'name': 'Alice', 'tags': ['admin']}}

    With a subscriber and a substate::

        state.set_subscriber(lambda event: render(state.snapshot()))
        form = state.sub_state(['form'])
        form.set(['name'], 'Bob')  # render() runs before set() returns
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ..exceptions import (
    IndexOutOfBoundsError,
    InvalidRootError,
    InvalidTargetError,
    TypeMismatchError,
)
from ..resolver import (
    NOT_FOUND,
    Path,
    assign,
    is_container,
    is_index,
    is_mapping,
    is_sequence,
    locate,
    normalize_index,
    resolve_for_read,
    resolve_for_write,
    validate_path,
)
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)


class FlatState(SubscriptionMixin):
    """A path-addressed container with a single reactive subscriber.

    FlatState provides:
    - get(path) / size(path): Tolerant reads
    - set / append / insert / destroy / pop / toggle: Writes that notify
    - set_subscriber(callback): The single subscriber slot
    - sub_state(path): A FlatState rooted inside this one, sharing data

    Attributes:
        parent: The FlatState this one was derived from via sub_state(),
            or None for a root state.
        base_path: Path of this state's root inside the root state.

    Example:
        >>> state = FlatState()
        >>> state.set(['a', 0, 'b'], 'x')
        >>> state.snapshot()
        {'a': [{'b': 'x'}]}
    """

    __slots__ = (
        '_root', '_subscriber', '_raise_on_subscriber_error',
        'parent', 'base_path',
    )

    def __init__(
        self,
        root: Any = None,
        *,
        raise_on_subscriber_error: bool = True,
    ) -> None:
        """Initialize a FlatState.

        Args:
            root: The root container, a dict or list (or any mutable mapping
                or sequence other than str/bytes). Used by reference, never
                copied. Defaults to a new empty dict.
            raise_on_subscriber_error: If True (default), an exception raised
                by the subscriber propagates to the caller of the write that
                triggered it (the write itself has already committed).
                If False, the exception is logged and dropped.

        Raises:
            InvalidRootError: If root is not a container.

        Example:
            >>> FlatState({'items': []})
            >>> FlatState([1, 2, 3])
            >>> FlatState(raise_on_subscriber_error=False)  # permissive mode
        """
        if root is None:
            root = {}
        elif not is_container(root):
            raise InvalidRootError(
                f"root must be a mapping or a sequence, not {type(root).__name__}"
            )
        self._root = root
        self._subscriber = None
        self._raise_on_subscriber_error = raise_on_subscriber_error
        self.parent: FlatState | None = None
        self.base_path: tuple = ()

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        kind = type(self._root).__name__
        if self.base_path:
            return f"FlatState({kind}({len(self._root)}), base_path={list(self.base_path)!r})"
        return f"FlatState({kind}({len(self._root)}))"

    def __len__(self) -> int:
        """Return the number of direct children of the root container."""
        return len(self._root)

    def __contains__(self, path: Path) -> bool:
        """Check whether a value exists at path."""
        return self.has(path)

    # ==================== Reads ====================

    def get(self, path: Path, default: Any = NOT_FOUND) -> Any:
        """Get the value at the given path.

        Missing intermediates, primitives in the middle of the path and
        out-of-range indices all read as missing.

        Args:
            path: List or tuple of keys. An empty path returns the root.
            default: Returned when nothing is found. Defaults to NOT_FOUND.

        Returns:
            The stored value, or default.

        Raises:
            InvalidPathError: If path is not a list or tuple, or holds an
                unhashable key.

        Example:
            >>> state.get(['items', -1])  # last item
            >>> state.get(['missing', 'deep'], None)  # None
        """
        path = validate_path(path, allow_empty=True)
        value = resolve_for_read(self._root, path)
        if value is NOT_FOUND:
            return default
        return value

    def has(self, path: Path) -> bool:
        """True if a value (possibly None) is stored at path."""
        return self.get(path) is not NOT_FOUND

    def size(self, path: Path) -> int:
        """Return the length of the sequence at path, or 0.

        Never raises for missing paths or non-sequence values.
        """
        value = self.get(path)
        if is_sequence(value):
            return len(value)
        return 0

    def snapshot(self) -> Any:
        """Return the live root container (not a copy)."""
        return self._root

    def walk(self, path: Path = ()) -> Iterator[tuple[tuple, Any]]:
        """Yield (path, value) for every leaf below path, depth first.

        Leaves are primitives and empty containers. Mappings are visited in
        insertion order, sequences by index. Paths are relative to this
        state's root. A missing path yields nothing.

        Example:
            >>> for path, value in state.walk():
            ...     print(path, value)
        """
        start = validate_path(path, allow_empty=True)
        value = resolve_for_read(self._root, start)
        if value is NOT_FOUND:
            return

        def _walk_gen(value: Any, prefix: tuple) -> Iterator[tuple[tuple, Any]]:
            if is_mapping(value) and value:
                for key, child in value.items():
                    yield from _walk_gen(child, prefix + (key,))
            elif is_sequence(value) and value:
                for index, child in enumerate(value):
                    yield from _walk_gen(child, prefix + (index,))
            else:
                yield prefix, value

        yield from _walk_gen(value, start)

    # ==================== Writes ====================

    def set(self, path: Path, value: Any, extra: dict[str, Any] | None = None) -> None:
        """Set value at path, creating intermediate containers as needed.

        A missing intermediate becomes a list when the next key is an int
        and a dict otherwise.

        Args:
            path: Non-empty list or tuple of keys.
            value: The value to store.
            extra: Optional mapping passed through to the subscriber.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            IndexOutOfBoundsError: If a negative index stays negative after
                adding the sequence length.
            TypeMismatchError: If a key does not fit its container or an
                intermediate holds a primitive.

        Example:
            >>> state.set(['users', 0, 'name'], 'Alice')
            >>> state.set(['users', -1, 'active'], True, {'source': 'checkbox'})
        """
        path = validate_path(path)
        container, key = resolve_for_write(self._root, path)
        assign(container, key, value)
        self._notify('upd', path, value, extra)

    def append(self, path: Path, value: Any, extra: dict[str, Any] | None = None) -> None:
        """Append value to the sequence at path.

        A missing (or None) target is first initialized to an empty list.
        The initialization is part of the same write and produces no event
        of its own: the subscriber sees a single 'ins' event.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            TypeMismatchError: If the target exists and is not a sequence.
        """
        path = validate_path(path)
        sequence = resolve_for_read(self._root, path)

        if sequence is NOT_FOUND or sequence is None:
            container, key = resolve_for_write(self._root, path)
            sequence = []
            assign(container, key, sequence)
        elif not is_sequence(sequence):
            raise TypeMismatchError(
                f"Cannot append to {list(path)!r}: holds a {type(sequence).__name__}"
            )

        sequence.append(value)
        self._notify('ins', path + (len(sequence) - 1,), value, extra)

    def insert(
        self,
        path: Path,
        index: int,
        value: Any,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Insert value into the sequence at path, before position index.

        A negative index counts from the end (-1 inserts before the last
        element). The resulting position is clamped into [0, len].

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            TypeMismatchError: If no sequence exists at path, or index is
                not an int.
        """
        path = validate_path(path)
        sequence = self._require_sequence(path, 'insert into')
        if not is_index(index):
            raise TypeMismatchError(f"index must be an int, not {type(index).__name__}")

        position = max(0, min(normalize_index(index, len(sequence)), len(sequence)))
        sequence.insert(position, value)
        self._notify('ins', path + (position,), value, extra)

    def destroy(self, path: Path, index: int, extra: dict[str, Any] | None = None) -> None:
        """Remove the element at index from the sequence at path.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            TypeMismatchError: If no sequence exists at path, or index is
                not an int.
            IndexOutOfBoundsError: If index is outside the sequence.
        """
        path = validate_path(path)
        sequence = self._require_sequence(path, 'destroy in')
        if not is_index(index):
            raise TypeMismatchError(f"index must be an int, not {type(index).__name__}")

        position = normalize_index(index, len(sequence))
        if position < 0 or position >= len(sequence):
            raise IndexOutOfBoundsError(
                f"Index {index} out of range for {list(path)!r} (length {len(sequence)})"
            )
        removed = sequence.pop(position)
        self._notify('del', path + (position,), removed, extra)

    def pop(self, path: Path, extra: dict[str, Any] | None = None) -> Any:
        """Remove and return the last element of the sequence at path.

        Returns NOT_FOUND, without raising, when the path is missing, does
        not hold a sequence, or the sequence is empty. Only an actual
        removal notifies the subscriber.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
        """
        path = validate_path(path)
        sequence = resolve_for_read(self._root, path)
        if not is_sequence(sequence) or not sequence:
            return NOT_FOUND

        removed = sequence.pop()
        self._notify('del', path + (len(sequence),), removed, extra)
        return removed

    def toggle(self, path: Path, extra: dict[str, Any] | None = None) -> bool:
        """Flip the truth value stored at path and return the new value.

        A missing value counts as false, so the first toggle stores True.
        The write follows set(): missing intermediates are created, and an
        index past the end of a list pads the gap with None.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            IndexOutOfBoundsError: If a negative index stays negative after
                adding the sequence length.
            TypeMismatchError: If a key does not fit its container or an
                intermediate holds a primitive.
        """
        path = validate_path(path)
        value = not self.get(path)
        self.set(path, value, extra)
        return value

    def _require_sequence(self, path: tuple, action: str) -> Any:
        sequence = resolve_for_read(self._root, path)
        if not is_sequence(sequence):
            found = 'nothing' if sequence is NOT_FOUND else f"a {type(sequence).__name__}"
            raise TypeMismatchError(
                f"Cannot {action} {list(path)!r}: expected a sequence, found {found}"
            )
        return sequence

    # ==================== Substates ====================

    def sub_state(self, path: Path) -> FlatState:
        """Create a FlatState rooted at the container found at path.

        The new state shares the container by reference: writes through
        either state are visible through both. It starts with this state's
        current subscriber; later calls to set_subscriber() on either side
        do not affect the other. If this state later replaces (rather than
        mutates) the container, the substate keeps the old one. Negative
        indices in path are recorded in base_path as concrete positions.

        Args:
            path: Non-empty list or tuple of keys, relative to this state.

        Returns:
            A new FlatState whose paths are relative to the container.

        Raises:
            InvalidPathError: If path is empty or not a list/tuple.
            InvalidTargetError: If path is missing or holds no container.

        Example:
            >>> form = state.sub_state(['form'])
            >>> form.set(['name'], 'Alice')
            >>> state.get(['form', 'name'])
            'Alice'
        """
        path = validate_path(path)
        target, keys = locate(self._root, path)
        if not is_container(target):
            found = 'nothing' if target is NOT_FOUND else f"a {type(target).__name__}"
            raise InvalidTargetError(
                f"sub_state requires a container at {list(path)!r}, found {found}"
            )

        child = FlatState(
            target, raise_on_subscriber_error=self._raise_on_subscriber_error
        )
        child._subscriber = self._subscriber
        child.parent = self
        child.base_path = self.base_path + keys
        logger.debug("Created substate at %r", list(child.base_path))
        return child

    # ==================== Navigation ====================

    @property
    def root(self) -> FlatState:
        """Get the root FlatState of this substate chain."""
        if self.parent is None:
            return self
        return self.parent.root

    @property
    def raise_on_subscriber_error(self) -> bool:
        return self._raise_on_subscriber_error
