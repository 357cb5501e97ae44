# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Mutation event delivered to a FlatState subscriber."""

from __future__ import annotations

from typing import Any


class MutationEvent:
    """A committed write, as seen by the subscriber.

    Each event has:
    - evt: 'upd' (set, toggle), 'ins' (append, insert) or 'del' (destroy, pop)
    - path: Tuple path relative to the state that performed the write.
      For 'ins' and 'del' the last key is the affected index.
    - value: The written value, or the removed one for 'del'
    - extra: The caller's extra mapping (empty dict when omitted)
    - base_path: Where the writing state's root sits inside its root state

    Example:
        >>> event = MutationEvent('upd', ('x',), 5)
        >>> event.full_path
        ('x',)
    """

    __slots__ = ('evt', 'path', 'value', 'extra', 'base_path')

    def __init__(
        self,
        evt: str,
        path: tuple,
        value: Any = None,
        extra: dict[str, Any] | None = None,
        base_path: tuple = (),
    ) -> None:
        self.evt = evt
        self.path = tuple(path)
        self.value = value
        self.extra = dict(extra) if extra else {}
        self.base_path = tuple(base_path)

    def __repr__(self) -> str:
        return (
            f"MutationEvent({self.evt!r}, path={list(self.path)!r}, "
            f"value={self.value!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MutationEvent):
            return NotImplemented
        return (
            self.evt == other.evt
            and self.path == other.path
            and self.value == other.value
            and self.extra == other.extra
            and self.base_path == other.base_path
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def full_path(self) -> tuple:
        """Path of the written value from the root state's point of view."""
        return self.base_path + self.path
