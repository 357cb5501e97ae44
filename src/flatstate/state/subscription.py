# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Single-slot subscriber notification for FlatState.

A FlatState holds at most one subscriber. Setting a new one replaces the
previous one. The subscriber is called synchronously once a write has
committed and before the writing method returns, so reading the state from
inside the callback shows the new data.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..event import MutationEvent

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[[MutationEvent], Any]


class SubscriptionMixin:
    """Mixin providing the subscriber slot and the notify step.

    Expects the host class to define ``_subscriber``, ``_raise_on_subscriber_error``
    and ``base_path`` (all listed in its ``__slots__``).
    """

    __slots__ = ()

    @property
    def subscriber(self) -> SubscriberCallback | None:
        """The current subscriber, or None."""
        return self._subscriber

    def set_subscriber(self, callback: SubscriberCallback | None) -> None:
        """Install callback as the only subscriber, replacing any previous one.

        Args:
            callback: Called with a MutationEvent after each committed write.
                None removes the current subscriber.

        Raises:
            TypeError: If callback is neither callable nor None.
        """
        if callback is not None and not callable(callback):
            raise TypeError(
                f"subscriber must be callable or None, not {type(callback).__name__}"
            )
        self._subscriber = callback

    def _notify(
        self,
        evt: str,
        path: tuple,
        value: Any,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Deliver a MutationEvent to the subscriber, if any.

        Must only be called after the mutation it describes has committed.
        With raise_on_subscriber_error=False an exception raised by the
        subscriber is logged and dropped; otherwise it propagates.
        """
        callback = self._subscriber
        if callback is None:
            return

        event = MutationEvent(evt, path, value, extra, base_path=self.base_path)
        if self._raise_on_subscriber_error:
            callback(event)
            return

        try:
            callback(event)
        except Exception:
            logger.exception("Subscriber failed on %r", event)
