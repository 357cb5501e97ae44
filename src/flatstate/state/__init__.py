# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FlatState package - path-addressed mutable state.

The package is organized into:
- core: Main FlatState class with reads, writes and substates
- subscription: Single-slot subscriber notification

Example:
    >>> from flatstate import FlatState
    >>> state = FlatState()
    >>> state.set(['config', 'name'], 'MyApp')
    >>> state.get(['config', 'name'])
    'MyApp'
"""

from .core import FlatState
from .subscription import SubscriberCallback, SubscriptionMixin

__all__ = ["FlatState", "SubscriberCallback", "SubscriptionMixin"]
