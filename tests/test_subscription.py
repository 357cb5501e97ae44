# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the FlatState subscriber slot and mutation events."""

import copy
import logging

import pytest

from flatstate import (
    FlatState,
    FlatStateError,
    IndexOutOfBoundsError,
    InvalidPathError,
    MutationEvent,
    TypeMismatchError,
)


@pytest.fixture
def events():
    return []


@pytest.fixture
def state(events):
    state = FlatState({'items': ['p', 'q', 'r']})
    state.set_subscriber(events.append)
    return state


class TestMutationEvent:
    """Tests for MutationEvent."""

    def test_defaults(self):
        event = MutationEvent('upd', ['x'], 5)
        assert event.path == ('x',)
        assert event.extra == {}
        assert event.base_path == ()
        assert event.full_path == ('x',)

    def test_full_path(self):
        event = MutationEvent('upd', ('c',), 1, base_path=('a', 'b'))
        assert event.full_path == ('a', 'b', 'c')

    def test_equality(self):
        assert MutationEvent('upd', ('x',), 1) == MutationEvent('upd', ['x'], 1)
        assert MutationEvent('upd', ('x',), 1) != MutationEvent('ins', ('x',), 1)

    def test_repr(self):
        assert repr(MutationEvent('upd', ('x',), 5)) == "MutationEvent('upd', path=['x'], value=5)"


class TestSubscriberSlot:
    """Tests for set_subscriber()."""

    def test_no_subscriber_by_default(self):
        assert FlatState().subscriber is None

    def test_set_notifies_once(self, state, events):
        """Test set(['x'], 5) calls the subscriber once with path and value."""
        state.set(['x'], 5)
        assert events == [MutationEvent('upd', ('x',), 5)]

    def test_extra_is_delivered(self, state, events):
        state.set(['x'], 5, {'source': 'input'})
        assert events[0].extra == {'source': 'input'}

    def test_new_subscriber_replaces_old(self, state, events):
        others = []
        state.set_subscriber(others.append)
        state.set(['x'], 1)
        assert events == []
        assert len(others) == 1

    def test_clear_subscriber(self, state, events):
        state.set_subscriber(None)
        state.set(['x'], 1)
        assert events == []

    def test_non_callable_raises(self, state):
        with pytest.raises(TypeError, match="must be callable"):
            state.set_subscriber('not a function')

    def test_subscriber_sees_committed_state(self):
        """Test get() inside the callback observes the new value."""
        state = FlatState()
        seen = []
        state.set_subscriber(lambda event: seen.append(state.get(['x'])))
        state.set(['x'], 5)
        assert seen == [5]

    def test_reads_do_not_notify(self, state, events):
        state.get(['items'])
        state.size(['items'])
        state.has(['items'])
        list(state.walk())
        assert events == []


class TestEventsPerOperation:
    """Tests for the event each write emits."""

    def test_append(self, state, events):
        state.append(['items'], 's')
        assert events == [MutationEvent('ins', ('items', 3), 's')]

    def test_append_initialization_emits_single_event(self, events):
        """Test the implicit empty-list initialization is not notified separately."""
        state = FlatState()
        state.set_subscriber(events.append)
        state.append(['tags'], 'a')
        assert events == [MutationEvent('ins', ('tags', 0), 'a')]

    def test_insert_reports_normalized_position(self, state, events):
        state.insert(['items'], -1, 'v')
        assert events == [MutationEvent('ins', ('items', 2), 'v')]

    def test_destroy_reports_removed_value(self, state, events):
        state.destroy(['items'], -1)
        assert events == [MutationEvent('del', ('items', 2), 'r')]

    def test_pop(self, state, events):
        state.pop(['items'])
        assert events == [MutationEvent('del', ('items', 2), 'r')]

    def test_pop_nothing_does_not_notify(self, events):
        state = FlatState({'items': []})
        state.set_subscriber(events.append)
        state.pop(['items'])
        state.pop(['missing'])
        assert events == []

    def test_toggle(self, state, events):
        state.toggle(['open'], {'source': 'checkbox'})
        assert events == [MutationEvent('upd', ('open',), True, {'source': 'checkbox'})]


class TestFailedWritesDoNotNotify:
    """Tests that a failing write never reaches the subscriber or the data."""

    def test_empty_path(self, state, events):
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(InvalidPathError):
            state.set([], 1)
        assert events == []
        assert state.snapshot() == before

    def test_negative_index(self, state, events):
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(IndexOutOfBoundsError):
            state.set(['items', -10], 1)
        assert events == []
        assert state.snapshot() == before

    @pytest.mark.parametrize('path', [
        ['a', 'b', -1],
        ['a', 0, 'b', -2],
        ['items', 5, 'k', -1],
        ['items', 0, 'k'],
        ['items', 'first', 'k'],
        ['new', ['unhashable'], 'k'],
    ])
    def test_multi_level_failure_leaves_snapshot_unchanged(self, state, events, path):
        """Test a write failing deep in the path creates no intermediates."""
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(FlatStateError):
            state.set(path, 'x')
        assert events == []
        assert state.snapshot() == before

    def test_failed_append_leaves_snapshot_unchanged(self, state, events):
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(IndexOutOfBoundsError):
            state.append(['a', 'b', -1, 'c'], 1)
        assert events == []
        assert state.snapshot() == before

    def test_append_type_mismatch(self, state, events):
        state.set_subscriber(None)
        state.set(['name'], 'abc')
        state.set_subscriber(events.append)
        with pytest.raises(TypeMismatchError):
            state.append(['name'], 'd')
        assert events == []
        assert state.get(['name']) == 'abc'

    def test_insert_missing(self, state, events):
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(TypeMismatchError):
            state.insert(['missing'], 0, 1)
        assert events == []
        assert state.snapshot() == before

    def test_destroy_out_of_range(self, state, events):
        before = copy.deepcopy(state.snapshot())
        with pytest.raises(IndexOutOfBoundsError):
            state.destroy(['items'], 3)
        assert events == []
        assert state.snapshot() == before


class TestSubscriberErrors:
    """Tests for exceptions raised by the subscriber."""

    @staticmethod
    def _failing(event):
        raise RuntimeError("render failed")

    def test_error_propagates_by_default(self):
        state = FlatState()
        state.set_subscriber(self._failing)
        with pytest.raises(RuntimeError, match="render failed"):
            state.set(['x'], 1)
        # the write committed before the subscriber ran
        assert state.get(['x']) == 1

    def test_error_logged_in_permissive_mode(self, caplog):
        state = FlatState(raise_on_subscriber_error=False)
        state.set_subscriber(self._failing)
        with caplog.at_level(logging.ERROR, logger='flatstate'):
            state.set(['x'], 1)
        assert state.get(['x']) == 1
        assert 'Subscriber failed' in caplog.text
        assert 'render failed' in caplog.text
