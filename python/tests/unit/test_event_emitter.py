"""
Tests for the EventEmitter class.

Tests for the EventEmitter class including:
- Registration and emission
- Removal, including once() listeners
- Subscription lifetime
- Changes to the listener list during emission
"""

import gc

import pytest
from unittest.mock import Mock

from midiwire.utils.event_emitter import EventEmitter


class TestEventEmitterBasics:
    """Test basic EventEmitter functionality."""

    def test_on_as_decorator(self):
        """Test using on() as a decorator returns the function."""
        emitter = EventEmitter()

        @emitter.on('test')
        def callback():
            pass

        assert callback is not None
        assert emitter.listener_count('test') == 1
        assert emitter.has_listener('test', callback)

    def test_emit_passes_args_and_kwargs(self):
        """Test that emit() passes positional and keyword arguments."""
        emitter = EventEmitter()
        callback = Mock()
        emitter.on('message', callback)
        emitter.emit('message', b'\x90\x3c\x64', 1.5, source='test')
        callback.assert_called_once_with(b'\x90\x3c\x64', 1.5, source='test')

    def test_listeners_called_in_registration_order(self):
        """Test that listeners are called in registration order."""
        emitter = EventEmitter()
        order = []
        emitter.on('test', lambda: order.append('first'))
        emitter.on('test', lambda: order.append('second'))
        emitter.emit('test')
        assert order == ['first', 'second']

    def test_emit_no_listeners(self):
        """Test that emit() with no listeners doesn't raise."""
        EventEmitter().emit('nonexistent')


class TestEventEmitterOff:
    """Test EventEmitter off() functionality."""

    def test_off_only_removes_specified_callback(self):
        """Test that off() only removes the specified callback."""
        emitter = EventEmitter()
        first = Mock()
        second = Mock()
        emitter.on('test', first)
        emitter.on('test', second)
        emitter.off('test', first)
        emitter.emit('test')
        first.assert_not_called()
        second.assert_called_once()

    def test_off_unregistered_is_noop(self):
        """Test that removing an unregistered callback does nothing."""
        emitter = EventEmitter()
        emitter.off('test', Mock())
        emitter.on('other', Mock())
        emitter.off('other', Mock())
        assert emitter.listener_count('other') == 1

    def test_off_removes_once_listener(self):
        """Test that off() removes a once() listener."""
        emitter = EventEmitter()
        callback = Mock()
        emitter.once('test', callback)
        assert emitter.has_listener('test', callback)
        emitter.off('test', callback)
        emitter.emit('test')
        callback.assert_not_called()
        assert emitter.listener_count('test') == 0


class TestEventEmitterOnce:
    """Test EventEmitter once() functionality."""

    def test_once_fires_only_once(self):
        """Test that a once() callback fires only once."""
        emitter = EventEmitter()
        callback = Mock()
        emitter.once('test', callback)
        emitter.emit('test', 1)
        emitter.emit('test', 2)
        callback.assert_called_once_with(1)
        assert emitter.listener_count('test') == 0

    def test_once_same_callback_on_two_events(self):
        """Test once() with the same callback on two events."""
        emitter = EventEmitter()
        callback = Mock()
        emitter.once('a', callback)
        emitter.once('b', callback)
        emitter.emit('a')
        emitter.emit('b')
        assert callback.call_count == 2

    def test_once_as_decorator(self):
        """Test using once() as a decorator."""
        emitter = EventEmitter()
        called = []

        @emitter.once('test')
        def callback():
            called.append('called')

        emitter.emit('test')
        emitter.emit('test')
        assert called == ['called']


class TestSubscriptionLifetime:
    """Test that listeners are kept alive by the emitter."""

    def test_lambda_listener_survives_collection(self):
        """Test that a lambda listener survives garbage collection."""
        emitter = EventEmitter()
        received = []
        emitter.on('test', lambda value: received.append(value))
        gc.collect()
        emitter.emit('test', 7)
        assert received == [7]

    def test_bound_method_listener(self):
        """Test registering and removing a bound method."""
        class Sink:
            def __init__(self):
                self.values = []

            def receive(self, value):
                self.values.append(value)

        emitter = EventEmitter()
        sink = Sink()
        emitter.on('test', sink.receive)
        emitter.emit('test', 1)
        emitter.off('test', sink.receive)
        emitter.emit('test', 2)
        assert sink.values == [1]


class TestEmitDuringChanges:
    """Test listener list changes made from inside a callback."""

    def test_removal_during_emit_takes_effect_next_time(self):
        """Test that a removal during emit() takes effect next time."""
        emitter = EventEmitter()
        second = Mock()

        def first():
            emitter.off('test', second)

        emitter.on('test', first)
        emitter.on('test', second)
        emitter.emit('test')
        assert second.call_count == 1
        emitter.emit('test')
        assert second.call_count == 1

    def test_addition_during_emit_takes_effect_next_time(self):
        """Test that an addition during emit() takes effect next time."""
        emitter = EventEmitter()
        late = Mock()
        emitter.once('test', lambda: emitter.on('test', late))
        emitter.emit('test')
        late.assert_not_called()
        emitter.emit('test')
        late.assert_called_once()


class TestEventEmitterClear:
    """Test EventEmitter clear() functionality."""

    def test_clear_specific_event(self):
        """Test clearing callbacks for a specific event."""
        emitter = EventEmitter()
        first = Mock()
        second = Mock()
        emitter.on('event1', first)
        emitter.on('event2', second)
        emitter.clear('event1')
        emitter.emit('event1')
        emitter.emit('event2')
        first.assert_not_called()
        second.assert_called_once()

    def test_clear_all_events(self):
        """Test clearing all callbacks."""
        emitter = EventEmitter()
        emitter.on('event1', Mock())
        emitter.once('event2', Mock())
        emitter.clear()
        assert emitter.listener_count('event1') == 0
        assert emitter.listener_count('event2') == 0
