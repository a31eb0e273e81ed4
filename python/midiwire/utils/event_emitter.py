"""
Event Emitter

Callback-list event emitter used for port subscriptions and state
change notifications.
"""

from typing import Callable, Dict, List, Optional, Tuple
from collections import defaultdict


class EventEmitter:
    """
    Pythonic event emitter using callback lists.

    Callbacks are held by strong reference until removed with off() or
    clear(), so a subscription lives exactly as long as its owner keeps it.

    Example:
        emitter = EventEmitter()

        # Register callback
        emitter.on('message', handle_message)

        # Or use as decorator
        @emitter.on('updated')
        def handle_update(source):
            print(source)

        # Emit event
        emitter.emit('message', data, timestamp)
    """

    def __init__(self):
        self._callbacks: Dict[str, List[Callable]] = defaultdict(list)
        # Maps once() callbacks to the wrappers actually registered
        self._once_wrappers: Dict[Tuple[str, int], Callable] = {}

    def on(self, event_type: str, callback: Optional[Callable] = None) -> Callable:
        """
        Register an event callback.

        Can be used as a function call or decorator:
            emitter.on('message', my_function)

            @emitter.on('message')
            def my_function(data, timestamp):
                pass

        Args:
            event_type: The type of event to listen for
            callback: Optional callback function

        Returns:
            The callback function (useful for decorator pattern)
        """
        def decorator(func: Callable) -> Callable:
            self._callbacks[event_type].append(func)
            return func

        if callback is None:
            return decorator
        return decorator(callback)

    def once(self, event_type: str, callback: Optional[Callable] = None) -> Callable:
        """
        Register a callback that only fires once.

        Args:
            event_type: The type of event to listen for
            callback: Optional callback function

        Returns:
            The callback function
        """
        def decorator(func: Callable) -> Callable:
            def wrapper(*args, **kwargs):
                self.off(event_type, func)
                return func(*args, **kwargs)

            self._once_wrappers[(event_type, id(func))] = wrapper
            self._callbacks[event_type].append(wrapper)
            return func

        if callback is None:
            return decorator
        return decorator(callback)

    def off(self, event_type: str, callback: Callable) -> None:
        """
        Unregister an event callback.

        Removing a callback that is not registered does nothing.

        Args:
            event_type: The type of event
            callback: The callback function to remove
        """
        callbacks = self._callbacks.get(event_type)
        if not callbacks:
            return
        wrapper = self._once_wrappers.get((event_type, id(callback)))
        for registered in (callback, wrapper):
            if registered is not None and registered in callbacks:
                callbacks.remove(registered)
                if registered is wrapper:
                    del self._once_wrappers[(event_type, id(callback))]
                return

    def emit(self, event_type: str, *args, **kwargs) -> None:
        """
        Emit an event, calling all registered callbacks.

        Callbacks registered or removed during emission take effect
        from the next emit.

        Args:
            event_type: The type of event to emit
            *args: Positional arguments to pass to callbacks
            **kwargs: Keyword arguments to pass to callbacks
        """
        for callback in list(self._callbacks.get(event_type, [])):
            callback(*args, **kwargs)

    def clear(self, event_type: Optional[str] = None) -> None:
        """
        Clear all callbacks for an event type, or all callbacks if no type specified.

        Args:
            event_type: Optional event type to clear. If None, clears all.
        """
        if event_type:
            self._callbacks.pop(event_type, None)
        else:
            self._callbacks.clear()
            self._once_wrappers.clear()

    def listener_count(self, event_type: str) -> int:
        """
        Get the number of listeners for an event type.

        Args:
            event_type: The event type to check

        Returns:
            Number of registered listeners
        """
        return len(self._callbacks.get(event_type, []))

    def has_listener(self, event_type: str, callback: Callable) -> bool:
        """Check whether a callback is registered for an event type."""
        callbacks = self._callbacks.get(event_type, [])
        return callback in callbacks or self._once_wrappers.get((event_type, id(callback))) in callbacks
