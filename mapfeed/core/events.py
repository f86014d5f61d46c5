# mapfeed/core/events.py
"""Explicit publish/subscribe between the controllers and the UI layer.

Everything runs on one event loop, so subscribers are called synchronously
and in connection order.
"""

from typing import Any, Callable, List


Callback = Callable[..., Any]


class Signal:
    """A named event with an ordered list of subscribers."""

    def __init__(self, name: str):
        self.name = name
        self._subscribers: List[Callback] = []

    def connect(self, callback: Callback) -> Callback:
        self._subscribers.append(callback)
        return callback

    def disconnect(self, callback: Callback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def emit(self, *args: Any) -> None:
        for callback in list(self._subscribers):
            callback(*args)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, subscribers={len(self._subscribers)})"
