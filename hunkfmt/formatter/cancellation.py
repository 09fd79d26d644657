"""Cooperative cancellation for formatting requests."""

from typing import Callable

CancellationCallback = Callable[[], None]


class CancellationToken:
    """Signals that a formatting request should stop.

    Callbacks registered with on_cancellation_requested run once, when
    cancel() is first called, or immediately if the token is already
    cancelled.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[CancellationCallback] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancellation_requested(self, callback: CancellationCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        if self._cancelled:
            callback()
            return lambda: None

        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister
