"""Marshalling of state mutations onto the UI-facing event loop."""

import asyncio
import threading
from collections.abc import Callable
from typing import Any


class UiDispatcher:
    """Runs callbacks on the single event loop that owns observable state.

    Background work may finish on any thread; every mutation of observable
    state is routed through post() so observers only ever see changes on the
    loop's own thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._thread_id: int | None = None if loop is None else threading.get_ident()

    @classmethod
    def for_running_loop(cls) -> "UiDispatcher":
        """Create a dispatcher bound to the loop running the caller."""
        return cls(asyncio.get_running_loop())

    @property
    def is_bound(self) -> bool:
        return self._loop is not None

    def bind_running_loop(self) -> None:
        """Bind to the running loop if not bound yet."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
            self._thread_id = threading.get_ident()

    def is_ui_thread(self) -> bool:
        return self._thread_id == threading.get_ident()

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """
        Run callback on the UI loop.

        Runs immediately when already on the loop thread, otherwise schedules
        it with call_soon_threadsafe.

        Raises:
            RuntimeError: If the dispatcher has no loop yet
        """
        if self._loop is None:
            raise RuntimeError("UiDispatcher is not bound to an event loop")
        if self.is_ui_thread():
            callback(*args)
        else:
            self._loop.call_soon_threadsafe(callback, *args)
