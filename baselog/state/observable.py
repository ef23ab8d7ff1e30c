"""
Property change notification for state objects.

Provides a callback registry in place of a UI toolkit's signals, so state can
be observed by any front end (or by tests) without a GUI dependency.

Usage:
    class EntryState(ObservableObject):
        is_expanded = ObservableProperty(default=False)

    unsubscribe = state.subscribe(lambda sender, name: print(name))
    state.is_expanded = True   # prints "is_expanded"
    unsubscribe()
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

PropertyChangedCallback = Callable[[Any, str], None]


class ObservableProperty(Generic[T]):
    """
    Descriptor that notifies subscribers when the property value changes.

    Args:
        default: Default value for the property.
    """

    def __init__(self, default: T = None):
        self.default = default
        self._attr_name = ""
        self._public_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._public_name = name
        self._attr_name = f"_observable_{name}"

    def __get__(self, obj: Any, objtype: type | None = None) -> T:
        if obj is None:
            return self  # type: ignore
        return getattr(obj, self._attr_name, self.default)

    def __set__(self, obj: "ObservableObject", value: T) -> None:
        old_value = getattr(obj, self._attr_name, self.default)
        if old_value != value:
            setattr(obj, self._attr_name, value)
            obj.notify_property_changed(self._public_name)


class ObservableObject:
    """Base class for state objects with property change notification."""

    def __init__(self):
        self._subscribers: list[PropertyChangedCallback] = []

    def subscribe(self, callback: PropertyChangedCallback) -> Callable[[], None]:
        """
        Register a callback for property changes.

        Args:
            callback: Called with (sender, property_name) on each change

        Returns:
            A callable that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify_property_changed(self, *property_names: str) -> None:
        """Notify subscribers that the named properties changed."""
        for name in property_names:
            for callback in list(self._subscribers):
                try:
                    callback(self, name)
                except Exception:
                    # Observer errors never interrupt a state update
                    logger.exception(f"Observer failed handling '{name}'")
