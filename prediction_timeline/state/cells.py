"""
Observable state cells for the prediction client.

Each Cell holds one value. Subscribers are called immediately with the
current value and then synchronously on every change. SessionState groups
the three cells the client tracks; they are independent and no ordering is
guaranteed between them.
"""

import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[Any], None]


def _changed(old: Any, new: Any) -> bool:
    # Containers may have been mutated in place, so always treat them as new.
    if isinstance(new, (list, dict, set)):
        return True
    if old is new:
        return False
    return old != new


class Cell(Generic[T]):
    """A value that notifies subscribers when it is replaced."""

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: List[Subscriber] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers if it changed."""
        if not _changed(self._value, value):
            return
        self._value = value
        # Copy so subscribers may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback(value)

    def update(self, fn: Callable[[T], T]) -> None:
        """Set the value to fn(current value)."""
        self.set(fn(self._value))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback and call it with the current value.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"


class SessionState:
    """
    Client state for one session.

    - user_session: session id, None until the session starts
    - has_submitted: whether this session already stored a prediction
    - predictions: predictions fetched from the service, by date
    """

    def __init__(self):
        self.user_session: Cell[Optional[str]] = Cell(None)
        self.has_submitted: Cell[bool] = Cell(False)
        self.predictions: Cell[list] = Cell([])

    def reset(self) -> None:
        """Return all cells to their initial values."""
        logger.debug("Resetting session state")
        self.user_session.set(None)
        self.has_submitted.set(False)
        self.predictions.set([])

    def snapshot(self) -> dict:
        return {
            "user_session": self.user_session.get(),
            "has_submitted": self.has_submitted.get(),
            "predictions": list(self.predictions.get()),
        }
