"""One-shot visibility subscriptions for lazily loaded images."""

from collections.abc import Callable, Hashable, Iterable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class VisibilityObserver(Generic[T]):
    """Fire a callback the first time a target becomes visible, then forget it.

    Leaving and re-entering view never fires again; a target has to be observed
    anew for that.
    """

    def __init__(self) -> None:
        self._callbacks: dict[T, Callable[[T], None]] = {}

    def observe(self, target: T, callback: Callable[[T], None]) -> None:
        """Register interest in the target's first visibility."""
        self._callbacks[target] = callback

    def unobserve(self, target: T) -> None:
        self._callbacks.pop(target, None)

    def disconnect(self) -> None:
        """Drop every pending subscription."""
        self._callbacks.clear()

    def notify_visible(self, targets: Iterable[T]) -> int:
        """Fire callbacks for targets that just intersected; return how many fired."""
        fired = 0
        for target in targets:
            callback = self._callbacks.pop(target, None)
            if callback is None:
                continue
            callback(target)
            fired += 1
        return fired
