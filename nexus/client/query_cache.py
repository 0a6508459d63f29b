"""
Client-side query cache.

Results of GET requests are stored under tuple keys such as
("artworks", "abc-123") or ("users", 1, "galleries"). Invalidating a key drops
every entry whose key starts with it, so invalidate(("artworks",)) clears all
artwork listings and details at once. Subscribers are told which key changed
and re-read it themselves.

Entries never go stale on their own; they live until invalidated.
"""

from collections.abc import Awaitable, Callable, Hashable
from typing import Any

QueryKey = tuple[Hashable, ...]
Subscriber = Callable[[QueryKey], None]

_MISSING = object()


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    """An explicit, instance-scoped cache of query results."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, Any] = {}
        self._subscribers: dict[QueryKey, list[Subscriber]] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def read(self, key: QueryKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def write(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = value
        self._notify([key])

    def invalidate(self, key: QueryKey) -> list[QueryKey]:
        """
        Drop every entry whose key starts with `key`.

        Subscribers of matching keys are notified even if nothing was cached
        for them, so a view waiting on a key learns that it should refetch.

        Returns:
            The keys that were removed
        """
        removed = [k for k in self._entries if _matches(k, key)]
        for k in removed:
            del self._entries[k]

        affected = set(removed) | {k for k in self._subscribers if _matches(k, key)}
        self._notify(sorted(affected, key=repr))
        return removed

    def clear(self) -> None:
        keys = list(self._entries)
        self._entries.clear()
        self._notify(keys)

    def subscribe(self, key: QueryKey, callback: Subscriber) -> Callable[[], None]:
        """
        Call `callback(key)` whenever `key` is written or invalidated.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(key, None)

        return unsubscribe

    async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        """
        Read-through: return the cached value or await `loader` and cache its result.

        A loader that raises leaves the cache untouched.
        """
        cached = self._entries.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        value = await loader()
        self.write(key, value)
        return value

    def _notify(self, keys: list[QueryKey]) -> None:
        for key in keys:
            for callback in list(self._subscribers.get(key, ())):
                callback(key)
