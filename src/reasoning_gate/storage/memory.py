"""In-memory repository for reasoning-gate.

Objects live for the lifetime of the owning engine. There is no locking:
every map is mutated only by the single logical task driving the engines.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from reasoning_gate.exceptions import CapacityError
from reasoning_gate.storage.base import Repository

T = TypeVar("T")


class InMemoryRepository(Repository[T], Generic[T]):
    """Dict-backed repository with a capacity limit.

    Examples:
        >>> repo = InMemoryRepository[str](max_items=2)
        >>> await repo.add("a", "first")
        >>> await repo.get("a")
        'first'
        >>> await repo.count()
        1
        >>> await repo.delete("a")
        True
    """

    def __init__(self, max_items: int = 1000) -> None:
        """Initialize the repository.

        Args:
            max_items: Maximum number of objects to store (default: 1000)
        """
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self._max_items = max_items
        self._items: dict[str, T] = {}

    @property
    def max_items(self) -> int:
        return self._max_items

    async def add(self, key: str, item: T) -> None:
        if key in self._items:
            raise ValueError(f"Key '{key}' already stored")
        if len(self._items) >= self._max_items:
            raise CapacityError(f"Maximum item limit reached ({self._max_items})")
        self._items[key] = item

    async def get(self, key: str) -> T | None:
        return self._items.get(key)

    async def put(self, key: str, item: T) -> None:
        if key not in self._items:
            raise KeyError(key)
        self._items[key] = item

    async def delete(self, key: str) -> bool:
        if key not in self._items:
            return False
        del self._items[key]
        return True

    async def values(self) -> list[T]:
        return list(self._items.values())

    async def count(self) -> int:
        return len(self._items)

    async def clear(self) -> None:
        """Remove every stored object."""
        self._items.clear()
