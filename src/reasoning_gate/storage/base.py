"""Base repository interface for reasoning-gate.

This module defines the abstract interface for the stores that own live
plans and reasoning chains. Engines receive a repository at construction
time instead of keeping process-wide maps.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Abstract keyed store of engine-owned objects.

    Implementations decide where objects live; the engines only rely on
    create/get/delete semantics keyed by an opaque string id.

    Examples:
        Create a custom repository:
        >>> class MyRepository(Repository[Plan]):
        ...     async def add(self, key: str, item: Plan) -> None:
        ...         ...
        ...     # ... implement other methods
    """

    @abstractmethod
    async def add(self, key: str, item: T) -> None:
        """Store a new object.

        Args:
            key: Opaque identifier of the object
            item: The object to store

        Raises:
            CapacityError: If the repository is full
            ValueError: If the key is already present
        """

    @abstractmethod
    async def get(self, key: str) -> T | None:
        """Return the object stored under ``key``, or None."""

    @abstractmethod
    async def put(self, key: str, item: T) -> None:
        """Replace the object stored under an existing ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove an object.

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def values(self) -> list[T]:
        """Return every stored object in insertion order."""

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored objects."""

    async def contains(self, key: str) -> bool:
        """Check whether ``key`` is present."""
        return await self.get(key) is not None
