"""Stores for plans and reasoning chains.

This package provides the Repository interface injected into the engines
and a dict-backed implementation scoped to the owning engine instance.
"""

from reasoning_gate.storage.base import Repository
from reasoning_gate.storage.memory import InMemoryRepository

__all__ = [
    "InMemoryRepository",
    "Repository",
]
