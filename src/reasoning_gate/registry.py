"""Tool registry for reasoning-gate.

This module provides the ToolRegistry interface the engines consult for the
set of currently known tools, and InMemoryToolRegistry, which manages
registration, lookup and health status of tool descriptors.

Capabilities are resolved once, when a tool is registered. Callers may pass
explicit capabilities; otherwise ``infer_capabilities`` derives them from
the tool name.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from reasoning_gate.models.tools import ToolCapabilities, ToolDescriptor

logger = logging.getLogger(__name__)

_READ_TOOLS = frozenset({"read_file", "ls", "grep", "glob", "web_fetch", "web_search"})
_WRITE_TOOLS = frozenset({"write_file", "edit"})
_EXECUTE_TOOLS = frozenset({"shell"})


def infer_capabilities(name: str) -> ToolCapabilities:
    """Derive capabilities for a well-known tool name.

    Unknown names get no capabilities at all.

    Examples:
        >>> infer_capabilities("shell").can_execute
        True
        >>> infer_capabilities("write_file").requires_confirmation
        True
        >>> infer_capabilities("custom_tool") == ToolCapabilities()
        True
    """
    can_read = name in _READ_TOOLS
    can_write = name in _WRITE_TOOLS
    can_execute = name in _EXECUTE_TOOLS

    input_types: tuple[str, ...] = ()
    output_types: tuple[str, ...] = ()
    if name in {"web_fetch", "web_search"}:
        input_types, output_types = ("url",), ("text",)
    elif can_read or can_write:
        input_types, output_types = ("path",), ("text",)
    elif can_execute:
        input_types, output_types = ("command",), ("text",)

    return ToolCapabilities(
        can_read=can_read,
        can_write=can_write,
        can_execute=can_execute,
        requires_confirmation=can_write or can_execute,
        input_types=input_types,
        output_types=output_types,
    )


class ToolRegistry(ABC):
    """Read-side interface of a tool registry.

    Only tools whose descriptor is ``available`` are reported by
    ``list_tools`` and ``get_tool``.
    """

    @abstractmethod
    async def list_tools(self) -> list[ToolDescriptor]:
        """Return descriptors of every available tool."""

    @abstractmethod
    async def get_tool(self, name: str) -> ToolDescriptor | None:
        """Return the descriptor for ``name``, or None if absent or unavailable."""

    async def tool_names(self) -> frozenset[str]:
        """Names of every available tool."""
        return frozenset(tool.name for tool in await self.list_tools())

    async def all_tools(self) -> list[ToolDescriptor]:
        """Descriptors of every registered tool, including unavailable ones.

        Registries that cannot see unavailable tools return ``list_tools()``.
        """
        return await self.list_tools()


class InMemoryToolRegistry(ToolRegistry):
    """Registry holding tool descriptors in a dict.

    Examples:
        >>> registry = InMemoryToolRegistry(["read_file", "ls"])
        >>> registry.tool_count
        2
        >>> _ = registry.register("shell", required_parameters=["command"])
        >>> registry.set_available("shell", False)
        True
    """

    def __init__(self, tools: Iterable[str | ToolDescriptor] = ()) -> None:
        """Initialize the registry.

        Args:
            tools: Tool names or prebuilt descriptors to register up front
        """
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools:
            if isinstance(tool, ToolDescriptor):
                self.register_descriptor(tool)
            else:
                self.register(tool)

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools, available or not."""
        return len(self._tools)

    def is_registered(self, name: str) -> bool:
        """Check if a tool is registered, regardless of its health."""
        return name in self._tools

    def register(
        self,
        name: str,
        *,
        description: str = "",
        capabilities: ToolCapabilities | None = None,
        required_parameters: Iterable[str] = (),
        parameter_types: Mapping[str, str] | None = None,
        replace: bool = False,
    ) -> ToolDescriptor:
        """Register a tool by name.

        Args:
            name: Unique tool name
            description: Human-readable description
            capabilities: Explicit capabilities; inferred from the name if None
            required_parameters: Parameter names every call must supply
            parameter_types: JSON type name per parameter
            replace: If True, replace an existing tool; if False, raise on duplicate

        Returns:
            The stored descriptor

        Raises:
            ValueError: If the tool is already registered and replace=False
        """
        descriptor = ToolDescriptor(
            name=name,
            description=description,
            capabilities=capabilities if capabilities is not None else infer_capabilities(name),
            required_parameters=tuple(required_parameters),
            parameter_types=dict(parameter_types or {}),
        )
        return self.register_descriptor(descriptor, replace=replace)

    def register_descriptor(self, descriptor: ToolDescriptor, *, replace: bool = False) -> ToolDescriptor:
        """Register a prebuilt descriptor.

        Raises:
            ValueError: If the tool is already registered and replace=False
        """
        if descriptor.name in self._tools and not replace:
            raise ValueError(f"Tool '{descriptor.name}' already registered")
        self._tools[descriptor.name] = descriptor
        logger.debug("Registered tool: %s", descriptor.name)
        return descriptor

    def unregister(self, name: str) -> bool:
        """Remove a tool.

        Returns:
            True if the tool was removed, False if not found
        """
        if name not in self._tools:
            return False
        del self._tools[name]
        logger.debug("Unregistered tool: %s", name)
        return True

    def set_available(self, name: str, available: bool) -> bool:
        """Update a tool's health status.

        Returns:
            True if the tool exists, False otherwise
        """
        descriptor = self._tools.get(name)
        if descriptor is None:
            return False
        self._tools[name] = descriptor.model_copy(update={"available": available})
        return True

    def describe(self, name: str) -> ToolDescriptor | None:
        """Return the stored descriptor for ``name`` even if it is unavailable."""
        return self._tools.get(name)

    async def list_tools(self) -> list[ToolDescriptor]:
        return [tool for tool in self._tools.values() if tool.available]

    async def all_tools(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    async def get_tool(self, name: str) -> ToolDescriptor | None:
        descriptor = self._tools.get(name)
        if descriptor is None or not descriptor.available:
            return None
        return descriptor


__all__ = [
    "InMemoryToolRegistry",
    "ToolRegistry",
    "infer_capabilities",
]
