"""Tests for reasoning_gate.registry module."""

from __future__ import annotations

import pytest

from reasoning_gate.models.tools import ToolCapabilities, ToolDescriptor
from reasoning_gate.registry import InMemoryToolRegistry, infer_capabilities


class TestInferCapabilities:
    """Tests for name-based capability inference."""

    @pytest.mark.parametrize("name", ["read_file", "ls", "grep", "glob", "web_fetch", "web_search"])
    def test_read_tools(self, name):
        """Test read tools only read."""
        caps = infer_capabilities(name)
        assert caps.can_read is True
        assert caps.can_write is False
        assert caps.can_execute is False
        assert caps.requires_confirmation is False

    @pytest.mark.parametrize("name", ["write_file", "edit"])
    def test_write_tools(self, name):
        """Test write tools need confirmation."""
        caps = infer_capabilities(name)
        assert caps.can_write is True
        assert caps.requires_confirmation is True
        assert caps.input_types == ("path",)

    def test_shell(self):
        """Test shell executes commands."""
        caps = infer_capabilities("shell")
        assert caps.can_execute is True
        assert caps.requires_confirmation is True
        assert caps.input_types == ("command",)
        assert caps.output_types == ("text",)

    def test_web_tools_take_urls(self):
        """Test web tools take URLs."""
        assert infer_capabilities("web_fetch").input_types == ("url",)

    def test_unknown_tool(self):
        """Test unknown names get no capabilities."""
        assert infer_capabilities("mcp_custom") == ToolCapabilities()


class TestInMemoryToolRegistry:
    """Tests for InMemoryToolRegistry."""

    def test_initial_tools(self):
        """Test names and descriptors can be registered up front."""
        registry = InMemoryToolRegistry(["ls", ToolDescriptor(name="mcp_fetch")])
        assert registry.tool_count == 2
        assert registry.is_registered("ls")
        assert registry.is_registered("mcp_fetch")

    def test_register_infers_capabilities(self):
        """Test capabilities are inferred when not supplied."""
        registry = InMemoryToolRegistry()
        descriptor = registry.register("write_file")
        assert descriptor.capabilities.can_write is True

    def test_register_explicit_capabilities(self):
        """Test explicit capabilities win over inference."""
        registry = InMemoryToolRegistry()
        descriptor = registry.register("ls", capabilities=ToolCapabilities(can_execute=True))
        assert descriptor.capabilities.can_execute is True
        assert descriptor.capabilities.can_read is False

    def test_register_duplicate_raises(self):
        """Test duplicate registration raises ValueError."""
        registry = InMemoryToolRegistry(["ls"])
        with pytest.raises(ValueError, match="already registered"):
            registry.register("ls")

    def test_register_replace(self):
        """Test replace=True overwrites an existing tool."""
        registry = InMemoryToolRegistry(["ls"])
        registry.register("ls", description="List files", replace=True)
        assert registry.describe("ls").description == "List files"

    def test_unregister(self):
        """Test unregister reports whether the tool existed."""
        registry = InMemoryToolRegistry(["ls"])
        assert registry.unregister("ls") is True
        assert registry.unregister("ls") is False
        assert registry.tool_count == 0

    def test_set_available_unknown(self):
        """Test set_available returns False for unknown tools."""
        registry = InMemoryToolRegistry()
        assert registry.set_available("ls", False) is False

    async def test_unavailable_tools_are_hidden(self):
        """Test unavailable tools are excluded from the read side."""
        registry = InMemoryToolRegistry(["ls", "grep"])
        registry.set_available("grep", False)

        assert [tool.name for tool in await registry.list_tools()] == ["ls"]
        assert await registry.tool_names() == frozenset({"ls"})
        assert await registry.get_tool("grep") is None
        assert registry.describe("grep").available is False
        assert len(await registry.all_tools()) == 2

    async def test_get_tool(self):
        """Test get_tool returns the descriptor or None."""
        registry = InMemoryToolRegistry(["ls"])
        assert (await registry.get_tool("ls")).name == "ls"
        assert await registry.get_tool("missing") is None

    async def test_restored_tool_is_visible(self):
        """Test a tool marked available again reappears."""
        registry = InMemoryToolRegistry(["ls"])
        registry.set_available("ls", False)
        registry.set_available("ls", True)
        assert await registry.tool_names() == frozenset({"ls"})
