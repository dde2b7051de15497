"""Tool descriptor models for reasoning-gate.

A tool is described once, at registration time, by a closed descriptor. The
engines and the validator consult these descriptors instead of re-deriving
capabilities from tool names whenever they need them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolCapabilities(BaseModel):
    """What a tool is able to do.

    Examples:
        >>> caps = ToolCapabilities(can_write=True, requires_confirmation=True)
        >>> caps.can_read
        False
    """

    model_config = ConfigDict(frozen=True)

    can_read: bool = Field(default=False, description="Tool reads files or remote data")
    can_write: bool = Field(default=False, description="Tool modifies files")
    can_execute: bool = Field(default=False, description="Tool executes commands")
    requires_confirmation: bool = Field(
        default=False, description="Tool should be confirmed before running"
    )
    input_types: tuple[str, ...] = Field(default=(), description="Accepted input kinds")
    output_types: tuple[str, ...] = Field(default=(), description="Produced output kinds")


class ToolDescriptor(BaseModel):
    """Closed description of a registered tool.

    Examples:
        >>> shell = ToolDescriptor(
        ...     name="shell",
        ...     capabilities=ToolCapabilities(can_execute=True),
        ...     required_parameters=("command",),
        ...     parameter_types={"command": "string"},
        ... )
        >>> shell.available
        True
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Unique tool name")
    description: str = Field(default="", description="Human-readable description")
    capabilities: ToolCapabilities = Field(
        default_factory=ToolCapabilities,
        description="Capabilities resolved at registration time",
    )
    required_parameters: tuple[str, ...] = Field(
        default=(),
        description="Parameter names every call must supply",
    )
    parameter_types: dict[str, str] = Field(
        default_factory=dict,
        description="JSON type name (string, number, boolean, array, object) per parameter",
    )
    available: bool = Field(
        default=True,
        description="Health status reported by the registry",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)
