"""Configuration management for reasoning-gate.

This module provides the Settings class for the policy knobs of the
pipeline, with support for environment variables and .env files.

Nested values use ``__`` as the delimiter, for example::

    REASONING_GATE_POLICY__EXECUTION_THRESHOLD=0.7
    REASONING_GATE_SAFETY__DANGEROUS_COMMANDS='["rm -rf", "shutdown"]'
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reasoning_gate.policy import ScoringPolicy

# Module-level logger for configuration warnings
_config_logger = logging.getLogger(__name__)


class SafetyConfig(BaseModel):
    """Substring tables used by the safety and consistency checks."""

    dangerous_commands: list[str] = Field(
        default_factory=lambda: ["rm -rf", "sudo", "chmod 777", "mkfs", "dd if=", "kill -9"],
        description="Shell command substrings that mark a call as unsafe",
    )
    protected_paths: list[str] = Field(
        default_factory=lambda: ["/etc/", "/usr/bin/", "/boot/", "/sys/", "/proc/"],
        description="Path prefixes that writing tools must not touch",
    )
    contradiction_pairs: list[tuple[str, str]] = Field(
        default_factory=lambda: [
            ("exists", "does not exist"),
            ("true", "false"),
            ("valid", "invalid"),
            ("possible", "impossible"),
        ],
        description="Opposite-polarity phrases checked across adjacent reasoning steps",
    )
    correction_note: str = Field(
        default="[Note: Some tool calls were removed due to validation issues]",
        description="Sentence appended to a corrected response",
    )


class Settings(BaseSettings):
    """Pipeline configuration settings.

    Settings can be configured via environment variables with the
    REASONING_GATE_ prefix, or via a .env file.

    Example:
        REASONING_GATE_LOG_LEVEL=DEBUG
        REASONING_GATE_MAX_PLANS=200
    """

    model_config = SettingsConfigDict(
        env_prefix="REASONING_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Logging settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    log_json: bool = Field(
        default=False, description="Render log records as JSON lines instead of text"
    )

    # Policy
    policy: ScoringPolicy = Field(default_factory=ScoringPolicy)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    known_tool_tokens: list[str] = Field(
        default_factory=lambda: [
            "read_file",
            "write_file",
            "edit",
            "ls",
            "grep",
            "shell",
            "web_fetch",
            "web_search",
            "glob",
        ],
        description="Tool names recognised inside reasoning text (mcp_* is always recognised)",
    )

    # Store capacity
    max_plans: int = Field(default=1000, ge=1, description="Maximum live plans per engine")
    max_chains: int = Field(default=1000, ge=1, description="Maximum live chains per engine")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


# Global settings instance (lazy-loaded)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        The global Settings instance, created on first access.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _config_logger.debug("Loaded settings (log_level=%s)", _settings.log_level)
    return _settings


def configure_settings(**overrides: Any) -> Settings:
    """Configure settings with overrides.

    Args:
        **overrides: Setting values to override.

    Returns:
        New Settings instance with overrides applied.
    """
    global _settings
    _settings = Settings(**overrides)
    return _settings


__all__ = [
    "SafetyConfig",
    "Settings",
    "configure_settings",
    "get_settings",
]
