"""Tests for reasoning_gate.config module."""

from __future__ import annotations

import pytest

from reasoning_gate.config import SafetyConfig, Settings, configure_settings, get_settings
from reasoning_gate.policy import ScoringPolicy


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self):
        """Test Settings has correct default values."""
        settings = Settings()
        assert settings.log_level == "INFO"
        assert settings.log_format == "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        assert settings.max_plans == 1000
        assert settings.max_chains == 1000
        assert settings.policy == ScoringPolicy()
        assert "shell" in settings.known_tool_tokens
        assert len(settings.known_tool_tokens) == 9

    def test_log_level_is_uppercased(self):
        """Test log_level accepts lowercase names."""
        settings = Settings(log_level="debug")
        assert settings.log_level == "DEBUG"

    def test_log_level_rejects_unknown(self):
        """Test log_level rejects names outside the logging levels."""
        with pytest.raises(ValueError):
            Settings(log_level="VERBOSE")

    def test_max_plans_minimum(self):
        """Test max_plans has minimum validation."""
        with pytest.raises(ValueError):
            Settings(max_plans=0)

    def test_max_chains_minimum(self):
        """Test max_chains has minimum validation."""
        with pytest.raises(ValueError):
            Settings(max_chains=0)

    def test_policy_override(self):
        """Test a nested policy can be supplied as a mapping."""
        settings = Settings(policy={"execution_threshold": 0.75})
        assert settings.policy.execution_threshold == 0.75
        assert settings.policy.seed_confidence == 0.9

    def test_env_override(self, monkeypatch):
        """Test settings are read from REASONING_GATE_ variables."""
        monkeypatch.setenv("REASONING_GATE_LOG_LEVEL", "warning")
        monkeypatch.setenv("REASONING_GATE_MAX_PLANS", "25")
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.max_plans == 25

    def test_nested_env_override(self, monkeypatch):
        """Test nested policy values use the double-underscore delimiter."""
        monkeypatch.setenv("REASONING_GATE_POLICY__EXECUTION_THRESHOLD", "0.7")
        settings = Settings()
        assert settings.policy.execution_threshold == 0.7


class TestSafetyConfig:
    """Tests for SafetyConfig defaults."""

    def test_default_tables(self):
        """Test the default substring tables."""
        safety = SafetyConfig()
        assert "rm -rf" in safety.dangerous_commands
        assert "/etc/" in safety.protected_paths
        assert ("exists", "does not exist") in safety.contradiction_pairs
        assert safety.correction_note.startswith("[Note:")


class TestGlobalSettings:
    """Tests for get_settings and configure_settings."""

    def test_get_settings_returns_same_instance(self):
        """Test get_settings caches the instance."""
        assert get_settings() is get_settings()

    def test_configure_settings_replaces_instance(self):
        """Test configure_settings installs a new global instance."""
        settings = configure_settings(max_chains=7)
        assert settings.max_chains == 7
        assert get_settings() is settings
