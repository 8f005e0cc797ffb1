"""
Tests for entrykit_config.base module.
"""

from typing import Any

import pytest

from entrykit_config.base import BaseConfig, ConfigStatus, ValidationResult


class TestConfigStatus:
    """Tests for ConfigStatus enum."""

    def test_values(self):
        """Test enum values exist."""
        assert ConfigStatus.VALID.value == "valid"
        assert ConfigStatus.INVALID.value == "invalid"
        assert ConfigStatus.DEGRADED.value == "degraded"


class TestValidationResult:
    """Tests for ValidationResult dataclass."""

    def test_valid_result(self):
        """Test creating a valid result."""
        result = ValidationResult.valid()
        assert result.is_usable
        assert result.status == ConfigStatus.VALID
        assert result.errors == []
        assert result.warnings == []

    def test_valid_with_warnings(self):
        """Test valid result with warnings."""
        result = ValidationResult.valid(warnings=["Interval is long"])
        assert result.status == ConfigStatus.VALID
        assert result.warnings == ["Interval is long"]

    def test_invalid_result(self):
        """Test creating an invalid result."""
        result = ValidationResult.invalid(errors=["Timeout must be positive"])
        assert not result.is_usable
        assert result.status == ConfigStatus.INVALID
        assert result.errors == ["Timeout must be positive"]

    def test_degraded_result(self):
        """Test creating a degraded result."""
        result = ValidationResult.degraded(errors=["env file missing"])
        assert result.is_usable
        assert result.status == ConfigStatus.DEGRADED


class TestBaseConfig:
    """Tests for BaseConfig abstract class."""

    def test_cannot_instantiate_directly(self):
        """Test that BaseConfig cannot be instantiated."""
        with pytest.raises(TypeError):
            BaseConfig()

    def test_concrete_implementation(self):
        """Test a minimal concrete implementation."""

        class SampleConfig(BaseConfig):
            def validate(self) -> ValidationResult:
                return ValidationResult.valid()

            def to_dict(self) -> dict[str, Any]:
                return {"sample": True}

            @classmethod
            def from_env(cls) -> "SampleConfig":
                return cls()

        config = SampleConfig.from_env()
        assert config.validate().status == ConfigStatus.VALID
        assert config.to_dict() == {"sample": True}
