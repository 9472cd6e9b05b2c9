"""Tests for the CLI error envelope.

Tests verify:
- Error envelope structure is correct
- Error codes are valid
- Factory functions produce correct errors
- Envelopes validate against the envelope schema
"""

import json

import jsonschema
import pytest

from testgate.errors import (
    CONFIG_ERROR,
    INVALID_ARGUMENT,
    INVALID_RANGE,
    TestGateError,
    config_error,
    invalid_argument,
    invalid_range,
    print_error,
)

ERROR_SCHEMA = {
    "type": "object",
    "required": ["error"],
    "additionalProperties": False,
    "properties": {
        "error": {
            "type": "object",
            "required": ["code", "message", "hints", "details"],
            "properties": {
                "code": {"type": "string", "pattern": "^[A-Z_]+$"},
                "message": {"type": "string", "minLength": 1},
                "hints": {"type": "array", "items": {"type": "string"}},
                "details": {"type": "object"},
            },
        }
    },
}


class TestTestGateError:
    """Tests for the TestGateError dataclass."""

    def test_to_dict_structure(self):
        """Error dict should have correct structure."""
        error = TestGateError(
            code="TEST_ERROR",
            message="Test message",
            hints=["Hint 1", "Hint 2"],
            details={"key": "value"},
        )

        result = error.to_dict()

        assert result["error"]["code"] == "TEST_ERROR"
        assert result["error"]["message"] == "Test message"
        assert result["error"]["hints"] == ["Hint 1", "Hint 2"]
        assert result["error"]["details"] == {"key": "value"}

    def test_to_dict_empty_hints_and_details(self):
        """Error dict should handle empty hints and details."""
        result = TestGateError(code="TEST_ERROR", message="Test message").to_dict()

        assert result["error"]["hints"] == []
        assert result["error"]["details"] == {}

    def test_to_json_valid(self):
        """Error JSON should be valid."""
        parsed = json.loads(TestGateError(code="TEST_ERROR", message="m").to_json())
        assert parsed["error"]["code"] == "TEST_ERROR"


class TestErrorCodes:
    """Tests for error code constants."""

    def test_codes_are_uppercase(self):
        for code in [INVALID_RANGE, CONFIG_ERROR, INVALID_ARGUMENT]:
            assert code == code.upper(), f"Code not uppercase: {code}"


class TestFactoryFunctions:
    """Tests for error factory functions."""

    def test_invalid_range(self):
        error = invalid_range(">=x", "Invalid comparator")
        assert error.code == INVALID_RANGE
        assert "'>=x'" in error.message
        assert "Invalid comparator" in error.message
        assert error.details["range"] == ">=x"

    def test_config_error(self):
        error = config_error("No subject version")
        assert error.code == CONFIG_ERROR
        assert any("TESTGATE_SUBJECT_VERSION" in h for h in error.hints)

    def test_invalid_argument(self):
        error = invalid_argument("--version", "abc", "not a semantic version")
        assert error.code == INVALID_ARGUMENT
        assert error.details["argument"] == "--version"


class TestPrintError:
    """Tests for print_error output."""

    def test_text(self, capsys):
        error = TestGateError(code="T", message="Test message", hints=["Do something"])
        print_error(error, json_mode=False, file=None)
        captured = capsys.readouterr()
        assert "Error: Test message" in captured.err
        assert "Hint: Do something" in captured.err

    def test_json(self, capsys):
        print_error(TestGateError(code="T", message="m"), json_mode=True)
        parsed = json.loads(capsys.readouterr().err)
        assert parsed["error"]["code"] == "T"


class TestErrorSchemaValidation:
    """Envelopes from every factory should match the envelope schema."""

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: invalid_range(">=x"),
            lambda: config_error("reason"),
            lambda: invalid_argument("arg", "val"),
        ],
    )
    def test_all_factories_validate(self, factory):
        jsonschema.validate(factory().to_dict(), ERROR_SCHEMA)
