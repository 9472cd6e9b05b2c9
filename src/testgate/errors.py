"""Centralized error reporting for the testgate CLI.

This module provides:
- Standard error codes
- Error envelope format for --json output
- Helper functions for consistent error reporting
"""

import json
import sys
from dataclasses import dataclass, field


# =============================================================================
# Error Codes
# =============================================================================

INVALID_RANGE = "INVALID_RANGE"
CONFIG_ERROR = "CONFIG_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"


# =============================================================================
# Error Envelope
# =============================================================================


@dataclass
class TestGateError:
    """Structured error for JSON output.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        hints: Actionable suggestions for resolving the error.
        details: Context-specific error details.
    """

    __test__ = False  # not a pytest test class

    code: str
    message: str
    hints: list[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to error envelope dict."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "hints": self.hints,
                "details": self.details,
            }
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def print_json(self, file=None) -> None:
        """Print error as JSON to file (default: stderr)."""
        if file is None:
            file = sys.stderr
        print(self.to_json(), file=file)

    def print_text(self, file=None) -> None:
        """Print error as human-readable text to file (default: stderr)."""
        if file is None:
            file = sys.stderr
        print(f"Error: {self.message}", file=file)
        if self.hints:
            for hint in self.hints:
                print(f"  Hint: {hint}", file=file)


# =============================================================================
# Factory Functions
# =============================================================================


def invalid_range(version_range: str, reason: str = "") -> TestGateError:
    """Create error for a range that does not parse."""
    msg = f"Invalid version range: {version_range!r}"
    if reason:
        msg += f" ({reason})"
    return TestGateError(
        code=INVALID_RANGE,
        message=msg,
        hints=[
            "Use npm range syntax, e.g. '>=17.0.0', '^18.2.0' or '17.x || 18.x'",
        ],
        details={"range": version_range, "reason": reason},
    )


def config_error(reason: str) -> TestGateError:
    """Create error for unresolvable configuration."""
    return TestGateError(
        code=CONFIG_ERROR,
        message=f"Configuration error: {reason}",
        hints=[
            "Set TESTGATE_SUBJECT_VERSION or pass --default-version",
            "Check TESTGATE_FLAGS / TESTGATE_FLAGS_FILE contain a JSON object",
        ],
        details={"reason": reason},
    )


def invalid_argument(arg_name: str, value: str, reason: str = "") -> TestGateError:
    """Create error for invalid argument."""
    msg = f"Invalid argument '{arg_name}': {value}"
    if reason:
        msg += f" ({reason})"
    return TestGateError(
        code=INVALID_ARGUMENT,
        message=msg,
        hints=[
            "Check the argument value",
            "Run: testgate <command> --help",
        ],
        details={"argument": arg_name, "value": value, "reason": reason},
    )


# =============================================================================
# Output Helper
# =============================================================================


def print_error(
    error: TestGateError,
    json_mode: bool = False,
    file=None,
) -> None:
    """Print error in appropriate format.

    Args:
        error: The error to print.
        json_mode: If True, print as JSON envelope. If False, print as text.
        file: Output file (default: stderr).
    """
    if json_mode:
        error.print_json(file)
    else:
        error.print_text(file)
