"""Common constants and exception types for testgate.

This module defines the fixed messages and error types shared by the
gates, the runner adapters and the declaration API.
"""

from typing import Optional
import traceback

# Producer info - identifies the implementation
PRODUCER = {
    "name": "testgate",
    "version": "0.1.0",
}

# Prefix for tests registered in expected-failure mode
GATED_NAME_PREFIX = "[GATED, SHOULD FAIL]"

GATED_ERROR_MESSAGE = "Gated test was expected to fail, but it passed."

CALLBACK_ERROR_MESSAGE = (
    "Gated test helpers do not support completion callbacks. "
    "Return an awaitable instead."
)

# Environment variables read by the configuration layer
SUBJECT_VERSION_ENV = "TESTGATE_SUBJECT_VERSION"
FLAGS_ENV = "TESTGATE_FLAGS"
FLAGS_FILE_ENV = "TESTGATE_FLAGS_FILE"


class GatedTestPassedError(AssertionError):
    """Raised when a test registered as expected-to-fail completes.

    The ``declaration`` attribute holds the frame summary of the call site
    that declared the gated test, once captured.
    """

    def __init__(self, message: str = GATED_ERROR_MESSAGE):
        super().__init__(message)
        self.declaration: Optional[traceback.FrameSummary] = None

    def __str__(self) -> str:
        message = super().__str__()
        if self.declaration is not None:
            message += (
                f" (gate declared at {self.declaration.filename}:"
                f"{self.declaration.lineno})"
            )
        return message


class GatedCallbackError(TypeError):
    """Raised when an inverted body declares parameters."""

    def __init__(self, body_name: str):
        self.body_name = body_name
        super().__init__(f"{CALLBACK_ERROR_MESSAGE} (body: {body_name})")


class UnknownFlagError(AttributeError):
    """Raised when a gate predicate reads a flag that does not exist."""

    def __init__(self, flag_name: str):
        self.flag_name = flag_name
        super().__init__(f'Feature flag "{flag_name}" does not exist')


class ConfigError(ValueError):
    """Raised when the subject version or flag set cannot be resolved."""


class DuplicateTestError(ValueError):
    """Raised when two tests are registered under the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Test already registered: {name}")
