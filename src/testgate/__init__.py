"""testgate - conditional test registration.

Declares tests that only apply to a range of subject versions or to a
combination of feature flags, and registers them with a test runner as
run, skip, focused or expected-to-fail.
"""

from .common import (
    GATED_ERROR_MESSAGE,
    GATED_NAME_PREFIX,
    ConfigError,
    DuplicateTestError,
    GatedCallbackError,
    GatedTestPassedError,
    UnknownFlagError,
)
from .config import FlagSet, GateConfig, load_config
from .gates import GateDecision, Outcome
from .runner import PytestRunner, RecordingRunner, Registration, TestRunner
from .suite import GatedSuite

__version__ = "0.1.0"

__all__ = [
    "GATED_ERROR_MESSAGE",
    "GATED_NAME_PREFIX",
    "ConfigError",
    "DuplicateTestError",
    "GatedCallbackError",
    "GatedTestPassedError",
    "UnknownFlagError",
    "FlagSet",
    "GateConfig",
    "load_config",
    "GateDecision",
    "Outcome",
    "PytestRunner",
    "RecordingRunner",
    "Registration",
    "TestRunner",
    "GatedSuite",
]
