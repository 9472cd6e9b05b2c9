"""Gate decision types.

Defines the outcome of evaluating a gate, independent of any runner.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import json


class Outcome(Enum):
    """How a declared test is registered."""

    RUN = "RUN"
    RUN_ONLY = "RUN_ONLY"  # Exclusive focus
    SKIP = "SKIP"
    RUN_EXPECTING_FAILURE = "RUN_EXPECTING_FAILURE"
    RUN_ONLY_EXPECTING_FAILURE = "RUN_ONLY_EXPECTING_FAILURE"

    @property
    def focused(self) -> bool:
        return self in (Outcome.RUN_ONLY, Outcome.RUN_ONLY_EXPECTING_FAILURE)

    @property
    def expects_failure(self) -> bool:
        return self in (
            Outcome.RUN_EXPECTING_FAILURE,
            Outcome.RUN_ONLY_EXPECTING_FAILURE,
        )


def run_outcome(focus: bool) -> Outcome:
    """Outcome for a test that runs normally."""
    return Outcome.RUN_ONLY if focus else Outcome.RUN


def expect_failure_outcome(focus: bool) -> Outcome:
    """Outcome for a test that runs inverted."""
    return (
        Outcome.RUN_ONLY_EXPECTING_FAILURE if focus else Outcome.RUN_EXPECTING_FAILURE
    )


@dataclass
class GateDecision:
    """Result of evaluating a gate for one declared test.

    ``error`` is set when the gate predicate itself raised; the test is
    then registered with a body that re-raises it.
    """

    outcome: Outcome
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def runs(self) -> bool:
        return self.outcome is not Outcome.SKIP

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "outcome": self.outcome.value,
            "runs": self.runs,
        }
        if self.reason:
            result["reason"] = self.reason
        if self.error is not None:
            result["error"] = f"{type(self.error).__name__}: {self.error}"
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
