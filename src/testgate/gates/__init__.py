"""Gate evaluation for conditional test registration.

Gates are pure decisions over the subject version and the flag set;
they never touch a test runner themselves.
"""

from .result import GateDecision, Outcome
from .version import decide_ignored, decide_version, parse_range, satisfies
from .flags import check_gate, decide_gate, evaluate_gate
from .composed import decide_version_with_gate
from .inversion import (
    capture_stack_trace,
    expect_test_to_fail,
    make_inverted_body,
    make_raising_body,
)

__all__ = [
    "GateDecision",
    "Outcome",
    "decide_ignored",
    "decide_version",
    "parse_range",
    "satisfies",
    "check_gate",
    "decide_gate",
    "evaluate_gate",
    "decide_version_with_gate",
    "capture_stack_trace",
    "expect_test_to_fail",
    "make_inverted_body",
    "make_raising_body",
]
