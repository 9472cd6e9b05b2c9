"""Flag gate.

A gate predicate is a callable taking the flag set and returning a
truthy value when the test is expected to pass under those flags.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from .result import GateDecision, expect_failure_outcome, run_outcome

logger = logging.getLogger(__name__)

GatePredicate = Callable[[Mapping], Any]


def evaluate_gate(flags: Mapping, predicate: GatePredicate) -> tuple[bool, Optional[Exception]]:
    """Evaluate a predicate, capturing any error it raises.

    Returns:
        Tuple of (should_pass, error). ``error`` is None unless the
        predicate raised, in which case ``should_pass`` is False.
    """
    try:
        return bool(predicate(flags)), None
    except Exception as e:
        return False, e


def decide_gate(flags: Mapping, predicate: GatePredicate, focus: bool = False) -> GateDecision:
    """Decide how a flag-gated test is registered.

    A predicate that raises still registers a running test so the broken
    gate shows up as a failure.
    """
    should_pass, error = evaluate_gate(flags, predicate)
    if error is not None:
        logger.warning(
            "Gate predicate %r raised %s: %s",
            predicate,
            type(error).__name__,
            error,
        )
        return GateDecision(
            outcome=run_outcome(focus),
            reason="gate predicate raised",
            error=error,
        )

    if should_pass:
        return GateDecision(outcome=run_outcome(focus))
    return GateDecision(
        outcome=expect_failure_outcome(focus),
        reason="gate predicate is false; test must fail",
    )


def check_gate(flags: Mapping, predicate: GatePredicate) -> bool:
    """Inline gate check for use inside a test body.

    Errors from the predicate propagate to the caller.
    """
    return bool(predicate(flags))
