"""Version gate composed with a flag gate."""

from collections.abc import Mapping

from .flags import GatePredicate, decide_gate
from .result import GateDecision
from .version import decide_version


def decide_version_with_gate(
    version: str,
    flags: Mapping,
    version_range: str,
    predicate: GatePredicate,
    focus: bool = False,
) -> GateDecision:
    """Decide registration for a test gated on both version and flags.

    The predicate is only evaluated when the version matches; outside the
    range the test is skipped no matter what the flags say.
    """
    version_decision = decide_version(version, version_range)
    if not version_decision.runs:
        return version_decision
    return decide_gate(flags, predicate, focus)
