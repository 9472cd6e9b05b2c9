"""Version gate.

Matches the subject version against npm-style semantic version ranges
and decides whether a declared test runs or is skipped.
"""

import logging

import nodesemver

from .result import GateDecision, Outcome, run_outcome

logger = logging.getLogger(__name__)

IGNORED_REASON = "ignored for this version testing pass"


def is_valid_version(version: str) -> bool:
    """Return True if ``version`` is a strict semantic version."""
    try:
        return nodesemver.parse(version, False) is not None
    except ValueError:
        return False


def parse_range(version_range: str):
    """Parse a range expression strictly.

    Args:
        version_range: Range such as ``">=17.0.0"`` or ``"17.x || 18.x"``.

    Returns:
        The parsed range object.

    Raises:
        ValueError: If the range does not parse.
    """
    return nodesemver.make_range(version_range, False)


def satisfies(version: str, version_range: str) -> bool:
    """Return True if ``version`` falls inside ``version_range``.

    Unlike the underlying matcher, a malformed range is an error here
    instead of a silent mismatch.
    """
    parse_range(version_range)
    return bool(nodesemver.satisfies(version, version_range, False))


def skip_reason(version: str, version_range: str) -> str:
    return f"subject version {version} does not satisfy {version_range}"


def decide_version(version: str, version_range: str, focus: bool = False) -> GateDecision:
    """Decide how a version-gated test is registered.

    Args:
        version: Resolved subject version.
        version_range: Declared range.
        focus: Register with exclusive focus when the range matches.

    Returns:
        GateDecision with RUN/RUN_ONLY when satisfied, SKIP otherwise.
    """
    if satisfies(version, version_range):
        return GateDecision(outcome=run_outcome(focus))

    logger.debug("Version %s outside %s", version, version_range)
    return GateDecision(outcome=Outcome.SKIP, reason=skip_reason(version, version_range))


def decide_ignored() -> GateDecision:
    """Decision for tests excluded from the current version testing pass."""
    return GateDecision(outcome=Outcome.SKIP, reason=IGNORED_REASON)
