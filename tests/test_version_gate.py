"""Tests for the version gate.

Tests cover:
- Range matching against the subject version
- Strict range parsing
- Run/skip decisions and focus
"""

import pytest

from testgate.gates.result import GateDecision, Outcome
from testgate.gates.version import (
    IGNORED_REASON,
    decide_ignored,
    decide_version,
    is_valid_version,
    parse_range,
    satisfies,
)


class TestSatisfies:
    """Tests for range matching."""

    @pytest.mark.parametrize(
        "version,version_range",
        [
            ("18.2.0", ">=17.0.0"),
            ("18.2.0", "^18.0.0"),
            ("18.2.0", "*"),
            ("18.2.0", "17.x || 18.x"),
            ("17.0.2", "16.0.0 - 17.0.2"),
        ],
    )
    def test_matching_ranges(self, version, version_range):
        """Should match versions inside the range."""
        assert satisfies(version, version_range) is True

    @pytest.mark.parametrize(
        "version,version_range",
        [
            ("18.2.0", ">=19.0.0"),
            ("18.2.0", "<18.0.0"),
            ("18.2.0", "~18.1.0"),
        ],
    )
    def test_non_matching_ranges(self, version, version_range):
        """Should not match versions outside the range."""
        assert satisfies(version, version_range) is False

    def test_prerelease_excluded_from_plain_range(self):
        """Prereleases should not satisfy a range without a prerelease tag."""
        assert satisfies("19.0.0-canary-1", ">=18.0.0") is False

    def test_invalid_range_raises(self):
        """A malformed range should raise instead of silently mismatching."""
        with pytest.raises(ValueError):
            satisfies("18.2.0", "not a range!!")

    def test_parse_range_invalid(self):
        """parse_range should propagate syntax errors."""
        with pytest.raises(ValueError):
            parse_range("not a range!!")


class TestIsValidVersion:
    """Tests for subject version validation."""

    def test_valid(self):
        assert is_valid_version("18.2.0") is True

    def test_invalid(self):
        assert is_valid_version("eighteen") is False


class TestDecideVersion:
    """Tests for version gate decisions."""

    def test_satisfied_runs(self):
        """Range >=17.0.0 against 18.2.0 should run."""
        decision = decide_version("18.2.0", ">=17.0.0")
        assert decision.outcome == Outcome.RUN
        assert decision.runs is True
        assert decision.reason is None

    def test_unsatisfied_skips(self):
        """Range >=19.0.0 against 18.2.0 should skip with a reason."""
        decision = decide_version("18.2.0", ">=19.0.0")
        assert decision.outcome == Outcome.SKIP
        assert decision.runs is False
        assert "18.2.0" in decision.reason
        assert ">=19.0.0" in decision.reason

    def test_focus_when_satisfied(self):
        """Focus should only apply when the range matches."""
        assert decide_version("18.2.0", ">=17.0.0", focus=True).outcome == Outcome.RUN_ONLY
        assert decide_version("18.2.0", ">=19.0.0", focus=True).outcome == Outcome.SKIP

    def test_invalid_range_propagates(self):
        """Range syntax errors should not be turned into skips."""
        with pytest.raises(ValueError):
            decide_version("18.2.0", "not a range!!")

    def test_ignored(self):
        """Ignored tests should always skip."""
        decision = decide_ignored()
        assert decision.outcome == Outcome.SKIP
        assert decision.reason == IGNORED_REASON


class TestGateDecision:
    """Tests for GateDecision serialization."""

    def test_to_dict_run(self):
        d = GateDecision(outcome=Outcome.RUN).to_dict()
        assert d == {"outcome": "RUN", "runs": True}

    def test_to_dict_with_error(self):
        d = GateDecision(
            outcome=Outcome.RUN, reason="gate predicate raised", error=KeyError("x")
        ).to_dict()
        assert d["reason"] == "gate predicate raised"
        assert d["error"].startswith("KeyError")

    def test_outcome_properties(self):
        assert Outcome.RUN_ONLY_EXPECTING_FAILURE.focused is True
        assert Outcome.RUN_ONLY_EXPECTING_FAILURE.expects_failure is True
        assert Outcome.RUN.focused is False
        assert Outcome.SKIP.expects_failure is False
