"""End-to-end tests running gated suites under pytest.

Tests cover:
- Outcomes of every declaration kind in a real session
- Exclusive focus deselecting the rest of the file
- Awaitable bodies
"""

import pytest

CONFTEST = 'pytest_plugins = ["testgate.plugin"]\n'

SUITE_HEADER = """
from testgate import GateConfig, GatedSuite

suite = GatedSuite.for_module(
    globals(),
    config=GateConfig("18.2.0", {"enable_something": False, "enable_other": True}),
)


def failing_body():
    raise Exception("not supported")


def passing_body():
    pass


def raising_predicate(flags):
    raise RuntimeError("bad gate")
"""


@pytest.fixture
def gated_pytester(pytester):
    pytester.makeconftest(CONFTEST)
    return pytester


class TestGatedSession:
    """Tests for gated suites collected by pytest."""

    def test_outcomes(self, gated_pytester):
        gated_pytester.makepyfile(
            SUITE_HEADER
            + """
suite.version_test(">=17.0.0", "runs on current versions", passing_body)
suite.version_test(">=19.0.0", "needs a newer version", failing_body)
suite.ignore_for_version("ignored this pass", failing_body)
suite.gated_test(lambda f: f.enable_something is True, "still unsupported", failing_body)
suite.gated_test(lambda f: f.enable_something is True, "now fixed", passing_body)
suite.gated_test(raising_predicate, "broken gate", passing_body)
suite.version_gated_test(">=19.0.0", raising_predicate, "future gate", passing_body)
suite.version_gated_test(">=17.0.0", lambda f: f.enable_other, "current gate", passing_body)
"""
        )
        result = gated_pytester.runpytest("-rs")

        result.assert_outcomes(passed=3, failed=2, skipped=3)
        result.stdout.fnmatch_lines(
            [
                "*test_gated_should_fail_now_fixed*",
                "*Gated test was expected to fail, but it passed.*",
            ]
        )
        result.stdout.fnmatch_lines(["*does not satisfy >=19.0.0*"])

    def test_focus_deselects_rest_of_file(self, gated_pytester):
        gated_pytester.makepyfile(
            SUITE_HEADER
            + """
suite.version_test_focus(">=17.0.0", "focused", passing_body)
suite.version_test(">=17.0.0", "not focused", failing_body)
suite.gated_test(lambda f: True, "also not focused", failing_body)
"""
        )
        result = gated_pytester.runpytest()
        result.assert_outcomes(passed=1, deselected=2)

    def test_focus_scoped_to_file(self, gated_pytester):
        gated_pytester.makepyfile(
            test_focused=SUITE_HEADER
            + """
suite.gated_test_focus(lambda f: f.enable_something, "focused inverted", failing_body)
suite.version_test(">=17.0.0", "dropped", passing_body)
""",
            test_plain=SUITE_HEADER
            + """
suite.version_test(">=17.0.0", "kept", passing_body)
""",
        )
        result = gated_pytester.runpytest()
        result.assert_outcomes(passed=2, deselected=1)

    def test_async_bodies(self, gated_pytester):
        gated_pytester.makepyfile(
            SUITE_HEADER
            + """
import asyncio


async def async_passing():
    await asyncio.sleep(0)


async def async_failing():
    await asyncio.sleep(0)
    raise ValueError("still broken")


suite.version_test(">=17.0.0", "awaits", async_passing)
suite.gated_test(lambda f: f.enable_something, "awaits inverted", async_failing)
"""
        )
        result = gated_pytester.runpytest()
        result.assert_outcomes(passed=2)

    def test_invalid_range_fails_collection(self, gated_pytester):
        gated_pytester.makepyfile(
            SUITE_HEADER
            + """
suite.version_test("not a range!!", "broken range", passing_body)
"""
        )
        result = gated_pytester.runpytest()
        result.assert_outcomes(errors=1)
