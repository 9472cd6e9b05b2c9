"""Declaration API for conditionally registered tests.

A ``GatedSuite`` couples a resolved ``GateConfig`` with a ``TestRunner``.
Each declaration evaluates its gate immediately and hands the test to
one of the runner's primitives.

Usage (at module level in a pytest file):

    suite = GatedSuite.for_module(globals(), default_version="18.2.0")

    suite.version_test(">=17.0.0", "renders fragments", body)

    @suite.gated_test(lambda flags: flags.enable_transitions, "runs transitions")
    def runs_transitions():
        ...

Decorated bodies are returned unchanged, so do not give them a ``test_``
name or pytest collects them a second time. A body named exactly like
the generated test is rejected with ``DuplicateTestError``.
"""

import logging
import sys
from collections.abc import Mapping
from types import FrameType
from typing import Any, Callable, MutableMapping, Optional

from .common import GATED_NAME_PREFIX, GatedTestPassedError
from .config import GateConfig, load_config
from .gates.composed import decide_version_with_gate
from .gates.flags import GatePredicate, check_gate, decide_gate
from .gates.inversion import capture_stack_trace, make_inverted_body, make_raising_body
from .gates.result import GateDecision, Outcome
from .gates.version import decide_ignored, decide_version
from .runner import PytestRunner, TestRunner

logger = logging.getLogger(__name__)

Body = Callable[[], Any]


class GatedSuite:
    """Test declarations gated on the subject version and flag set."""

    def __init__(self, config: GateConfig, runner: TestRunner):
        self.config = config
        self.runner = runner

    @classmethod
    def for_module(
        cls,
        namespace: MutableMapping[str, Any],
        config: Optional[GateConfig] = None,
        default_version: Optional[str] = None,
        flags: Optional[Mapping] = None,
    ) -> "GatedSuite":
        """Create a suite registering into a pytest module namespace.

        Args:
            namespace: The test module's ``globals()``.
            config: Pre-resolved configuration. Resolved from the
                environment when omitted.
            default_version: Subject version when no override is set.
            flags: Extra flags merged over the environment's.
        """
        if config is None:
            config = load_config(default_version=default_version, flags=flags)
        return cls(config, PytestRunner(namespace))

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _declare(self, body: Optional[Body], register: Callable[[Body], None]):
        if body is not None:
            register(body)
            return None

        def decorator(func: Body) -> Body:
            register(func)
            return func

        return decorator

    def _apply(self, decision: GateDecision, name: str, body: Body, site: FrameType) -> None:
        outcome = decision.outcome
        logger.debug("Registering %r as %s", name, outcome.value)

        if outcome is Outcome.SKIP:
            self.runner.register_skip(name, body, decision.reason)
            return

        if decision.error is not None:
            body = make_raising_body(decision.error)
        elif outcome.expects_failure:
            error = capture_stack_trace(GatedTestPassedError(), site)
            name = f"{GATED_NAME_PREFIX} {name}"
            body = make_inverted_body(body, error)

        if outcome.focused:
            self.runner.register_only(name, body)
        else:
            self.runner.register(name, body)

    # -------------------------------------------------------------------------
    # Version gate
    # -------------------------------------------------------------------------

    def version_test(self, version_range: str, name: str, body: Optional[Body] = None):
        """Run the test only when the subject version satisfies the range."""
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_version(self.config.subject_version, version_range),
                name,
                b,
                site,
            ),
        )

    def version_test_focus(
        self, version_range: str, name: str, body: Optional[Body] = None
    ):
        """Like ``version_test`` but with exclusive focus."""
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_version(self.config.subject_version, version_range, focus=True),
                name,
                b,
                site,
            ),
        )

    def ignore_for_version(self, name: str, body: Optional[Body] = None):
        """Skip the test for this version testing pass."""
        site = sys._getframe(1)
        return self._declare(
            body, lambda b: self._apply(decide_ignored(), name, b, site)
        )

    # -------------------------------------------------------------------------
    # Flag gate
    # -------------------------------------------------------------------------

    def gated_test(self, predicate: GatePredicate, name: str, body: Optional[Body] = None):
        """Run normally when the predicate holds, inverted otherwise."""
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_gate(self.config.flags, predicate), name, b, site
            ),
        )

    def gated_test_focus(
        self, predicate: GatePredicate, name: str, body: Optional[Body] = None
    ):
        """Like ``gated_test`` but with exclusive focus."""
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_gate(self.config.flags, predicate, focus=True), name, b, site
            ),
        )

    # -------------------------------------------------------------------------
    # Version + flag gate
    # -------------------------------------------------------------------------

    def version_gated_test(
        self,
        version_range: str,
        predicate: GatePredicate,
        name: str,
        body: Optional[Body] = None,
    ):
        """Flag gate that only applies inside the version range.

        Outside the range the test is skipped and the predicate is never
        called.
        """
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_version_with_gate(
                    self.config.subject_version,
                    self.config.flags,
                    version_range,
                    predicate,
                ),
                name,
                b,
                site,
            ),
        )

    def version_gated_test_focus(
        self,
        version_range: str,
        predicate: GatePredicate,
        name: str,
        body: Optional[Body] = None,
    ):
        """Like ``version_gated_test`` but with exclusive focus."""
        site = sys._getframe(1)
        return self._declare(
            body,
            lambda b: self._apply(
                decide_version_with_gate(
                    self.config.subject_version,
                    self.config.flags,
                    version_range,
                    predicate,
                    focus=True,
                ),
                name,
                b,
                site,
            ),
        )

    def ignore_for_version_with_gate(
        self,
        version_range: str,
        predicate: GatePredicate,
        name: str,
        body: Optional[Body] = None,
    ):
        """Skip the test regardless of range and flags."""
        site = sys._getframe(1)
        return self._declare(
            body, lambda b: self._apply(decide_ignored(), name, b, site)
        )

    # -------------------------------------------------------------------------
    # Inline check
    # -------------------------------------------------------------------------

    def gate(self, predicate: GatePredicate) -> bool:
        """Evaluate a predicate against the flag set; registers nothing."""
        return check_gate(self.config.flags, predicate)
