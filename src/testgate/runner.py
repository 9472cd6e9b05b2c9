"""Test runner adapters.

Gates decide; runners register. A runner exposes three primitives:
``register``, ``register_only`` (exclusive focus) and ``register_skip``.
"""

import asyncio
import inspect
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, MutableMapping, Optional

import pytest

from .common import DuplicateTestError

logger = logging.getLogger(__name__)

FOCUS_MARKER = "gated_focus"


class RegistrationMode(Enum):
    """Runner primitive used for a registration."""

    RUN = "run"
    ONLY = "only"
    SKIP = "skip"


async def _drain(awaitable):
    return await awaitable


def run_body(body: Callable[[], Any]) -> Any:
    """Call a test body, driving a returned awaitable to completion."""
    result = body()
    if inspect.isawaitable(result):
        return asyncio.run(_drain(result))
    return result


class TestRunner(ABC):
    """Registration primitives of a test runner."""

    __test__ = False  # not a pytest test class

    @abstractmethod
    def register(self, name: str, body: Callable[[], Any]) -> None:
        """Register a test that runs normally."""

    @abstractmethod
    def register_only(self, name: str, body: Callable[[], Any]) -> None:
        """Register a test with exclusive focus."""

    @abstractmethod
    def register_skip(
        self, name: str, body: Callable[[], Any], reason: Optional[str] = None
    ) -> None:
        """Register a test that is reported but never run."""


@dataclass
class Registration:
    """A test registered with a RecordingRunner."""

    name: str
    body: Callable[[], Any]
    mode: RegistrationMode
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for listing."""
        result = {"name": self.name, "mode": self.mode.value}
        if self.reason:
            result["reason"] = self.reason
        return result


class RecordingRunner(TestRunner):
    """Runner that records registrations in declaration order.

    Useful for inspecting what a suite would register without handing
    anything to a real test framework.
    """

    def __init__(self):
        self._registrations: dict[str, Registration] = {}

    def _add(self, registration: Registration) -> None:
        if registration.name in self._registrations:
            raise DuplicateTestError(registration.name)
        self._registrations[registration.name] = registration

    def register(self, name: str, body: Callable[[], Any]) -> None:
        self._add(Registration(name, body, RegistrationMode.RUN))

    def register_only(self, name: str, body: Callable[[], Any]) -> None:
        self._add(Registration(name, body, RegistrationMode.ONLY))

    def register_skip(
        self, name: str, body: Callable[[], Any], reason: Optional[str] = None
    ) -> None:
        self._add(Registration(name, body, RegistrationMode.SKIP, reason))

    def get(self, name: str) -> Optional[Registration]:
        """Get a registration by name, or None."""
        return self._registrations.get(name)

    def list_all(self) -> list[Registration]:
        """List all registrations in order."""
        return list(self._registrations.values())

    def list_by_mode(self, mode: RegistrationMode) -> list[Registration]:
        """List registrations made with a specific primitive."""
        return [r for r in self._registrations.values() if r.mode == mode]

    def names(self) -> list[str]:
        return list(self._registrations)


def collectable_name(name: str) -> str:
    """Turn a declared test name into a collectable function name.

    >>> collectable_name("[GATED, SHOULD FAIL] renders twice")
    'test_gated_should_fail_renders_twice'
    """
    slug = re.sub(r"\W+", "_", name).strip("_").lower()
    return f"test_{slug}" if slug else "test_unnamed"


class PytestRunner(TestRunner):
    """Registers tests into a module namespace for pytest to collect.

    Usage (at module level in a test file):
        runner = PytestRunner(globals())
    """

    def __init__(self, namespace: MutableMapping[str, Any]):
        self.namespace = namespace

    def _make_test(self, name: str, body: Callable[[], Any]) -> Callable[[], None]:
        func_name = collectable_name(name)
        if func_name in self.namespace:
            raise DuplicateTestError(name)
        # a decorated def with this name would rebind over the generated test
        if getattr(body, "__name__", None) == func_name:
            raise DuplicateTestError(name)

        def test() -> None:
            run_body(body)

        test.__name__ = func_name
        test.__qualname__ = func_name
        test.__module__ = self.namespace.get("__name__", test.__module__)
        test.__doc__ = name
        test.gated_name = name
        return test

    def _install(self, test: Callable[[], None]) -> None:
        self.namespace[test.__name__] = test
        logger.debug("Installed %s as %s", test.gated_name, test.__name__)

    def register(self, name: str, body: Callable[[], Any]) -> None:
        self._install(self._make_test(name, body))

    def register_only(self, name: str, body: Callable[[], Any]) -> None:
        test = self._make_test(name, body)
        self._install(getattr(pytest.mark, FOCUS_MARKER)(test))

    def register_skip(
        self, name: str, body: Callable[[], Any], reason: Optional[str] = None
    ) -> None:
        test = self._make_test(name, body)
        self._install(pytest.mark.skip(reason=reason or "skipped")(test))
