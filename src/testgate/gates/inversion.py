"""Failure inversion for gated tests.

A test whose gate predicate is false is registered with an inverted body:
it passes while the original body fails and fails (with
``GatedTestPassedError``) once the original body starts passing.
"""

import inspect
import traceback
import types
from typing import Any, Callable

import pytest

from ..common import GatedCallbackError, GatedTestPassedError
from ..runner import run_body

_NAMED = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def declared_arity(body: Callable) -> int:
    """Count required parameters of ``body``, keyword-only included.

    Parameters with defaults and ``*args``/``**kwargs`` are not counted.
    Callables without an introspectable signature count as zero.
    """
    try:
        params = inspect.signature(body).parameters.values()
    except (TypeError, ValueError):
        return 0
    return sum(1 for p in params if p.kind in _NAMED and p.default is p.empty)


def capture_stack_trace(error: BaseException, frame: types.FrameType) -> BaseException:
    """Anchor ``error`` at ``frame``.

    The error's traceback is set to a single entry for ``frame`` so that
    when it is raised later the report ends at that call site. For
    ``GatedTestPassedError`` the frame summary is also kept on
    ``error.declaration``.

    Returns:
        The same error, for chaining.
    """
    tb = types.TracebackType(None, frame, frame.f_lasti, frame.f_lineno)
    error.__traceback__ = tb
    error._declaration_tb = tb
    if isinstance(error, GatedTestPassedError):
        error.declaration = traceback.extract_stack(frame, limit=1)[-1]
    return error


def _body_name(body: Callable) -> str:
    return getattr(body, "__qualname__", None) or repr(body)


def expect_test_to_fail(body: Callable[[], Any], error: BaseException) -> None:
    """Run ``body`` and succeed only if it fails.

    The body is called outside any event loop, exactly as an ordinary
    test body would be, so sync bodies that call ``asyncio.run``
    themselves behave the same inverted or not. A returned awaitable is
    driven to completion before the outcome is judged.

    Args:
        body: Zero-argument callable, optionally returning an awaitable.
        error: Raised when the body completes without error.

    Raises:
        GatedCallbackError: If ``body`` declares parameters. Raised before
            the body is called.
        BaseException: ``error``, when the body passes.
    """
    if declared_arity(body) > 0:
        raise GatedCallbackError(_body_name(body))

    try:
        run_body(body)
    except (Exception, pytest.fail.Exception):
        return

    raise error.with_traceback(getattr(error, "_declaration_tb", None))


def make_inverted_body(body: Callable[[], Any], error: BaseException) -> Callable[[], None]:
    """Wrap ``body`` so the returned callable passes iff ``body`` fails."""

    def inverted() -> None:
        expect_test_to_fail(body, error)

    inverted.__name__ = getattr(body, "__name__", "inverted")
    inverted.__doc__ = body.__doc__
    inverted.inverted_body = body
    return inverted


def make_raising_body(error: BaseException) -> Callable[[], None]:
    """Body that re-raises an error captured while evaluating a gate."""

    def raising() -> None:
        raise error

    return raising
