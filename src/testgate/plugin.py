"""pytest plugin providing exclusive focus for gated tests.

Enable it from a conftest.py:

    pytest_plugins = ["testgate.plugin"]

When any test in a file carries the ``gated_focus`` marker, every other
test in that file is deselected. Files without focused tests are left
alone.
"""

from .runner import FOCUS_MARKER


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        f"{FOCUS_MARKER}: run only the focused tests of this file",
    )


def pytest_collection_modifyitems(session, config, items):
    focused_files = {
        item.nodeid.split("::", 1)[0]
        for item in items
        if item.get_closest_marker(FOCUS_MARKER) is not None
    }
    if not focused_files:
        return

    kept = []
    deselected = []
    for item in items:
        path = item.nodeid.split("::", 1)[0]
        if path in focused_files and item.get_closest_marker(FOCUS_MARKER) is None:
            deselected.append(item)
        else:
            kept.append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = kept
