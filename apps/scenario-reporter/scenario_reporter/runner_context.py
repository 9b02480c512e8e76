"""Lookup of the test the host runner is currently executing."""

from __future__ import annotations

import os
import re
from typing import Callable, Optional

PYTEST_ENV_VAR = "PYTEST_CURRENT_TEST"

# TestClass::test_name[param] (call), after the "path::" prefix
_PYTEST_TEST_PATTERN = re.compile(r"^(?P<name>\S+?)(?:\[[^\]]*\])?(?: \((?P<phase>\w+)\))?$")

CurrentTestLookup = Callable[[], Optional[str]]


class TestNameUnavailableError(RuntimeError):
    """Raised when a test context exists but its name cannot be read."""

    __test__ = False


def pytest_current_test() -> str | None:
    """Return the running pytest test as ``Class.test_name``.

    Returns ``None`` outside of a pytest run.
    """

    raw = os.environ.get(PYTEST_ENV_VAR)
    if raw is None:
        return None
    path, separator, test = raw.strip().partition("::")
    match = _PYTEST_TEST_PATTERN.match(test)
    if not path or not separator or match is None:
        raise TestNameUnavailableError(f"Unrecognised {PYTEST_ENV_VAR} value: {raw!r}")
    return match.group("name").replace("::", ".")


def fixed_test_name(name: str | None) -> CurrentTestLookup:
    """Lookup that always reports ``name``; ``None`` means no test context."""

    def _lookup() -> str | None:
        return name

    return _lookup
