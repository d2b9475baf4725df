"""
Pytest configuration and fixtures for sanction tests.

This module provides shared fixtures used across unit and integration
tests.
"""

import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

from sanction.schema import Approval, Role


class CallCounter:
    """Records the arguments a rule function was called with."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def admin_role() -> Role:
    """A role tagged admin."""
    return Role(tag="admin", error="admin required")


@pytest.fixture
def guest_role() -> Role:
    """A role tagged guest, carrying a denial cause."""
    return Role(tag="guest", error="no admin")


@pytest.fixture
def admin_privilege():
    """A privilege that only accepts admin roles, reporting the role's error."""

    def privilege(role: Role) -> Approval:
        return Approval(value=role.tag == "admin", error=role.error)

    return privilege


@pytest.fixture
def counter() -> CallCounter:
    """A fresh call counter."""
    return CallCounter()


@pytest.fixture
def sample_policy_yaml() -> str:
    """Return a simple grant policy YAML for testing."""
    return """
boundary: deny_by_default
allow_scopes:
  - "repo:*"
  - "issues:read"
deny_scopes:
  - "repo:delete"
"""


@pytest.fixture
def strict_policy_yaml() -> str:
    """Return a strict policy YAML that denies every scope."""
    return """
boundary: deny_by_default
allow_scopes: []
"""
