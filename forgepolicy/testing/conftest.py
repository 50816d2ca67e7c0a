"""
Pytest plugin for forgepolicy testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["forgepolicy.testing.conftest"]
"""

from forgepolicy.testing.fixtures import (
    core_group,
    group_project,
    mock_store,
    other_user,
    owner_user,
    stored_project,
    user_project,
)

__all__ = [
    "mock_store",
    "owner_user",
    "other_user",
    "core_group",
    "user_project",
    "group_project",
    "stored_project",
]
