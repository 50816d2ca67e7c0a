"""forgepolicy testing utilities.

Provides a mock record store, record builders and fixtures for testing
code built on forgepolicy.
"""

from forgepolicy.testing.fixtures import (
    create_mock_group,
    create_mock_project,
    create_mock_repository,
    create_mock_user,
)
from forgepolicy.testing.mock import MockCall, MockFailure, MockRecordStore

__all__ = [
    # Mock store
    "MockRecordStore",
    "MockCall",
    "MockFailure",
    # Helper functions
    "create_mock_user",
    "create_mock_group",
    "create_mock_repository",
    "create_mock_project",
]
