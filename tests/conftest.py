"""
Shared pytest fixtures for the wikiclient test suite.

HTTP is mocked with respx in the tests themselves; no fixture here opens a
real connection.
"""

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from tests.constants import API_URL, TEST_USER_AGENT
from wikiclient import WikiClient


@pytest.fixture
def wiki() -> Generator[WikiClient, None, None]:
    """
    Create a client for the test endpoint.

    Yields:
        WikiClient with the test User-Agent; closed after the test.
    """
    with WikiClient(API_URL, user_agent=TEST_USER_AGENT) as client:
        yield client


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Run the test with no WIKI_* (or any other) environment variables."""
    with patch.dict(os.environ, {}, clear=True):
        yield
