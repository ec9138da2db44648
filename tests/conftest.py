"""
Global test configuration and fixtures
"""

from pathlib import Path

import pytest

from smgo.config import settings
from tests.helpers.go_helpers import TESTDATA


@pytest.fixture
def testdata() -> Path:
    return TESTDATA


@pytest.fixture(autouse=True)
def reset_print_blocks():
    """Keep the process-wide debug toggle off between tests"""
    yield
    settings.print_blocks = False
