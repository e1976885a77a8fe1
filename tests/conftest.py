"""
Test configuration for the Lox interpreter tests
"""

import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from session import Session  # noqa: E402


@pytest.fixture
def output():
    """Collects everything print statements write."""
    return []


@pytest.fixture
def session(output):
    return Session(out=output.append)
