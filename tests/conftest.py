import sys
from pathlib import Path

import pytest

# Shared helpers live in tests/test_mocks.py
sys.path.insert(0, str(Path(__file__).parent))

from test_mocks import create_mock_settings  # noqa: E402


@pytest.fixture
def settings():
    return create_mock_settings()
