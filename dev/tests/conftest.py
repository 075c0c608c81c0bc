"""pytest glue: every test_* function takes the shared results tracker."""

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent
SRC_DIR = TESTS_DIR.parent.parent / "src"

sys.path.insert(0, str(SRC_DIR))
sys.path.insert(0, str(TESTS_DIR))

from test_api import TestResults


@pytest.fixture
def results():
    tracker = TestResults()
    yield tracker
    assert tracker.failed == 0, "\n".join(tracker.errors)
