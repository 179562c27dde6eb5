"""
Pytest configuration.
Puts the project root on sys.path so tests import app, services, etc. directly,
and makes sure no dependency override leaks from one test into the next.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def _clear_dependency_overrides():
    yield
    from main import app

    app.dependency_overrides.clear()
