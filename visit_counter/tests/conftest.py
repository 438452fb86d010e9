"""Pytest config to ensure project root is on sys.path during test collection.

Some environments run pytest with a different working directory which can
lead to "No module named 'visit_counter'" import errors. This file ensures
the repository root is available to the test process, and provides an
isolated app/store per test.
"""
import os
import sys

import pytest

_HERE = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(_HERE, "..", ".."))  # repo root

# Insert project root at front of sys.path if not already present
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from visit_counter import metrics  # noqa: E402
from visit_counter.config import Settings  # noqa: E402

API_KEY = "test-secret"


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset_all()
    yield
    metrics.reset_all()


@pytest.fixture
def counters_path(tmp_path):
    return str(tmp_path / "counters.json")


@pytest.fixture
def settings(counters_path, tmp_path):
    return Settings(
        counters_path=counters_path,
        api_key=API_KEY,
        frontend_dir=str(tmp_path / "frontend"),
    )


@pytest.fixture
def app(settings):
    from visit_counter.api.main import create_app

    return create_app(settings)
