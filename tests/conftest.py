import os
import sys

import pytest

# Add project root and web_dashboard to path so tests can import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'web_dashboard')))

from fakes import FakeSupabase


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep FEEDLOT_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith('FEEDLOT_'):
            monkeypatch.delenv(name, raising=False)
    import config.settings
    monkeypatch.setattr(config.settings, '_settings', None)
