"""
Shared pytest fixtures for the TrainKit test suite.
All fixtures run offline — the completion endpoint is an httpx.MockTransport.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

# Force mock mode: never call the real completion service during tests
os.environ["FORCE_MOCK_MODE"] = "true"
os.environ.setdefault("OPENAI_API_KEY", "<placeholder>")


import pytest

from factories import make_plan

from trainkit.fallback_content import FallbackContentProvider


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def plan():
    return make_plan()


@pytest.fixture
def provider():
    return FallbackContentProvider()
