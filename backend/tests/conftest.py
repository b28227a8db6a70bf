"""
conftest.py — Shared pytest fixtures for the SmartRate Estimator backend test suite.

No network or LLM provider is touched: services receive a FakeLLM that
replays canned responses, and the catalog store lives in pytest's tmp_path.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import json
import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Fake LLM
# ---------------------------------------------------------------------------

class FakeLLM:
    """
    Stands in for LLMClient. Each call pops the next queued response; an
    Exception instance in the queue is raised instead of returned. Dicts and
    lists are JSON-encoded. Every call is recorded in ``calls``.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def _next(self):
        if not self.responses:
            raise AssertionError("FakeLLM called more times than responses were queued")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        if isinstance(resp, (dict, list)):
            return json.dumps(resp)
        return resp

    async def chat(self, messages, temperature=None, json_mode=False, max_tokens=None):
        self.calls.append({"kind": "chat", "messages": messages, "json_mode": json_mode})
        return self._next()

    async def vision(self, images_base64, prompt, mime_type="image/jpeg", temperature=None, json_mode=False):
        self.calls.append({
            "kind": "vision",
            "images": images_base64,
            "prompt": prompt,
            "mime_type": mime_type,
            "json_mode": json_mode,
        })
        return self._next()


@pytest.fixture
def fake_llm():
    return FakeLLM()


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_items():
    """
    Five catalog entries across three facilities, with fixed ids so tests can
    refer to them:

      tmt    TMT steel Fe500D        75.24 /kg    Culvert & Approach
      sheet  Profile roofing sheet  953.93 /m²    Canopy
      paint  Enamel paint           159.62 /m²    Canopy
      yard   LED Yard light 100 W  7097.05 /each  Electrification
      gsb    GSB (CBR 30)          2268.53 /m³    Culvert & Approach
    """
    from app.models.catalog_schema import CatalogItem
    rows = [
        ("tmt", "TMT steel Fe500D", "kg", 75.24, "Thermo-mechanically treated reinforcement bars", "Culvert & Approach"),
        ("sheet", "Profile roofing sheet", "m²", 953.93, "Pre-painted galvalume profile roofing sheets", "Canopy"),
        ("paint", "Enamel paint", "m²", 159.62, "Two coats of synthetic enamel paint over primer", "Canopy"),
        ("yard", "LED Yard light 100 W", "each", 7097.05, "100W IP66 LED Yard light fixture", "Electrification"),
        ("gsb", "GSB (CBR 30)", "m³", 2268.53, "Granular Sub-Base with CBR value 30", "Culvert & Approach"),
    ]
    return [
        CatalogItem(id=i, name=n, unit=u, rate=r, scope_of_work=s, source=src, timestamp=1_700_000_000_000)
        for i, n, u, r, s, src in rows
    ]


@pytest.fixture
def repo(tmp_path, sample_items):
    """A saved repository holding sample_items, stored under tmp_path."""
    from app.services.catalog_repository import CatalogRepository
    repository = CatalogRepository(str(tmp_path), "test_store").load()
    repository.replace_all(sample_items)
    repository.save()
    return repository


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def client(repo, fake_llm):
    """TestClient with the repository and FakeLLM injected via dependency overrides."""
    from fastapi.testclient import TestClient
    from app.main import app
    from app.api.deps import get_llm_client, get_repository

    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    try:
        # No context manager: the lifespan (which loads the real store) does not run
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
