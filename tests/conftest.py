"""
Pytest configuration and shared fixtures.
"""

import itertools

import httpx
import pytest
from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.testclient import TestClient

from proforma.main import app
from proforma.api.session import NoticeBoard, get_notices, get_session
from proforma.config import Settings
from proforma.schemas import InputState
from proforma.session import ProFormaSession
from proforma.store.client import ScenarioStoreClient

STORE_URL = "http://store.test/api/proforma"


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


class FakeStore:
    """In-memory scenario collection standing in for the remote store."""

    def __init__(self):
        self.scenarios = {}
        self.requests = []
        self._ids = itertools.count(1)

    def add(self, title: str, inputs: dict, results: dict) -> str:
        scenario_id = str(next(self._ids))
        self.scenarios[scenario_id] = {
            "title": title,
            "inputs": inputs,
            "results": results,
        }
        return scenario_id


def build_store_app(store: FakeStore) -> FastAPI:
    """Serve a FakeStore over the scenario collection routes."""
    store_app = FastAPI()

    @store_app.middleware("http")
    async def record_request(request: Request, call_next):
        store.requests.append((request.method, request.url.path))
        return await call_next(request)

    @store_app.get("/api/proforma")
    async def list_scenarios():
        return [
            {"id": scenario_id, "title": scenario["title"]}
            for scenario_id, scenario in store.scenarios.items()
        ]

    @store_app.post("/api/proforma", status_code=201)
    async def create_scenario(payload: dict = Body(...)):
        scenario_id = store.add(payload["title"], payload["inputs"], payload["results"])
        return {"id": scenario_id, **store.scenarios[scenario_id]}

    @store_app.get("/api/proforma/{scenario_id}")
    async def get_scenario(scenario_id: str):
        if scenario_id not in store.scenarios:
            raise HTTPException(status_code=404, detail="Scenario not found")
        scenario = store.scenarios[scenario_id]
        return {"inputs": scenario["inputs"], "results": scenario["results"]}

    return store_app


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def store_client(fake_store):
    """Store client wired to the fake store without any network."""
    transport = httpx.ASGITransport(app=build_store_app(fake_store))
    return ScenarioStoreClient(STORE_URL, http_client=httpx.AsyncClient(transport=transport))


@pytest.fixture
def failing_store_client():
    """Build a store client whose every request is answered by a handler."""

    def build(handler) -> ScenarioStoreClient:
        transport = httpx.MockTransport(handler)
        return ScenarioStoreClient(STORE_URL, http_client=httpx.AsyncClient(transport=transport))

    return build


@pytest.fixture
def example_inputs():
    """10 units at $1,000 a month, $500k loan at 6.5% over 10 years."""
    return InputState(
        rent=1000,
        unit_count=10,
        vacancy_rate=0.1,
        opex_rate=0.3,
        loan_amount=500000,
        interest_rate=6.5,
        amortization_years=10,
        period_type="yearly",
    )


@pytest.fixture
def test_settings(tmp_path):
    return Settings(store_base_url=STORE_URL, export_dir=str(tmp_path))


@pytest.fixture
def notices():
    """Messages the session showed to the user."""
    return []


@pytest.fixture
def session(store_client, notices, test_settings):
    return ProFormaSession(store_client, notifier=notices.append, settings=test_settings)


@pytest.fixture
def api_session(store_client, test_settings):
    """Session served by the API, backed by the fake store."""
    board = NoticeBoard()
    api_session = ProFormaSession(store_client, notifier=board, settings=test_settings)
    app.dependency_overrides[get_session] = lambda: api_session
    app.dependency_overrides[get_notices] = lambda: board
    yield api_session
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_session):
    """Create test client."""
    return TestClient(app)
