"""
Tests for the remote scenario store client.
"""

import httpx
import pytest

from proforma.calculations.proforma import compute
from proforma.schemas import ScenarioCreate
from proforma.store.client import ScenarioStoreClient, ScenarioStoreError


pytestmark = pytest.mark.anyio


class TestStoreClient:
    """Test store requests against the fake store."""

    async def test_list_empty(self, store_client):
        assert await store_client.list_scenarios() == []

    async def test_create_and_get(self, store_client, fake_store, example_inputs):
        """Test a created scenario can be fetched back unchanged."""
        results = compute(example_inputs)
        created = await store_client.create_scenario(
            ScenarioCreate(title="Base Case", inputs=example_inputs, results=results)
        )

        assert created.id == "1"
        assert created.title == "Base Case"
        # Stored with the front end's field names
        assert fake_store.scenarios["1"]["inputs"]["unitCount"] == 10

        detail = await store_client.get_scenario(created.id)
        assert detail.inputs == example_inputs
        assert detail.results == results

    async def test_list_after_create(self, store_client, example_inputs):
        await store_client.create_scenario(
            ScenarioCreate(title="A", inputs=example_inputs, results=compute(example_inputs))
        )
        summaries = await store_client.list_scenarios()
        assert [(s.id, s.title) for s in summaries] == [("1", "A")]

    async def test_non_finite_results_posted_as_null(self, store_client, fake_store, example_inputs):
        """Test a 0% rate result is stored with null debt service."""
        inputs = example_inputs.model_copy(update={"interest_rate": 0})
        await store_client.create_scenario(
            ScenarioCreate(title="Zero rate", inputs=inputs, results=compute(inputs))
        )
        assert fake_store.scenarios["1"]["results"]["debtService"] is None

    async def test_get_missing(self, store_client):
        """Test a 404 surfaces as a store error."""
        with pytest.raises(ScenarioStoreError):
            await store_client.get_scenario("missing")

    async def test_request_paths(self, store_client, fake_store):
        await store_client.list_scenarios()
        with pytest.raises(ScenarioStoreError):
            await store_client.get_scenario(9)
        assert fake_store.requests == [
            ("GET", "/api/proforma"),
            ("GET", "/api/proforma/9"),
        ]


class TestStoreClientFailures:
    """Test each failure class is reported as a store error."""

    async def test_transport_error(self, failing_store_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = failing_store_client(handler)
        with pytest.raises(ScenarioStoreError) as exc_info:
            await client.list_scenarios()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_server_error(self, failing_store_client):
        client = failing_store_client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(ScenarioStoreError):
            await client.list_scenarios()

    async def test_invalid_json(self, failing_store_client):
        client = failing_store_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ScenarioStoreError):
            await client.list_scenarios()

    async def test_unexpected_shape(self, failing_store_client):
        client = failing_store_client(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(ScenarioStoreError):
            await client.list_scenarios()

    async def test_detail_missing_results(self, failing_store_client):
        client = failing_store_client(
            lambda request: httpx.Response(200, json={"inputs": {"rent": 5}})
        )
        with pytest.raises(ScenarioStoreError):
            await client.get_scenario(1)


class TestStoreResponses:
    """Test how store responses are read."""

    async def test_create_uses_returned_id_only(self, failing_store_client, example_inputs):
        """Test a store answering with just the new id still counts as saved."""
        client = failing_store_client(lambda request: httpx.Response(201, json={"id": 5}))
        results = compute(example_inputs)

        created = await client.create_scenario(
            ScenarioCreate(title="Base Case", inputs=example_inputs, results=results)
        )

        assert created.id == 5
        assert created.title == "Base Case"
        assert created.inputs == example_inputs
        assert created.results == results

    async def test_create_without_id(self, failing_store_client, example_inputs):
        client = failing_store_client(lambda request: httpx.Response(200, json=["ok"]))
        created = await client.create_scenario(
            ScenarioCreate(title="A", inputs=example_inputs, results=compute(example_inputs))
        )
        assert created.id is None

    async def test_follows_redirect(self, failing_store_client):
        """Test a trailing-slash redirect from the store is followed."""

        def handler(request):
            if request.url.path == "/api/proforma":
                return httpx.Response(
                    307, headers={"Location": "http://store.test/api/proforma/"}
                )
            return httpx.Response(200, json=[{"id": 1, "title": "A"}])

        summaries = await failing_store_client(handler).list_scenarios()
        assert [s.title for s in summaries] == ["A"]


class TestStoreClientLifecycle:
    """Test client construction and shutdown."""

    def test_base_url_trailing_slash(self):
        client = ScenarioStoreClient("http://store.test/api/proforma/", http_client=httpx.AsyncClient())
        assert client.base_url == "http://store.test/api/proforma"

    async def test_injected_client_left_open(self):
        http_client = httpx.AsyncClient()
        await ScenarioStoreClient("http://store.test", http_client=http_client).aclose()
        assert not http_client.is_closed
        await http_client.aclose()

    async def test_owned_client_closed(self):
        client = ScenarioStoreClient("http://store.test")
        await client.aclose()
        assert client._client.is_closed
