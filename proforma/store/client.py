"""
Client for the remote scenario store.

The store is a JSON collection resource:

    GET  {base}       -> [{id, title}, ...]
    POST {base}       -> created scenario with its id
    GET  {base}/{id}  -> {inputs, results}

Each call is a single round trip: no retries, no timeout.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from proforma.schemas import (
    Scenario,
    ScenarioCreate,
    ScenarioDetail,
    ScenarioId,
    ScenarioSummary,
)

logger = logging.getLogger(__name__)

_summary_list = TypeAdapter(List[ScenarioSummary])


class ScenarioStoreError(RuntimeError):
    """A store request failed in transport, status, or decoding."""


class ScenarioStoreClient:
    """Async client for the scenario collection."""

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=None)

    async def _request(self, method: str, url: str, **kwargs):
        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(
                method, url, follow_redirects=True, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ScenarioStoreError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise ScenarioStoreError(f"{method} {url} returned invalid JSON: {e}") from e

    async def list_scenarios(self) -> List[ScenarioSummary]:
        """Fetch id and title of every stored scenario."""
        data = await self._request("GET", self.base_url)
        try:
            return _summary_list.validate_python(data)
        except ValidationError as e:
            raise ScenarioStoreError(f"Unexpected scenario list: {e}") from e

    async def create_scenario(self, scenario: ScenarioCreate) -> Scenario:
        """
        Store a new scenario.

        Args:
            scenario: Title, inputs and results to save

        Returns:
            The posted scenario with the id the store assigned, if the
            response carried one; the rest of the response body is ignored
        """
        body = scenario.model_dump(mode="json", by_alias=True)
        data = await self._request("POST", self.base_url, json=body)
        scenario_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(scenario_id, (int, str)):
            scenario_id = None
        return Scenario(
            id=scenario_id,
            title=scenario.title,
            inputs=scenario.inputs,
            results=scenario.results,
        )

    async def get_scenario(self, scenario_id: ScenarioId) -> ScenarioDetail:
        """Fetch inputs and results of one scenario."""
        data = await self._request("GET", f"{self.base_url}/{scenario_id}")
        try:
            return ScenarioDetail.model_validate(data)
        except ValidationError as e:
            raise ScenarioStoreError(f"Unexpected scenario {scenario_id}: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
