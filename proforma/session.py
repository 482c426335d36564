"""
Pro forma session: the state behind one calculator screen.

A session owns the current InputState, the last ResultSet (None until
the first calculation), the scenario title being edited, and the list
of saved scenarios fetched once at start.

Save and load are independent coroutines with no ordering between them.
If both are in flight, whichever completes last determines the state.
State is always replaced whole (inputs and results together), so a
session is never left holding inputs from one scenario and results
from another.
"""

import logging
import math
import re
from pathlib import Path
from typing import Callable, List, Optional, Union

from proforma.calculations.proforma import compute
from proforma.config import Settings, get_settings
from proforma.export import ResultView, export_pdf, pdf_bytes
from proforma.schemas import (
    INPUT_NUMBER_FIELDS,
    InputState,
    ResultSet,
    Scenario,
    ScenarioCreate,
    ScenarioId,
    ScenarioSummary,
)
from proforma.store.client import ScenarioStoreClient, ScenarioStoreError

logger = logging.getLogger(__name__)

SAVE_REJECTED_MESSAGE = "Please add a title and calculate results first"
SAVED_MESSAGE = "Scenario saved!"

# Longest leading numeric literal; text without one parses as NaN
_LEADING_NUMBER = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII
)

# Form (camelCase) and attribute (snake_case) names both resolve to the attribute
_FIELD_NAMES = {}
for _name in INPUT_NUMBER_FIELDS:
    _FIELD_NAMES[_name] = _name
    _FIELD_NAMES[InputState.model_fields[_name].alias] = _name


def parse_number(raw: Union[str, float, int, None]) -> float:
    """
    Parse form input into a float.

    Uses the leading numeric part of the text ("12.5 units" -> 12.5).
    Text without one, including the empty string, gives NaN.
    """
    if isinstance(raw, (int, float)):
        return float(raw)
    if raw is None:
        return math.nan
    match = _LEADING_NUMBER.match(str(raw).lstrip())
    if match is None:
        return math.nan
    return float(match.group())


def resolve_field(name: str) -> str:
    """Map a form or attribute name to the InputState attribute; KeyError if unknown."""
    return _FIELD_NAMES[name]


def _log_notice(message: str) -> None:
    logger.info(f"[NOTICE] {message}")


class ProFormaSession:
    """Calculator state container with compute, save, load and export."""

    def __init__(
        self,
        store: ScenarioStoreClient,
        notifier: Optional[Callable[[str], None]] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.notifier = notifier or _log_notice
        self.settings = settings or get_settings()

        self.inputs = InputState()
        self.results: Optional[ResultSet] = None
        self.title = ""
        self.scenarios: List[ScenarioSummary] = []
        self.selected_scenario_id: Optional[ScenarioId] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        notifier: Optional[Callable[[str], None]] = None,
    ) -> "ProFormaSession":
        """Create a session talking to the configured store."""
        settings = settings or get_settings()
        return cls(
            ScenarioStoreClient(settings.store_base_url),
            notifier=notifier,
            settings=settings,
        )

    async def start(self) -> None:
        """Fetch the scenario list. On failure the list stays empty."""
        try:
            self.scenarios = await self.store.list_scenarios()
        except ScenarioStoreError:
            logger.exception("Failed to load scenario list")
            return
        logger.info(f"Loaded {len(self.scenarios)} saved scenarios")

    # ------------------------------------------------------------------
    # Input editing
    # ------------------------------------------------------------------

    def set_field(self, name: str, raw_value: Union[str, float, int, None]) -> None:
        """Replace one numeric input with the parsed value."""
        field = resolve_field(name)
        self.inputs = self.inputs.model_copy(update={field: parse_number(raw_value)})

    def set_period_type(self, value: str) -> None:
        self.inputs = self.inputs.model_copy(update={"period_type": value})

    def set_title(self, title: str) -> None:
        self.title = title

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def calculate(self) -> ResultSet:
        """Compute results from the current inputs."""
        self.results = compute(self.inputs)
        return self.results

    async def save_scenario(self) -> Optional[Scenario]:
        """
        Save the current title, inputs and results as a new scenario.

        Rejected without a request if there is no title or no results.
        The scenario list is not refreshed afterwards.

        Returns:
            The created scenario, or None if rejected or the request failed
        """
        if not self.title or self.results is None:
            self.notifier(SAVE_REJECTED_MESSAGE)
            return None

        payload = ScenarioCreate(
            title=self.title, inputs=self.inputs, results=self.results
        )
        try:
            scenario = await self.store.create_scenario(payload)
        except ScenarioStoreError:
            logger.exception(f"Failed to save scenario '{payload.title}'")
            return None

        logger.info(f"Saved scenario {scenario.id} '{scenario.title}'")
        self.notifier(SAVED_MESSAGE)
        return scenario

    async def load_scenario(self, scenario_id: ScenarioId) -> bool:
        """
        Replace inputs and results with a stored scenario.

        Returns:
            True if loaded; False if the request failed (state unchanged)
        """
        try:
            detail = await self.store.get_scenario(scenario_id)
        except ScenarioStoreError:
            logger.exception(f"Failed to load scenario {scenario_id}")
            return False

        self.inputs, self.results = detail.inputs, detail.results
        self.selected_scenario_id = scenario_id
        logger.info(f"Loaded scenario {scenario_id}")
        return True

    def result_view(self) -> Optional[ResultView]:
        """The result panel content, or None before any calculation."""
        if self.results is None:
            return None
        return ResultView.from_results(self.results)

    def export_pdf(self, output_dir: Optional[Path] = None) -> Optional[Path]:
        """Export the result view to the configured PDF file."""
        return export_pdf(
            self.result_view(),
            self.settings.export_filename,
            output_dir=output_dir or Path(self.settings.export_dir),
            margin=self.settings.export_margin_in,
        )

    def export_pdf_bytes(self) -> Optional[bytes]:
        """Render the result view to PDF bytes for download."""
        return pdf_bytes(self.result_view(), margin=self.settings.export_margin_in)

    async def aclose(self) -> None:
        await self.store.aclose()
