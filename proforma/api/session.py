"""
Calculator session API endpoints.

Drives the server-side ProFormaSession held on app.state. Prompts the
session raises for the user during a request are returned as `notices`.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from proforma.schemas import (
    InputState,
    ResultSet,
    Scenario,
    ScenarioId,
    ScenarioSummary,
    WireModel,
)
from proforma.session import ProFormaSession

router = APIRouter()


class NoticeBoard:
    """Collects user prompts until the current request drains them."""

    def __init__(self):
        self._messages: List[str] = []

    def __call__(self, message: str) -> None:
        self._messages.append(message)

    def drain(self) -> List[str]:
        messages, self._messages = self._messages, []
        return messages


class SessionView(WireModel):
    """Current session state."""

    inputs: InputState
    results: Optional[ResultSet] = None
    title: str
    scenarios: List[ScenarioSummary]
    selected_scenario_id: Optional[ScenarioId] = None
    notices: List[str] = []


class SaveResponse(WireModel):
    """Outcome of a save request."""

    scenario: Optional[Scenario] = None
    notices: List[str] = []


class FieldUpdate(WireModel):
    value: Union[float, str, None] = None


class PeriodTypeUpdate(WireModel):
    period_type: str


class TitleUpdate(WireModel):
    title: str


def get_session(request: Request) -> ProFormaSession:
    """Dependency for the application's calculator session."""
    return request.app.state.session


def get_notices(request: Request) -> NoticeBoard:
    return request.app.state.notices


def _view(session: ProFormaSession, notices: NoticeBoard) -> SessionView:
    return SessionView(
        inputs=session.inputs,
        results=session.results,
        title=session.title,
        scenarios=session.scenarios,
        selected_scenario_id=session.selected_scenario_id,
        notices=notices.drain(),
    )


@router.get("", response_model=SessionView)
async def get_session_state(
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    """Get inputs, results, title and the scenario list."""
    return _view(session, notices)


@router.put("/fields/{name}", response_model=SessionView)
async def update_field(
    name: str,
    update: FieldUpdate,
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    """Set one numeric input from raw form text."""
    try:
        session.set_field(name, update.value)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown input field: {name}")
    return _view(session, notices)


@router.put("/period-type", response_model=SessionView)
async def update_period_type(
    update: PeriodTypeUpdate,
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    session.set_period_type(update.period_type)
    return _view(session, notices)


@router.put("/title", response_model=SessionView)
async def update_title(
    update: TitleUpdate,
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    session.set_title(update.title)
    return _view(session, notices)


@router.post("/calculate", response_model=SessionView)
async def calculate(
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    """Calculate results from the current inputs."""
    session.calculate()
    return _view(session, notices)


@router.post("/scenarios", response_model=SaveResponse)
async def save_scenario(
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    """Save the current title, inputs and results as a scenario."""
    scenario = await session.save_scenario()
    return SaveResponse(scenario=scenario, notices=notices.drain())


@router.post("/scenarios/{scenario_id}/load", response_model=SessionView)
async def load_scenario(
    scenario_id: str,
    session: ProFormaSession = Depends(get_session),
    notices: NoticeBoard = Depends(get_notices),
):
    """Load a saved scenario into the session."""
    await session.load_scenario(scenario_id)
    return _view(session, notices)


@router.get("/export")
async def export_results(session: ProFormaSession = Depends(get_session)):
    """Download the result view as a PDF."""
    if session.results is None:
        raise HTTPException(status_code=404, detail="Nothing to export; calculate first")

    content = session.export_pdf_bytes()
    if content is None:
        raise HTTPException(status_code=500, detail="PDF export failed")
    filename = session.settings.export_filename
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
