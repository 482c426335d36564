"""
Pydantic schemas for pro forma inputs, results, and saved scenarios.

Attributes are snake_case; the wire format is camelCase so scenarios saved
here stay readable by other front ends sharing the same store.
Non-finite numbers travel as JSON null, and null decodes back to NaN.
"""

import enum
import math
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


ScenarioId = Union[int, str]

INPUT_NUMBER_FIELDS = (
    "acquisition_cost",
    "loan_amount",
    "interest_rate",
    "amortization_years",
    "rent",
    "unit_count",
    "vacancy_rate",
    "opex_rate",
)

RESULT_FIELDS = (
    "gross_revenue",
    "vacancy_loss",
    "effective_revenue",
    "opex",
    "noi",
    "debt_service",
    "cash_flow",
)


class PeriodType(str, enum.Enum):
    """Reporting period for revenue and debt service."""
    yearly = "yearly"
    quarterly = "quarterly"


def _null_to_nan(value):
    return float("nan") if value is None else value


def _non_finite_to_null(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


class WireModel(BaseModel):
    """Immutable model with camelCase aliases on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class InputState(WireModel):
    """Assumption set entered by the user."""

    acquisition_cost: float = 0.0  # informational only
    loan_amount: float = 0.0
    interest_rate: float = 6.5  # annual nominal percent
    amortization_years: float = 10.0
    rent: float = 0.0  # per unit, per month
    unit_count: float = 0.0
    vacancy_rate: float = 0.1
    opex_rate: float = 0.3
    # Any value other than "yearly" is calculated as quarterly
    period_type: str = PeriodType.yearly.value

    @field_validator(*INPUT_NUMBER_FIELDS, mode="before")
    @classmethod
    def null_is_nan(cls, value):
        return _null_to_nan(value)

    @field_serializer(*INPUT_NUMBER_FIELDS, when_used="json")
    def non_finite_is_null(self, value: float) -> Optional[float]:
        return _non_finite_to_null(value)


class ResultSet(WireModel):
    """Cash-flow metrics derived from one InputState snapshot."""

    gross_revenue: float
    vacancy_loss: float
    effective_revenue: float
    opex: float
    noi: float
    debt_service: float
    cash_flow: float

    @field_validator(*RESULT_FIELDS, mode="before")
    @classmethod
    def null_is_nan(cls, value):
        return _null_to_nan(value)

    @field_serializer(*RESULT_FIELDS, when_used="json")
    def non_finite_is_null(self, value: float) -> Optional[float]:
        return _non_finite_to_null(value)


class ScenarioSummary(WireModel):
    """Entry of the scenario list."""

    id: ScenarioId
    title: str


class ScenarioCreate(WireModel):
    """Body posted to the store when saving a scenario."""

    title: str = Field(min_length=1)
    inputs: InputState
    results: ResultSet


class Scenario(ScenarioCreate):
    """Scenario as created by the store; id is None if the store did not return one."""

    id: Optional[ScenarioId] = None


class ScenarioDetail(WireModel):
    """Inputs and results of a stored scenario."""

    inputs: InputState
    results: ResultSet
