"""
Financial calculation API endpoints.

Stateless: accept inputs, return calculated results.
"""

from fastapi import APIRouter

from proforma.calculations.proforma import compute
from proforma.schemas import InputState, ResultSet

router = APIRouter()


@router.post("/proforma", response_model=ResultSet)
async def calculate_proforma(inputs: InputState):
    """Calculate the pro forma for the posted inputs."""
    return compute(inputs)
