"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results. Nothing is
stored; every request runs the engine from scratch.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from bizplan.calculations import amortization, depreciation, irr
from bizplan.calculations.engine import calculate_total_months, compute_projections
from bizplan.config import get_settings
from bizplan.schemas import (
    AmortizationRow,
    DepreciableAsset,
    DurationUnit,
    IncrementalConfig,
    Loan,
    ProjectConfiguration,
    ProjectionResult,
)

router = APIRouter()


class CamelBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectionInput(CamelBody):
    """Input for a full projection run."""

    config: ProjectConfiguration
    duration_unit: Optional[DurationUnit] = None
    incremental_config: Optional[IncrementalConfig] = None


@router.post("/projections", response_model=ProjectionResult)
async def calculate_projections(inputs: ProjectionInput):
    """Calculate monthly and annual projections and investment metrics."""
    settings = get_settings()
    unit = inputs.duration_unit or settings.default_duration_unit

    total_months = calculate_total_months(inputs.config.project_duration, unit)
    if total_months > settings.max_projection_months:
        raise HTTPException(
            status_code=400,
            detail=f"Projection horizon exceeds {settings.max_projection_months} months",
        )

    return compute_projections(inputs.config, unit, inputs.incremental_config)


class IRRInput(CamelBody):
    """Input for IRR calculation."""

    cash_flows: List[float]
    discount_rate: float = 10.0


class IRRResponse(CamelBody):
    """Response with IRR calculation."""

    irr: Optional[float] = None
    npv: float
    profit: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR and NPV for given cash flows."""
    try:
        irr.validate_cash_flows(inputs.cash_flows)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IRRResponse(
        irr=irr.calculate_irr(inputs.cash_flows),
        npv=irr.calculate_npv(inputs.cash_flows, inputs.discount_rate / 100),
        profit=irr.calculate_profit(inputs.cash_flows),
    )


class AmortizationResponse(CamelBody):
    schedule: List[AmortizationRow]
    payment: float
    total_interest: float
    total_principal: float


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(loan: Loan):
    """Generate loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(loan)

    return AmortizationResponse(
        schedule=schedule,
        payment=schedule[0].payment if schedule else 0.0,
        total_interest=amortization.calculate_total_interest(schedule),
        total_principal=sum(row.principal for row in schedule),
    )


class DepreciationInput(CamelBody):
    """Input for a single-asset depreciation schedule."""

    asset: DepreciableAsset
    years: int = Field(..., gt=0)


class DepreciationResponse(CamelBody):
    schedule: List[float]
    total_depreciation: float
    ending_book_value: float


@router.post("/depreciation", response_model=DepreciationResponse)
async def calculate_depreciation(inputs: DepreciationInput):
    """Generate an annual depreciation schedule for one asset."""
    schedule = depreciation.build_depreciation_schedule(inputs.asset, inputs.years)
    total = sum(schedule)

    return DepreciationResponse(
        schedule=schedule,
        total_depreciation=total,
        ending_book_value=inputs.asset.initial_cost - total,
    )
