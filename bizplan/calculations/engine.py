"""
Projection Engine Entry Point

Wires the calculation modules into a single pure computation from a project
configuration to a full projection result.
"""

import logging
from typing import Optional

from bizplan.calculations import annual, derived, metrics
from bizplan.calculations.amortization import generate_amortization_schedule
from bizplan.calculations.depreciation import build_depreciation_schedule
from bizplan.calculations.growth import MONTHS_PER_YEAR, project_years
from bizplan.calculations.incremental import calculate_incremental_metrics
from bizplan.calculations.projection import project_months
from bizplan.calculations.unit_cost import resolve_unit_costs
from bizplan.schemas import (
    DerivedData,
    DurationUnit,
    IncrementalConfig,
    ProjectConfiguration,
    ProjectionResult,
)

logger = logging.getLogger(__name__)


def calculate_total_months(duration: int, unit: DurationUnit) -> int:
    """Convert the configured duration to a month count."""
    if unit == DurationUnit.years:
        return duration * MONTHS_PER_YEAR
    return duration


def compute_projections(
    config: ProjectConfiguration,
    duration_unit: DurationUnit = DurationUnit.years,
    incremental_config: Optional[IncrementalConfig] = None,
) -> ProjectionResult:
    """
    Compute monthly and annual projections and investment metrics.

    The configuration is not modified; calling twice with the same inputs
    returns equal results.

    Args:
        config: Business plan configuration
        duration_unit: Unit of ``config.project_duration``
        incremental_config: Optional single-investment analysis selection

    Returns:
        ProjectionResult with statements, series, schedules and metrics
    """
    total_months = calculate_total_months(config.project_duration, duration_unit)
    years = project_years(total_months)
    products = config.advanced_config.products

    # === DERIVED ENTITIES ===
    unit_costs = resolve_unit_costs(products, config.payroll_config.daily_minimum_wage)
    revenues = derived.expand_revenues(config.recurring_revenues, products, unit_costs)
    expenses = derived.expand_expenses(config.recurring_expenses, config.payroll_config)
    investment_items = list(config.investment_items)
    net_initial_investment = derived.calculate_net_initial_investment(investment_items)

    # === SCHEDULES ===
    depreciation_schedules = {
        asset.id: build_depreciation_schedule(asset, years)
        for asset in config.depreciable_assets
    }
    loan_schedules = {
        loan.id: generate_amortization_schedule(loan) for loan in config.loans
    }

    logger.debug(
        "Computing projections for %d months (%d years), investment %.2f",
        total_months,
        years,
        net_initial_investment,
    )

    # === MONTHLY / ANNUAL ===
    monthly = project_months(
        config,
        total_months,
        revenues,
        expenses,
        unit_costs,
        depreciation_schedules,
        loan_schedules,
    )
    summaries = annual.aggregate_years(
        monthly, years, loan_schedules, config.depreciable_assets
    )
    annual_series = annual.build_annual_cash_flow_series(summaries, net_initial_investment)

    # === METRICS ===
    financial_metrics = metrics.calculate_financial_metrics(
        summaries,
        annual_series,
        net_initial_investment,
        config.discount_rate,
        config.minimum_acceptable_irr,
    )
    incremental_irr, incremental_npv = calculate_incremental_metrics(
        config, summaries, incremental_config
    )
    financial_metrics = financial_metrics.model_copy(
        update={"incremental_irr": incremental_irr, "incremental_npv": incremental_npv}
    )

    cash_flows = metrics.build_npv_cash_flows(summaries, net_initial_investment)

    return ProjectionResult(
        total_months=total_months,
        net_initial_investment=net_initial_investment,
        monthly_breakdown=monthly,
        annual_summaries=summaries,
        annual_cash_flow_series=annual_series,
        monthly_cash_flow_series=annual.build_monthly_cash_flow_series(
            monthly, net_initial_investment
        ),
        annual_cost_benefit_series=annual.build_annual_cost_benefit_series(
            summaries, net_initial_investment
        ),
        monthly_cost_benefit_series=annual.build_monthly_cost_benefit_series(
            monthly, net_initial_investment
        ),
        annual_npv_contributions=metrics.calculate_npv_contributions(
            cash_flows, config.discount_rate
        ),
        financial_metrics=financial_metrics,
        loan_schedules=loan_schedules,
        derived_data=DerivedData(
            investment_items=investment_items,
            recurring_revenues=revenues,
            recurring_expenses=expenses,
            bom_item_costs=unit_costs,
            net_initial_investment=net_initial_investment,
        ),
    )
