"""
Annual Aggregation

Rolls monthly projections up to project years and builds the cumulative
cash-flow and cost-benefit series.
"""

from typing import Dict, List

from bizplan.calculations.amortization import calculate_principal_repayment
from bizplan.calculations.depreciation import calculate_total_salvage_value
from bizplan.calculations.growth import MONTHS_PER_YEAR
from bizplan.calculations.projection import (
    calculate_break_even,
    calculate_contribution_margin_ratio,
    sum_field,
)
from bizplan.schemas import (
    AmortizationRow,
    AnnualCashFlow,
    AnnualSummary,
    BreakEven,
    CashFlowPoint,
    CostBenefit,
    CostBenefitPoint,
    DepreciableAsset,
    IncomeStatement,
    MonthlyRecord,
)


def build_income_statement(year: int, months: List[MonthlyRecord]) -> IncomeStatement:
    """Sum a year's months into an income statement."""
    return IncomeStatement(
        year=year,
        sales=sum_field(months, "sales"),
        fixed_costs=sum_field(months, "fixed_costs"),
        variable_costs=sum_field(months, "variable_costs"),
        gross_profit=sum_field(months, "gross_profit"),
        annual_depreciation=sum_field(months, "depreciation"),
        annual_interest=sum_field(months, "interest"),
        ebt=sum_field(months, "ebt"),
        taxes=sum_field(months, "taxes"),
        net_income=sum_field(months, "net_income"),
    )


def build_annual_break_even(income: IncomeStatement) -> BreakEven:
    """Break-even recomputed from annual totals, not summed from months."""
    bep_amount, bep_percent = calculate_break_even(
        income.sales, income.variable_costs, income.fixed_costs
    )
    return BreakEven(
        year=income.year,
        sales=income.sales,
        fixed_costs=income.fixed_costs,
        variable_costs=income.variable_costs,
        contribution_margin_ratio=calculate_contribution_margin_ratio(
            income.sales, income.variable_costs
        ),
        break_even_amount=bep_amount,
        break_even_percent=bep_percent,
    )


def aggregate_years(
    monthly: List[MonthlyRecord],
    years: int,
    loan_schedules: Dict[int, List[AmortizationRow]],
    assets: List[DepreciableAsset],
) -> List[AnnualSummary]:
    """
    Convert monthly projections to annual summaries.

    A partial final year sums only the months it has. Salvage value is
    recovered in the final project year.

    Args:
        monthly: Monthly records in project order
        years: Number of project years
        loan_schedules: Amortization schedule per loan id
        assets: Depreciable assets

    Returns:
        One summary per project year
    """
    summaries = []

    for year_index in range(years):
        year = year_index + 1
        start_month = year_index * MONTHS_PER_YEAR
        end_month = start_month + MONTHS_PER_YEAR
        income = build_income_statement(year, monthly[start_month:end_month])

        principal_repayment = sum(
            calculate_principal_repayment(schedule, start_month, end_month)
            for schedule in loan_schedules.values()
        )
        salvage_value = calculate_total_salvage_value(assets) if year == years else 0.0

        cash_flow = AnnualCashFlow(
            year=year,
            net_income=income.net_income,
            annual_depreciation=income.annual_depreciation,
            annual_principal_repayment=principal_repayment,
            salvage_value=salvage_value,
            net_cash_flow=income.net_income
            + income.annual_depreciation
            - principal_repayment
            + salvage_value,
        )

        costs = income.fixed_costs + income.variable_costs
        cost_benefit = CostBenefit(
            year=year,
            benefits=income.sales,
            costs=costs,
            net_benefit=income.sales - costs,
        )

        summaries.append(
            AnnualSummary(
                year=year,
                income_statement=income,
                cash_flow=cash_flow,
                break_even=build_annual_break_even(income),
                cost_benefit=cost_benefit,
            )
        )

    return summaries


def build_annual_cash_flow_series(
    summaries: List[AnnualSummary], net_initial_investment: float
) -> List[CashFlowPoint]:
    """Year 0 investment outflow followed by each year's cumulative position."""
    cumulative = -net_initial_investment
    series = [
        CashFlowPoint(
            year=0,
            label="Y0",
            net_cash_flow=-net_initial_investment,
            cumulative_cash_flow=cumulative,
        )
    ]
    for summary in summaries:
        cumulative += summary.cash_flow.net_cash_flow
        series.append(
            CashFlowPoint(
                year=summary.year,
                label=f"Y{summary.year}",
                net_cash_flow=summary.cash_flow.net_cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )
    return series


def build_monthly_cash_flow_series(
    monthly: List[MonthlyRecord], net_initial_investment: float
) -> List[CashFlowPoint]:
    """Monthly cumulative cash flow, starting from the initial outflow."""
    cumulative = -net_initial_investment
    series = []
    for record in monthly:
        cumulative += record.net_cash_flow
        series.append(
            CashFlowPoint(
                year=record.year,
                month=record.month,
                label=f"Y{record.year}M{record.month}",
                net_cash_flow=record.net_cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )
    return series


def build_annual_cost_benefit_series(
    summaries: List[AnnualSummary], net_initial_investment: float
) -> List[CostBenefitPoint]:
    """Running benefits and costs per year; costs start at the investment."""
    cumulative_benefits = 0.0
    cumulative_costs = net_initial_investment
    series = []
    for summary in summaries:
        cb = summary.cost_benefit
        cumulative_benefits += cb.benefits
        cumulative_costs += cb.costs
        series.append(
            CostBenefitPoint(
                year=cb.year,
                benefits=cb.benefits,
                costs=cb.costs,
                net_benefit=cb.net_benefit,
                cumulative_benefits=cumulative_benefits,
                cumulative_costs=cumulative_costs,
                cumulative_net_benefit=cumulative_benefits - cumulative_costs,
            )
        )
    return series


def build_monthly_cost_benefit_series(
    monthly: List[MonthlyRecord], net_initial_investment: float
) -> List[CostBenefitPoint]:
    """Running benefits and costs per month; costs start at the investment."""
    cumulative_benefits = 0.0
    cumulative_costs = net_initial_investment
    series = []
    for record in monthly:
        cumulative_benefits += record.benefits
        cumulative_costs += record.costs
        series.append(
            CostBenefitPoint(
                year=record.year,
                month=record.month,
                benefits=record.benefits,
                costs=record.costs,
                net_benefit=record.net_benefit,
                cumulative_benefits=cumulative_benefits,
                cumulative_costs=cumulative_costs,
                cumulative_net_benefit=cumulative_benefits - cumulative_costs,
            )
        )
    return series
