"""
Investment Metrics

NPV, IRR, payback period, benefit/cost ratio and ROI computed from the
annual cash-flow series.
"""

import math
from typing import List, Optional, Union

from bizplan.calculations.irr import (
    calculate_discounted_cash_flows,
    calculate_irr,
    calculate_npv,
)
from bizplan.schemas import (
    NEVER,
    AnnualSummary,
    CashFlowPoint,
    FinancialMetrics,
    NPVContribution,
    PaybackPeriod,
)

DAYS_PER_MONTH = 30


def build_npv_cash_flows(
    summaries: List[AnnualSummary], net_initial_investment: float
) -> List[float]:
    """Initial outlay followed by each year's net cash flow."""
    return [-net_initial_investment] + [s.cash_flow.net_cash_flow for s in summaries]


def calculate_payback_period(
    series: List[CashFlowPoint],
) -> Union[PaybackPeriod, str]:
    """
    Calculate when cumulative cash flow first turns positive.

    The crossing is interpolated linearly within the payback year and
    expressed as whole years, months and days (30-day months).

    Args:
        series: Annual cash-flow series starting with year 0

    Returns:
        PaybackPeriod, or ``NEVER`` if the investment is not recovered
    """
    for i in range(1, len(series)):
        if series[i].cumulative_cash_flow > 0:
            fraction_of_year = 0.0
            if series[i].net_cash_flow != 0:
                fraction_of_year = (
                    -series[i - 1].cumulative_cash_flow / series[i].net_cash_flow
                )
            total_months = fraction_of_year * 12
            if not math.isfinite(total_months):
                total_months = 0.0
            months = math.floor(total_months)
            days = round((total_months - months) * DAYS_PER_MONTH)
            if days == DAYS_PER_MONTH:
                months += 1
                days = 0
            return PaybackPeriod(years=i - 1, months=months, days=days)
    return NEVER


def _discount_factor(rate: float, period: int) -> float:
    try:
        return (1 + rate) ** period
    except OverflowError:
        return math.inf


def calculate_cost_benefit_ratio(
    summaries: List[AnnualSummary],
    net_initial_investment: float,
    discount_rate: float,
) -> float:
    """
    Calculate the discounted benefit/cost ratio.

    Benefits are sales; costs are fixed plus variable costs, with the
    initial investment counted undiscounted at period 0.

    Args:
        summaries: Annual summaries
        net_initial_investment: Outlay at period 0
        discount_rate: Discount rate in percent

    Returns:
        Ratio, or 0 when there are no discounted costs. A discount rate of
        -100% collapses every factor to 0 and gives ``math.inf``.
    """
    rate = discount_rate / 100
    discounted_benefits = 0.0
    discounted_costs = net_initial_investment
    for i, summary in enumerate(summaries):
        factor = _discount_factor(rate, i + 1)
        if factor == 0:
            return math.inf
        income = summary.income_statement
        discounted_benefits += income.sales / factor
        discounted_costs += (income.fixed_costs + income.variable_costs) / factor

    if discounted_costs > 0:
        return discounted_benefits / discounted_costs
    return 0.0


def calculate_roi(
    summaries: List[AnnualSummary], net_initial_investment: float
) -> Optional[float]:
    """Total net income over the horizon as a percent of the investment."""
    if net_initial_investment <= 0:
        return None
    total_net_income = sum(s.income_statement.net_income for s in summaries)
    return total_net_income / net_initial_investment * 100


def calculate_npv_contributions(
    cash_flows: List[float], discount_rate: float
) -> List[NPVContribution]:
    """Discounted value of each year's cash flow, year 0 included."""
    discounted = calculate_discounted_cash_flows(cash_flows, discount_rate / 100)
    return [
        NPVContribution(year=year, cash_flow=cf, discounted_cash_flow=dcf)
        for year, (cf, dcf) in enumerate(zip(cash_flows, discounted))
    ]


def calculate_financial_metrics(
    summaries: List[AnnualSummary],
    annual_series: List[CashFlowPoint],
    net_initial_investment: float,
    discount_rate: float,
    minimum_acceptable_irr: float,
) -> FinancialMetrics:
    """
    Calculate the headline investment metrics.

    Args:
        summaries: Annual summaries
        annual_series: Annual cash-flow series starting with year 0
        net_initial_investment: Outlay at period 0
        discount_rate: Discount rate in percent
        minimum_acceptable_irr: Hurdle rate in percent

    Returns:
        FinancialMetrics without incremental analysis
    """
    cash_flows = build_npv_cash_flows(summaries, net_initial_investment)
    irr = calculate_irr(cash_flows)

    return FinancialMetrics(
        npv=calculate_npv(cash_flows, discount_rate / 100),
        irr=irr,
        payback_period=calculate_payback_period(annual_series),
        cost_benefit_ratio=calculate_cost_benefit_ratio(
            summaries, net_initial_investment, discount_rate
        ),
        roi=calculate_roi(summaries, net_initial_investment),
        meets_minimum_irr=None if irr is None else irr >= minimum_acceptable_irr,
    )
