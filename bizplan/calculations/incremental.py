"""
Incremental Investment Analysis

Isolates the cash flows attributable to a single investment, optionally
financed by one loan, and measures its own IRR and NPV.
"""

import logging
from typing import List, Optional, Tuple

from bizplan.calculations.growth import MONTHS_PER_YEAR
from bizplan.calculations.irr import calculate_irr, calculate_npv
from bizplan.schemas import (
    AnnualSummary,
    IncrementalConfig,
    InvestmentItem,
    Loan,
    ProjectConfiguration,
)

logger = logging.getLogger(__name__)


def calculate_loan_service_for_year(loan: Loan, year_index: int) -> float:
    """
    Principal plus interest paid on a loan during one project year.

    Uses straight-line principal with interest on the straight-line
    declining balance. This is a simplified view and does not reuse the
    annuity schedule.
    """
    principal_paid = 0.0
    interest_paid = 0.0

    for month in range(MONTHS_PER_YEAR):
        month_index = year_index * MONTHS_PER_YEAR + month
        if month_index < loan.term_months:
            principal_paid += loan.principal / loan.term_months
            remaining = loan.principal * (
                1 - min(month_index, loan.term_months) / loan.term_months
            )
            interest_paid += remaining * (loan.annual_interest_rate / 100) / 12

    return principal_paid + interest_paid


def build_incremental_cash_flows(
    investment: InvestmentItem,
    loan: Optional[Loan],
    summaries: List[AnnualSummary],
    impact_percentage: float,
) -> List[float]:
    """
    Build the standalone cash-flow series for one investment.

    Args:
        investment: The selected investment
        loan: Loan financing it, if any
        summaries: Project annual summaries
        impact_percentage: Share of project cash flow the investment drives

    Returns:
        Cash flows starting with the net outlay at period 0
    """
    loan_principal = loan.principal if loan else 0.0
    impact_ratio = impact_percentage / 100

    cash_flows = [loan_principal - investment.amount]
    for year_index, summary in enumerate(summaries):
        benefit = summary.cash_flow.net_cash_flow * impact_ratio
        loan_service = calculate_loan_service_for_year(loan, year_index) if loan else 0.0
        cash_flows.append(benefit - loan_service)

    return cash_flows


def calculate_incremental_metrics(
    config: ProjectConfiguration,
    summaries: List[AnnualSummary],
    incremental_config: Optional[IncrementalConfig],
) -> Tuple[Optional[float], Optional[float]]:
    """
    Calculate incremental IRR and NPV for the selected investment.

    Returns:
        Tuple of (IRR in percent, NPV); both None when no investment is
        selected or the selected id is unknown
    """
    if incremental_config is None or incremental_config.investment_id is None:
        return None, None

    investment = next(
        (i for i in config.investment_items if i.id == incremental_config.investment_id),
        None,
    )
    if investment is None:
        logger.debug(
            "Incremental investment %s not found", incremental_config.investment_id
        )
        return None, None

    loan = None
    if incremental_config.loan_id is not None:
        loan = next(
            (l for l in config.loans if l.id == incremental_config.loan_id), None
        )

    cash_flows = build_incremental_cash_flows(
        investment, loan, summaries, incremental_config.impact_percentage
    )
    return calculate_irr(cash_flows), calculate_npv(cash_flows, config.discount_rate / 100)
