"""
Loan Amortization Calculations

Implements fixed-payment loan amortization, matching Excel's PMT, IPMT and
PPMT functions.
"""

import math
from typing import List

from bizplan.schemas import AmortizationRow, Loan


def calculate_payment(
    principal: float, annual_rate: float, term_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent (e.g., 12 for 12%)
        term_months: Total amortization period in months

    Returns:
        Monthly payment amount, ``inf`` when the annuity factor overflows
    """
    if principal <= 0:
        return 0.0
    if term_months <= 0:
        return 0.0

    monthly_rate = annual_rate / 100 / 12

    if annual_rate == 0:
        return principal / term_months

    try:
        growth = (1 + monthly_rate) ** term_months
        payment = principal * (monthly_rate * growth) / (growth - 1)
    except (OverflowError, ZeroDivisionError):
        return math.inf

    return payment


def generate_amortization_schedule(loan: Loan) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule for a loan.

    Rows are indexed by project month (row 0 is the first payment). A loan
    without principal or term, or with a payment that cannot be computed,
    has no schedule and therefore no debt service.

    Args:
        loan: Loan definition

    Returns:
        List of amortization rows
    """
    if loan.principal <= 0 or loan.term_months <= 0:
        return []

    payment = calculate_payment(
        loan.principal, loan.annual_interest_rate, loan.term_months
    )
    if not math.isfinite(payment):
        return []

    monthly_rate = loan.annual_interest_rate / 100 / 12
    balance = loan.principal
    schedule = []

    for month in range(1, loan.term_months + 1):
        interest = balance * monthly_rate
        principal_pmt = payment - interest
        balance -= principal_pmt

        schedule.append(
            AmortizationRow(
                month=month,
                payment=payment,
                interest=interest,
                principal=principal_pmt,
                # Clamp rounding residue on the last payment
                remaining_balance=max(0.0, balance),
            )
        )

    return schedule


def interest_for_month(schedule: List[AmortizationRow], month_index: int) -> float:
    """Interest due in a project month; 0 once the loan is repaid."""
    if 0 <= month_index < len(schedule):
        return schedule[month_index].interest
    return 0.0


def principal_for_month(schedule: List[AmortizationRow], month_index: int) -> float:
    """Principal repaid in a project month; 0 once the loan is repaid."""
    if 0 <= month_index < len(schedule):
        return schedule[month_index].principal
    return 0.0


def calculate_principal_repayment(
    schedule: List[AmortizationRow], start_month: int, end_month: int
) -> float:
    """Sum principal repaid over project months ``[start_month, end_month)``."""
    return sum(row.principal for row in schedule[start_month:end_month])


def calculate_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row.interest for row in schedule)
