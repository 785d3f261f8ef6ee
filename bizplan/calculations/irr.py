"""
IRR and NPV Calculations

Implements NPV and an IRR root-finder using bisection over a bounded rate
bracket, matching Excel's NPV/IRR results for periodic cash flows.
"""

import logging
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 200
TOLERANCE = 1e-7
LOWER_BOUND = -0.99
UPPER_BOUND = 5.0


def validate_cash_flows(cash_flows: List[float]) -> None:
    """
    Check that a cash-flow series can carry a rate of return.

    Raises:
        ValueError: If fewer than two cash flows are given
    """
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows, index 0 undiscounted
        discount_rate: Periodic discount rate as decimal (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    if len(cash_flows) == 0:
        return 0.0
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return float(np.sum(flows / np.power(1 + discount_rate, periods)))


def calculate_discounted_cash_flows(
    cash_flows: List[float], discount_rate: float
) -> List[float]:
    """Discount each cash flow back to period 0."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return (flows / np.power(1 + discount_rate, periods)).tolist()


def calculate_irr(
    cash_flows: List[float],
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) by bisection.

    Searches the rate bracket [-99%, 500%]. Roots outside the bracket are
    not searched for.

    Args:
        cash_flows: Periodic cash flows, starting with the initial outlay
        max_iterations: Bisection step limit
        tolerance: Bracket width (and NPV magnitude) that ends the search

    Returns:
        IRR in percent (e.g., 15.0 for 15%), or None when the first flow is
        not an outlay, the bracket holds no sign change, or the search does
        not converge
    """
    if len(cash_flows) == 0 or cash_flows[0] >= 0:
        return None

    lower = LOWER_BOUND
    upper = UPPER_BOUND

    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        npv_lower = calculate_npv(cash_flows, lower)
        npv_upper = calculate_npv(cash_flows, upper)

        if not np.isfinite(npv_lower) or not np.isfinite(npv_upper):
            logger.debug("IRR bracket NPV is not finite")
            return None

        if npv_lower * npv_upper > 0:
            logger.debug("No IRR sign change between %s and %s", lower, upper)
            return None

        for _ in range(max_iterations):
            mid = (lower + upper) / 2
            if abs(upper - lower) < tolerance:
                return mid * 100

            npv_mid = calculate_npv(cash_flows, mid)
            if abs(npv_mid) < tolerance:
                return mid * 100

            if npv_lower * npv_mid < 0:
                upper = mid
            else:
                lower = mid

    logger.debug("IRR did not converge in %d iterations", max_iterations)
    return None


def calculate_profit(cash_flows: List[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
