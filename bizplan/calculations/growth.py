"""
Growth Multipliers

Phased annual growth, monthly compounding and general inflation factors
applied to recurring amounts.
"""

import math
from typing import List, Sequence

MONTHS_PER_YEAR = 12


def project_years(total_months: int) -> int:
    """Number of project years, counting a partial final year."""
    return math.ceil(total_months / MONTHS_PER_YEAR)


def rate_for_year(rates: Sequence[float], year: int) -> float:
    """
    Growth rate that moves year ``year - 1`` into year ``year``.

    The last configured rate repeats for every later year; no rates
    means no growth.
    """
    if not rates:
        return 0.0
    if year - 1 < len(rates):
        return rates[year - 1]
    return rates[-1]


def build_annual_multipliers(rates: Sequence[float], years: int) -> List[float]:
    """
    Build cumulative phased-growth multipliers indexed by project year.

    Args:
        rates: Annual growth rates in percent, one per year transition
        years: Number of project years

    Returns:
        Multipliers where index 0 is always 1.0
    """
    multipliers = [1.0]
    cumulative = 1.0
    for year in range(1, years):
        cumulative *= 1 + rate_for_year(rates, year) / 100
        multipliers.append(cumulative)
    return multipliers


def multiplier_for_year(multipliers: Sequence[float], year_index: int) -> float:
    """Look up a multiplier, treating years outside the array as no growth."""
    if 0 <= year_index < len(multipliers):
        return multipliers[year_index]
    return 1.0


def monthly_compounding_multiplier(monthly_rate: float, month_index: int) -> float:
    """Compound a monthly rate (percent) over the absolute project month."""
    try:
        return (1 + monthly_rate / 100) ** month_index
    except OverflowError:
        return math.inf


def inflation_multiplier(inflation_rate: float, year_index: int) -> float:
    """Step general inflation (percent) up once per project year."""
    try:
        return (1 + inflation_rate / 100) ** year_index
    except OverflowError:
        return math.inf
