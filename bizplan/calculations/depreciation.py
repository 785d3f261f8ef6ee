"""
Depreciation Schedules

Annual depreciation per asset under straight-line or double-declining
balance, never depreciating past salvage value.
"""

from typing import Dict, List, Sequence

from bizplan.schemas import DepreciableAsset, DepreciationMethod

DECLINING_BALANCE_FACTOR = 2


def build_depreciation_schedule(asset: DepreciableAsset, years: int) -> List[float]:
    """
    Build an annual depreciation vector for one asset.

    The vector is indexed by project year (0-based) and always has ``years``
    entries. Years past the useful life, or after the depreciable base is
    exhausted, are 0. The amount that would overshoot the base is truncated
    so accumulated depreciation lands exactly on it.

    Args:
        asset: Depreciable asset
        years: Number of project years

    Returns:
        List of annual depreciation amounts
    """
    depreciable_base = asset.initial_cost - asset.salvage_value
    book_value = asset.initial_cost
    accumulated = 0.0
    schedule = []

    for year_index in range(years):
        depreciation = 0.0

        if year_index < asset.useful_life_years and accumulated < depreciable_base:
            if asset.method == DepreciationMethod.straight_line:
                depreciation = depreciable_base / asset.useful_life_years
            elif asset.method == DepreciationMethod.declining_balance:
                rate = DECLINING_BALANCE_FACTOR / asset.useful_life_years
                depreciation = book_value * rate

        if accumulated + depreciation > depreciable_base:
            depreciation = depreciable_base - accumulated

        accumulated += depreciation
        book_value -= depreciation
        schedule.append(depreciation)

    return schedule


def depreciation_for_year(schedule: Sequence[float], year_index: int) -> float:
    """Depreciation for a project year, 0 outside the schedule."""
    if 0 <= year_index < len(schedule):
        return schedule[year_index]
    return 0.0


def calculate_monthly_depreciation(
    schedules: Dict[int, List[float]], year_index: int
) -> float:
    """Spread each asset's annual depreciation evenly over the year's months."""
    return sum(
        depreciation_for_year(schedule, year_index) / 12
        for schedule in schedules.values()
    )


def calculate_total_salvage_value(assets: List[DepreciableAsset]) -> float:
    """Residual value of all assets at the end of the horizon."""
    return sum(asset.salvage_value for asset in assets)
