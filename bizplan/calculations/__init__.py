"""
Financial Projection Engine

Calculation modules that turn a business plan configuration into monthly
and annual statements and investment metrics. Every function is pure: no
I/O, no shared state, same inputs give the same outputs.
"""

from bizplan.calculations import (
    unit_cost,
    growth,
    amortization,
    depreciation,
    derived,
    projection,
    annual,
    irr,
    metrics,
    incremental,
    engine,
)

__all__ = [
    "unit_cost",
    "growth",
    "amortization",
    "depreciation",
    "derived",
    "projection",
    "annual",
    "irr",
    "metrics",
    "incremental",
    "engine",
]
