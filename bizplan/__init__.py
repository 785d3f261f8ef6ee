"""
Business plan projection engine.
"""

from bizplan.calculations.engine import compute_projections

__all__ = ["compute_projections"]
