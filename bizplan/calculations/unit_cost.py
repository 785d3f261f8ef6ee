"""
Bill-of-Materials Unit Costs

Resolves the per-unit cost of each BOM line item. Incomplete lines resolve
to zero rather than failing, so a half-filled product still projects.
"""

from typing import Dict, List

from bizplan.schemas import BOMItem, CostType, Product

WORK_HOURS_PER_DAY = 8
MINUTES_PER_HOUR = 60


def calculate_labor_cost(minutes_per_unit: float, daily_minimum_wage: float) -> float:
    """
    Calculate labor cost per unit from the daily minimum wage.

    Args:
        minutes_per_unit: Labor minutes needed for one unit
        daily_minimum_wage: Wage for an 8-hour day

    Returns:
        Cost per unit, 0 when no wage is configured
    """
    if daily_minimum_wage <= 0:
        return 0.0
    minute_rate = daily_minimum_wage / WORK_HOURS_PER_DAY / MINUTES_PER_HOUR
    return minute_rate * minutes_per_unit


def calculate_raw_material_cost(batch_cost: float, batch_yield: float) -> float:
    """Calculate raw material cost per unit from a batch."""
    if batch_yield <= 0:
        return 0.0
    return batch_cost / batch_yield


def resolve_unit_cost(item: BOMItem, daily_minimum_wage: float) -> float:
    """Resolve the cost per unit for a single BOM line item."""
    if item.cost_type == CostType.labor:
        return calculate_labor_cost(item.minutes_per_unit or 0.0, daily_minimum_wage)
    if item.cost_type == CostType.raw_material:
        return calculate_raw_material_cost(
            item.batch_cost or 0.0, item.batch_yield or 0.0
        )
    return 0.0


def resolve_unit_costs(
    products: List[Product], daily_minimum_wage: float
) -> Dict[int, Dict[int, float]]:
    """
    Resolve unit costs for every BOM line of every product.

    BOM item ids are only unique within a product, so costs are keyed by
    product id first.
    """
    return {
        product.id: {
            item.id: resolve_unit_cost(item, daily_minimum_wage)
            for item in product.bom_items
        }
        for product in products
    }


def calculate_product_unit_cost(
    product: Product, unit_costs: Dict[int, Dict[int, float]]
) -> float:
    """Sum the resolved BOM costs of one product."""
    item_costs = unit_costs.get(product.id, {})
    return sum(item_costs.get(item.id, 0.0) for item in product.bom_items)
