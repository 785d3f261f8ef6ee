"""
Monthly Projections

Runs the month-by-month income statement and cash flow for the whole
project horizon. Months are processed in order: loan lookups are positional
into the amortization schedules and growth factors are year-relative.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bizplan.calculations.amortization import interest_for_month, principal_for_month
from bizplan.calculations.depreciation import calculate_monthly_depreciation
from bizplan.calculations.growth import (
    MONTHS_PER_YEAR,
    build_annual_multipliers,
    inflation_multiplier,
    monthly_compounding_multiplier,
    multiplier_for_year,
    project_years,
)
from bizplan.schemas import (
    UNREACHABLE,
    AmortizationRow,
    BreakEvenValue,
    ExpenseCategory,
    GrowthType,
    MonthlyRecord,
    Product,
    ProjectConfiguration,
    RecurringExpense,
    RecurringRevenue,
)

logger = logging.getLogger(__name__)


def get_overrides(
    entry: Union[RecurringRevenue, RecurringExpense]
) -> Optional[List[float]]:
    """Year-1 overrides, only when all twelve months are given."""
    overrides = entry.monthly_overrides
    if overrides is not None and len(overrides) == MONTHS_PER_YEAR:
        return overrides
    return None


def get_base_amount(entry: Union[RecurringRevenue, RecurringExpense]) -> float:
    """
    Amount later years grow from.

    With year-1 overrides, growth starts from their average rather than the
    nominal initial amount.
    """
    overrides = get_overrides(entry)
    if overrides is not None:
        return sum(overrides) / MONTHS_PER_YEAR
    return entry.initial_monthly_amount


def calculate_contribution_margin_ratio(sales: float, variable_costs: float) -> float:
    """Share of each sale left after variable costs."""
    if sales > 0:
        return (sales - variable_costs) / sales
    return 0.0


def calculate_break_even(
    sales: float, variable_costs: float, fixed_costs: float
) -> Tuple[BreakEvenValue, BreakEvenValue]:
    """
    Calculate the break-even sales amount and its share of actual sales.

    Args:
        sales: Sales for the period
        variable_costs: Variable costs for the period
        fixed_costs: Fixed costs for the period

    Returns:
        Tuple of (break-even amount, break-even percent of sales). Either is
        ``UNREACHABLE`` when the contribution margin cannot cover fixed costs
        or there are no sales.
    """
    ratio = calculate_contribution_margin_ratio(sales, variable_costs)
    # A positive ratio implies positive sales
    if ratio <= 0:
        return UNREACHABLE, UNREACHABLE

    amount = fixed_costs / ratio
    return amount, amount / sales * 100


def calculate_product_variable_cost(
    product: Product,
    item_costs: Dict[int, float],
    sales_multiplier: float,
    cost_multiplier: float,
    inflation: float,
) -> float:
    """
    Variable cost of a product's monthly volume.

    Cost growth and inflation compound the unit cost; sales growth scales
    the volume.
    """
    unit_cost = sum(
        item_costs.get(item.id, 0.0) * cost_multiplier * inflation
        for item in product.bom_items
    )
    return product.units_sold_per_month * unit_cost * sales_multiplier


def project_months(
    config: ProjectConfiguration,
    total_months: int,
    revenues: List[RecurringRevenue],
    expenses: List[RecurringExpense],
    unit_costs: Dict[int, Dict[int, float]],
    depreciation_schedules: Dict[int, List[float]],
    loan_schedules: Dict[int, List[AmortizationRow]],
) -> List[MonthlyRecord]:
    """
    Generate monthly projections.

    Args:
        config: Project configuration
        total_months: Project horizon in months
        revenues: Manual and calculated revenues
        expenses: Manual and calculated expenses
        unit_costs: Resolved BOM unit costs, by product then BOM item
        depreciation_schedules: Annual depreciation per asset id
        loan_schedules: Amortization schedule per loan id

    Returns:
        One record per month, in order
    """
    years = project_years(total_months)
    products = config.advanced_config.products

    # Aligned with the entry lists; ids can repeat across manual and calculated entries
    revenue_multipliers = [
        build_annual_multipliers(rev.annual_growth_rates, years) for rev in revenues
    ]
    expense_multipliers = [
        build_annual_multipliers(exp.annual_growth_rates, years) for exp in expenses
    ]
    sales_multipliers = [
        build_annual_multipliers(p.annual_sales_growth_rates, years) for p in products
    ]
    cost_multipliers = [
        build_annual_multipliers(p.annual_variable_cost_growth_rates, years)
        for p in products
    ]

    logger.debug(
        "Projecting %d months: %d revenues, %d expenses, %d products, %d loans",
        total_months,
        len(revenues),
        len(expenses),
        len(products),
        len(loan_schedules),
    )

    records = []

    for i in range(total_months):
        year = i // MONTHS_PER_YEAR + 1
        year_index = year - 1
        month_in_year = i % MONTHS_PER_YEAR
        inflation = inflation_multiplier(config.inflation_rate, year_index)

        # === SALES ===
        sales = 0.0
        for rev, rev_multipliers in zip(revenues, revenue_multipliers):
            overrides = get_overrides(rev)
            if year == 1 and overrides is not None:
                sales += overrides[month_in_year]
            else:
                growth = multiplier_for_year(rev_multipliers, year_index)
                sales += get_base_amount(rev) * growth

        # === RECURRING EXPENSES ===
        fixed_costs = 0.0
        variable_costs = 0.0
        for exp, exp_multipliers in zip(expenses, expense_multipliers):
            overrides = get_overrides(exp)
            if year == 1 and overrides is not None:
                # Overrides already include any growth or inflation
                amount = overrides[month_in_year]
            else:
                if exp.growth_type == GrowthType.monthly:
                    growth = monthly_compounding_multiplier(exp.monthly_growth_rate, i)
                else:
                    growth = multiplier_for_year(exp_multipliers, year_index)
                amount = get_base_amount(exp) * growth * inflation

            if exp.category == ExpenseCategory.fixed:
                fixed_costs += amount
            else:
                variable_costs += amount

        # === PRODUCT VARIABLE COSTS ===
        for product, sales_growth, cost_growth in zip(
            products, sales_multipliers, cost_multipliers
        ):
            variable_costs += calculate_product_variable_cost(
                product,
                unit_costs.get(product.id, {}),
                multiplier_for_year(sales_growth, year_index),
                multiplier_for_year(cost_growth, year_index),
                inflation,
            )

        # === INCOME STATEMENT ===
        gross_profit = sales - variable_costs
        depreciation = calculate_monthly_depreciation(depreciation_schedules, year_index)
        ebitda = gross_profit - fixed_costs
        ebit = ebitda - depreciation
        interest = sum(
            interest_for_month(schedule, i) for schedule in loan_schedules.values()
        )
        ebt = ebit - interest
        # Losses carry no tax benefit
        taxes = max(0.0, ebt * (config.tax_rate / 100))
        net_income = ebt - taxes

        # === CASH FLOW ===
        principal_repayment = sum(
            principal_for_month(schedule, i) for schedule in loan_schedules.values()
        )
        net_cash_flow = net_income + depreciation - principal_repayment

        # === BREAK-EVEN ===
        bep_amount, bep_percent = calculate_break_even(sales, variable_costs, fixed_costs)

        costs = fixed_costs + variable_costs

        records.append(
            MonthlyRecord(
                year=year,
                month=month_in_year + 1,
                sales=sales,
                variable_costs=variable_costs,
                fixed_costs=fixed_costs,
                gross_profit=gross_profit,
                ebitda=ebitda,
                depreciation=depreciation,
                ebit=ebit,
                interest=interest,
                ebt=ebt,
                taxes=taxes,
                net_income=net_income,
                principal_repayment=principal_repayment,
                net_cash_flow=net_cash_flow,
                contribution_margin_ratio=calculate_contribution_margin_ratio(
                    sales, variable_costs
                ),
                break_even_amount=bep_amount,
                break_even_percent=bep_percent,
                benefits=sales,
                costs=costs,
                net_benefit=sales - costs,
            )
        )

    return records


def sum_field(records: Sequence[MonthlyRecord], field: str) -> float:
    """Sum a numeric field across monthly records."""
    return sum(getattr(record, field) for record in records)
