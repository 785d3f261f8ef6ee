"""
Derived Revenues and Expenses

Expands products and payroll into calculated recurring entries that sit
alongside the manually entered ones.
"""

from typing import Dict, List

from bizplan.calculations.unit_cost import calculate_product_unit_cost
from bizplan.schemas import (
    ExpenseCategory,
    GrowthType,
    InvestmentItem,
    PayrollConfig,
    Product,
    RecurringExpense,
    RecurringRevenue,
)

# Offset keeps product revenue ids clear of manual revenue ids
PRODUCT_REVENUE_ID_OFFSET = 10000
PAYROLL_EXPENSE_ID = 9001
DAYS_PER_MONTH = 30


def calculate_selling_price(product: Product, unit_costs: Dict[int, Dict[int, float]]) -> float:
    """Initial selling price: BOM cost marked up by the product's markup."""
    bom_cost = calculate_product_unit_cost(product, unit_costs)
    return bom_cost * (1 + product.markup_percentage / 100)


def build_product_revenue(
    product: Product, unit_costs: Dict[int, Dict[int, float]]
) -> RecurringRevenue:
    """Synthetic revenue entry for a product's monthly sales."""
    return RecurringRevenue(
        id=product.id + PRODUCT_REVENUE_ID_OFFSET,
        name=f"Sales of {product.name}",
        initial_monthly_amount=product.units_sold_per_month
        * calculate_selling_price(product, unit_costs),
        annual_growth_rates=list(product.annual_sales_growth_rates),
        is_calculated=True,
    )


def expand_revenues(
    manual_revenues: List[RecurringRevenue],
    products: List[Product],
    unit_costs: Dict[int, Dict[int, float]],
) -> List[RecurringRevenue]:
    """Manual revenues followed by one calculated entry per product."""
    return list(manual_revenues) + [
        build_product_revenue(product, unit_costs) for product in products
    ]


def calculate_base_payroll(payroll: PayrollConfig) -> float:
    """Monthly salaries of fixed positions plus temporary staff."""
    positions_total = sum(position.monthly_salary for position in payroll.positions)
    return positions_total + payroll.temporary_employees * payroll.temporary_employee_salary


def calculate_payroll_cost(payroll: PayrollConfig) -> float:
    """
    Total monthly payroll cost.

    Adds the monthly accrual of the vacation bonus and social charges on
    top of base salaries.

    Args:
        payroll: Payroll configuration

    Returns:
        Monthly payroll cost
    """
    base = calculate_base_payroll(payroll)
    vacation_pay = (
        (base / DAYS_PER_MONTH)
        * payroll.vacation_days_per_year
        * (payroll.vacation_bonus_rate / 100)
    )
    social_charges = base * (payroll.social_charges_rate / 100)
    return base + vacation_pay / 12 + social_charges


def build_payroll_expense(payroll: PayrollConfig) -> RecurringExpense:
    """Synthetic fixed expense carrying the whole payroll."""
    return RecurringExpense(
        id=PAYROLL_EXPENSE_ID,
        name="Payroll Cost (Calculated)",
        category=ExpenseCategory.fixed,
        initial_monthly_amount=calculate_payroll_cost(payroll),
        growth_type=GrowthType.annual,
        monthly_growth_rate=0.0,
        annual_growth_rates=[payroll.annual_salary_growth_rate],
        is_calculated=True,
    )


def expand_expenses(
    manual_expenses: List[RecurringExpense], payroll: PayrollConfig
) -> List[RecurringExpense]:
    """Manual expenses, plus the payroll expense when anyone is on payroll."""
    expenses = list(manual_expenses)
    if calculate_base_payroll(payroll) > 0:
        expenses.append(build_payroll_expense(payroll))
    return expenses


def calculate_net_initial_investment(items: List[InvestmentItem]) -> float:
    """Total initial outlay at month 0."""
    return sum(item.amount for item in items)
