"""
Data model for the projection engine.

Input models describe a business plan and are immutable for the duration of
a computation. Output models are the structured statements the engine
produces. Everything serialises with camelCase aliases so saved projects from
the editor load unchanged.
"""

import enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


UNREACHABLE = "unreachable"
NEVER = "never"

BreakEvenValue = Union[float, Literal["unreachable"]]


class InputModel(BaseModel):
    """Base for caller-supplied configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class ResultModel(BaseModel):
    """Base for engine output. Consumers treat these as read-only."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- Enumerations ---


class InvestmentCategory(str, enum.Enum):
    fixed_asset = "fixed_asset"
    deferred_asset = "deferred_asset"
    working_capital = "working_capital"


class AcquisitionSource(str, enum.Enum):
    new_contribution = "new_contribution"
    existing_contribution = "existing_contribution"
    financing = "financing"
    donation = "donation"


class DepreciationMethod(str, enum.Enum):
    straight_line = "straight_line"
    declining_balance = "declining_balance"


class ExpenseCategory(str, enum.Enum):
    fixed = "fixed"
    variable = "variable"


class GrowthType(str, enum.Enum):
    """Annual phased growth or compounding over the absolute month index."""

    annual = "annual"
    monthly = "monthly"


class CostType(str, enum.Enum):
    raw_material = "raw_material"
    labor = "labor"


class DurationUnit(str, enum.Enum):
    years = "years"
    months = "months"


# --- Configuration ---


class InvestmentItem(InputModel):
    id: int
    name: str
    category: InvestmentCategory = InvestmentCategory.fixed_asset
    amount: float = 0.0
    acquisition_source: AcquisitionSource = AcquisitionSource.new_contribution
    is_calculated: bool = False


class DepreciableAsset(InputModel):
    id: int
    name: str
    initial_cost: float = 0.0
    salvage_value: float = 0.0
    useful_life_years: int = 1
    method: DepreciationMethod = DepreciationMethod.straight_line


class RecurringRevenue(InputModel):
    id: int
    name: str
    initial_monthly_amount: float = 0.0
    annual_growth_rates: List[float] = Field(default_factory=list)
    # Twelve literal amounts that replace the computed first year
    monthly_overrides: Optional[List[float]] = None
    is_calculated: bool = False


class RecurringExpense(InputModel):
    id: int
    name: str
    category: ExpenseCategory = ExpenseCategory.fixed
    initial_monthly_amount: float = 0.0
    growth_type: GrowthType = GrowthType.annual
    monthly_growth_rate: float = 0.0
    annual_growth_rates: List[float] = Field(default_factory=list)
    monthly_overrides: Optional[List[float]] = None
    is_calculated: bool = False


class Loan(InputModel):
    id: int
    name: str
    principal: float = 0.0
    annual_interest_rate: float = 0.0
    term_months: int = 0


class Position(InputModel):
    id: int
    name: str
    monthly_salary: float = 0.0


class PayrollConfig(InputModel):
    positions: List[Position] = Field(default_factory=list)
    vacation_days_per_year: float = 0.0
    vacation_bonus_rate: float = 0.0
    temporary_employees: int = 0
    temporary_employee_salary: float = 0.0
    social_charges_rate: float = 0.0
    annual_salary_growth_rate: float = 0.0
    daily_minimum_wage: float = 0.0


class WorkingCapitalConfig(InputModel):
    accounts_receivable_days: float = 0.0
    accounts_payable_days: float = 0.0


class BOMItem(InputModel):
    """
    One bill-of-materials line.

    Raw material lines use the batch fields; labor lines use
    ``minutes_per_unit``.
    """

    id: int
    component_name: str
    cost_type: CostType
    batch_cost: Optional[float] = None
    batch_quantity: Optional[float] = None
    batch_unit: Optional[str] = None
    batch_yield: Optional[float] = None
    minutes_per_unit: Optional[float] = None


class Product(InputModel):
    id: int
    name: str
    bom_items: List[BOMItem] = Field(default_factory=list)
    markup_percentage: float = 0.0
    units_sold_per_month: float = 0.0
    annual_sales_growth_rates: List[float] = Field(default_factory=list)
    annual_variable_cost_growth_rates: List[float] = Field(default_factory=list)
    annual_price_increase_rates: List[float] = Field(default_factory=list)


class AdvancedConfig(InputModel):
    products: List[Product] = Field(default_factory=list)


class ProjectConfiguration(InputModel):
    """Complete business plan handed to the engine."""

    project_duration: int = Field(5, gt=0)
    tax_rate: float = 0.0
    discount_rate: float = 10.0
    inflation_rate: float = 0.0
    minimum_acceptable_irr: float = 10.0
    investment_items: List[InvestmentItem] = Field(default_factory=list)
    depreciable_assets: List[DepreciableAsset] = Field(default_factory=list)
    recurring_revenues: List[RecurringRevenue] = Field(default_factory=list)
    recurring_expenses: List[RecurringExpense] = Field(default_factory=list)
    loans: List[Loan] = Field(default_factory=list)
    payroll_config: PayrollConfig = Field(default_factory=PayrollConfig)
    working_capital_config: WorkingCapitalConfig = Field(
        default_factory=WorkingCapitalConfig
    )
    advanced_config: AdvancedConfig = Field(default_factory=AdvancedConfig)
    notes: str = ""


class IncrementalConfig(InputModel):
    """Selects one investment (and optionally its loan) for marginal analysis."""

    investment_id: Optional[int] = None
    loan_id: Optional[int] = None
    impact_percentage: float = 100.0


# --- Results ---


class AmortizationRow(ResultModel):
    month: int
    payment: float
    interest: float
    principal: float
    remaining_balance: float


class MonthlyRecord(ResultModel):
    year: int
    month: int
    sales: float
    variable_costs: float
    fixed_costs: float
    gross_profit: float
    ebitda: float
    depreciation: float
    ebit: float
    interest: float
    ebt: float
    taxes: float
    net_income: float
    principal_repayment: float
    net_cash_flow: float
    contribution_margin_ratio: float
    break_even_amount: BreakEvenValue
    break_even_percent: BreakEvenValue
    benefits: float
    costs: float
    net_benefit: float


class IncomeStatement(ResultModel):
    year: int
    sales: float
    fixed_costs: float
    variable_costs: float
    gross_profit: float
    annual_depreciation: float
    annual_interest: float
    ebt: float
    taxes: float
    net_income: float


class AnnualCashFlow(ResultModel):
    year: int
    net_income: float
    annual_depreciation: float
    annual_principal_repayment: float
    salvage_value: float
    net_cash_flow: float


class BreakEven(ResultModel):
    year: int
    sales: float
    fixed_costs: float
    variable_costs: float
    contribution_margin_ratio: float
    break_even_amount: BreakEvenValue
    break_even_percent: BreakEvenValue


class CostBenefit(ResultModel):
    year: int
    benefits: float
    costs: float
    net_benefit: float


class AnnualSummary(ResultModel):
    year: int
    income_statement: IncomeStatement
    cash_flow: AnnualCashFlow
    break_even: BreakEven
    cost_benefit: CostBenefit


class CashFlowPoint(ResultModel):
    year: int
    month: Optional[int] = None
    label: str
    net_cash_flow: float
    cumulative_cash_flow: float


class CostBenefitPoint(ResultModel):
    year: int
    month: Optional[int] = None
    benefits: float
    costs: float
    net_benefit: float
    cumulative_benefits: float
    cumulative_costs: float
    cumulative_net_benefit: float


class NPVContribution(ResultModel):
    year: int
    cash_flow: float
    discounted_cash_flow: float


class PaybackPeriod(ResultModel):
    years: int
    months: int
    days: int


class FinancialMetrics(ResultModel):
    npv: float
    irr: Optional[float] = None
    payback_period: Union[PaybackPeriod, Literal["never"]]
    cost_benefit_ratio: float
    roi: Optional[float] = None
    meets_minimum_irr: Optional[bool] = None
    incremental_irr: Optional[float] = None
    incremental_npv: Optional[float] = None


class DerivedData(ResultModel):
    """Intermediate entities the engine derived, exposed for display."""

    investment_items: List[InvestmentItem]
    recurring_revenues: List[RecurringRevenue]
    recurring_expenses: List[RecurringExpense]
    # product id -> BOM item id -> unit cost
    bom_item_costs: Dict[int, Dict[int, float]]
    net_initial_investment: float


class ProjectionResult(ResultModel):
    total_months: int
    net_initial_investment: float
    monthly_breakdown: List[MonthlyRecord]
    annual_summaries: List[AnnualSummary]
    annual_cash_flow_series: List[CashFlowPoint]
    monthly_cash_flow_series: List[CashFlowPoint]
    annual_cost_benefit_series: List[CostBenefitPoint]
    monthly_cost_benefit_series: List[CostBenefitPoint]
    annual_npv_contributions: List[NPVContribution]
    financial_metrics: FinancialMetrics
    loan_schedules: Dict[int, List[AmortizationRow]]
    derived_data: DerivedData
