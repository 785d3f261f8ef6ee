"""
Tests for the full projection pipeline.
"""

import math

import pytest

from bizplan.calculations.engine import calculate_total_months, compute_projections
from bizplan.calculations.irr import calculate_npv
from bizplan.schemas import (
    NEVER,
    UNREACHABLE,
    DurationUnit,
    IncrementalConfig,
    Loan,
    PaybackPeriod,
    ProjectConfiguration,
)


class TestScenarios:
    """Reference scenarios."""

    def test_empty_plan(self, blank_config):
        result = compute_projections(blank_config, DurationUnit.years)
        fm = result.financial_metrics

        assert result.total_months == 60
        assert result.net_initial_investment == 0
        assert all(m.net_cash_flow == 0 for m in result.monthly_breakdown)
        assert fm.npv == 0
        assert fm.irr is None
        assert fm.roi is None
        assert fm.payback_period == NEVER
        assert fm.cost_benefit_ratio == 0
        assert fm.meets_minimum_irr is None

    def test_single_investment_flat_revenue(self, simple_config):
        result = compute_projections(simple_config, DurationUnit.months)
        summaries = result.annual_summaries

        assert len(summaries) == 1
        assert summaries[0].cash_flow.net_cash_flow == pytest.approx(120000)
        assert result.annual_cash_flow_series[1].cumulative_cash_flow == pytest.approx(20000)

        payback = result.financial_metrics.payback_period
        assert isinstance(payback, PaybackPeriod)
        assert payback.years == 0
        # 100,000 / 120,000 of a year is about 10 months
        assert payback.months * 30 + payback.days == pytest.approx(300, abs=1)

        assert result.financial_metrics.npv == pytest.approx(20000)
        assert result.financial_metrics.roi == pytest.approx(120)

    def test_flat_revenue_with_taxes(self, simple_config):
        config = simple_config.model_copy(update={"tax_rate": 30})
        result = compute_projections(config, DurationUnit.months)
        assert result.annual_summaries[0].cash_flow.net_cash_flow == pytest.approx(84000)
        assert result.annual_summaries[0].income_statement.taxes == pytest.approx(36000)

    def test_zero_rate_loan_schedule(self, blank_config):
        loan = Loan(id=7, name="Family loan", principal=12000, annual_interest_rate=0, term_months=12)
        config = blank_config.model_copy(update={"loans": [loan]})
        result = compute_projections(config, DurationUnit.years)

        schedule = result.loan_schedules[7]
        assert len(schedule) == 12
        assert all(row.payment == 1000 and row.principal == 1000 and row.interest == 0 for row in schedule)
        assert schedule[-1].remaining_balance == 0
        assert result.monthly_breakdown[0].net_cash_flow == pytest.approx(-1000)
        assert result.monthly_breakdown[12].net_cash_flow == 0
        assert result.annual_summaries[0].cash_flow.annual_principal_repayment == pytest.approx(12000)


class TestMonthlyProjection:
    """Monthly loop behaviour."""

    def test_duration_units(self):
        assert calculate_total_months(3, DurationUnit.years) == 36
        assert calculate_total_months(18, DurationUnit.months) == 18

    def test_partial_final_year(self, simple_config):
        config = simple_config.model_copy(update={"project_duration": 18})
        result = compute_projections(config, DurationUnit.months)
        assert len(result.monthly_breakdown) == 18
        assert len(result.annual_summaries) == 2
        assert result.annual_summaries[1].income_statement.sales == pytest.approx(60000)

    def test_revenue_overrides_and_later_growth(self):
        overrides = [1000.0] * 6 + [3000.0] * 6
        config = ProjectConfiguration(
            project_duration=2,
            recurring_revenues=[
                {
                    "id": 1,
                    "name": "Seasonal",
                    "initial_monthly_amount": 99999,
                    "annual_growth_rates": [10],
                    "monthly_overrides": overrides,
                }
            ],
        )
        result = compute_projections(config, DurationUnit.years)
        months = result.monthly_breakdown

        assert months[0].sales == 1000
        assert months[11].sales == 3000
        # Year 2 grows from the override average (2000), not the initial amount
        assert months[12].sales == pytest.approx(2200)

    def test_incomplete_overrides_are_ignored(self):
        config = ProjectConfiguration(
            project_duration=1,
            recurring_revenues=[
                {"id": 1, "name": "Sales", "initial_monthly_amount": 500, "monthly_overrides": [1, 2, 3]}
            ],
        )
        result = compute_projections(config, DurationUnit.years)
        assert result.monthly_breakdown[0].sales == 500

    def test_expense_growth_and_inflation(self):
        config = ProjectConfiguration(
            project_duration=2,
            inflation_rate=10,
            recurring_expenses=[
                {"id": 1, "name": "Rent", "category": "fixed", "initial_monthly_amount": 1000, "annual_growth_rates": [5]},
                {
                    "id": 2,
                    "name": "Ads",
                    "category": "variable",
                    "initial_monthly_amount": 100,
                    "growth_type": "monthly",
                    "monthly_growth_rate": 2,
                },
            ],
        )
        result = compute_projections(config, DurationUnit.years)
        months = result.monthly_breakdown

        assert months[0].fixed_costs == pytest.approx(1000)
        assert months[12].fixed_costs == pytest.approx(1000 * 1.05 * 1.10)
        assert months[0].variable_costs == pytest.approx(100)
        assert months[5].variable_costs == pytest.approx(100 * 1.02 ** 5)
        assert months[13].variable_costs == pytest.approx(100 * 1.02 ** 13 * 1.10)

    def test_expense_overrides_and_later_growth(self):
        overrides = [100.0] * 6 + [300.0] * 6
        config = ProjectConfiguration(
            project_duration=2,
            inflation_rate=5,
            recurring_expenses=[
                {
                    "id": 1,
                    "name": "Utilities",
                    "category": "fixed",
                    "initial_monthly_amount": 9999,
                    "annual_growth_rates": [10],
                    "monthly_overrides": overrides,
                }
            ],
        )
        result = compute_projections(config, DurationUnit.years)
        months = result.monthly_breakdown

        assert [m.fixed_costs for m in months[:12]] == overrides
        # Year 2 grows from the override average (200) with growth and inflation
        assert months[12].fixed_costs == pytest.approx(200 * 1.10 * 1.05)
        assert months[23].fixed_costs == pytest.approx(200 * 1.10 * 1.05)

    def test_shared_ids_keep_their_own_growth(self):
        config = ProjectConfiguration(
            project_duration=2,
            recurring_expenses=[
                {
                    "id": 9001,
                    "name": "Rent",
                    "category": "fixed",
                    "initial_monthly_amount": 1000,
                    "annual_growth_rates": [100],
                }
            ],
            payroll_config={"positions": [{"id": 1, "name": "Cook", "monthly_salary": 2000}]},
        )
        result = compute_projections(config, DurationUnit.years)
        months = result.monthly_breakdown

        assert months[0].fixed_costs == pytest.approx(3000)
        assert months[12].fixed_costs == pytest.approx(2000 + 2000)

    def test_runaway_growth_does_not_raise(self):
        config = ProjectConfiguration(
            project_duration=50,
            recurring_expenses=[
                {
                    "id": 1,
                    "name": "Runaway",
                    "category": "variable",
                    "initial_monthly_amount": 100,
                    "growth_type": "monthly",
                    "monthly_growth_rate": 1000,
                }
            ],
        )
        result = compute_projections(config, DurationUnit.years)

        assert result.monthly_breakdown[-1].variable_costs == math.inf
        assert result.financial_metrics.irr is None
        assert result.financial_metrics.payback_period == NEVER

    def test_product_sales_and_costs(self):
        config = ProjectConfiguration(
            project_duration=2,
            inflation_rate=5,
            advanced_config={
                "products": [
                    {
                        "id": 1,
                        "name": "Candle",
                        "units_sold_per_month": 100,
                        "markup_percentage": 100,
                        "annual_sales_growth_rates": [20],
                        "annual_variable_cost_growth_rates": [10],
                        "bom_items": [
                            {"id": 1, "component_name": "Wax", "cost_type": "raw_material", "batch_cost": 30, "batch_yield": 10}
                        ],
                    }
                ]
            },
        )
        result = compute_projections(config, DurationUnit.years)
        months = result.monthly_breakdown

        # Unit cost 3, price 6
        assert months[0].sales == pytest.approx(600)
        assert months[0].variable_costs == pytest.approx(300)
        assert months[12].sales == pytest.approx(720)
        assert months[12].variable_costs == pytest.approx(100 * 3 * 1.10 * 1.05 * 1.20)
        assert result.derived_data.recurring_revenues[0].is_calculated
        assert result.derived_data.bom_item_costs == {1: {1: 3.0}}

    def test_losses_are_not_taxed(self):
        config = ProjectConfiguration(
            project_duration=1,
            tax_rate=30,
            recurring_expenses=[{"id": 1, "name": "Rent", "initial_monthly_amount": 1000}],
        )
        result = compute_projections(config, DurationUnit.years)
        month = result.monthly_breakdown[0]
        assert month.ebt == -1000
        assert month.taxes == 0
        assert month.net_income == -1000

    def test_income_statement_chain(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        for m in result.monthly_breakdown:
            assert m.gross_profit == pytest.approx(m.sales - m.variable_costs)
            assert m.ebitda == pytest.approx(m.gross_profit - m.fixed_costs)
            assert m.ebit == pytest.approx(m.ebitda - m.depreciation)
            assert m.ebt == pytest.approx(m.ebit - m.interest)
            assert m.net_income == pytest.approx(m.ebt - m.taxes)
            assert m.net_cash_flow == pytest.approx(
                m.net_income + m.depreciation - m.principal_repayment
            )

    def test_monthly_break_even(self, blank_config):
        config = blank_config.model_copy(update={"project_duration": 1})
        result = compute_projections(config, DurationUnit.years)
        assert result.monthly_breakdown[0].break_even_amount == UNREACHABLE
        assert result.monthly_breakdown[0].break_even_percent == UNREACHABLE


class TestAnnualAggregation:
    """Annual roll-up and series."""

    def test_salvage_only_in_final_year(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        summaries = result.annual_summaries

        assert [s.cash_flow.salvage_value for s in summaries] == [0, 0, pytest.approx(823.5)]
        for s in summaries:
            cf = s.cash_flow
            assert cf.net_cash_flow == pytest.approx(
                cf.net_income + cf.annual_depreciation - cf.annual_principal_repayment + cf.salvage_value
            )

    def test_annual_totals_match_months(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        for s in result.annual_summaries:
            months = [m for m in result.monthly_breakdown if m.year == s.year]
            assert s.income_statement.sales == pytest.approx(sum(m.sales for m in months))
            assert s.income_statement.net_income == pytest.approx(sum(m.net_income for m in months))

    def test_loan_principal_fully_repaid(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        repaid = sum(s.cash_flow.annual_principal_repayment for s in result.annual_summaries)
        assert repaid == pytest.approx(6000)

    def test_annual_break_even_from_totals(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        be = result.annual_summaries[0].break_even
        ratio = (be.sales - be.variable_costs) / be.sales
        assert be.contribution_margin_ratio == pytest.approx(ratio)
        if ratio > 0:
            assert be.break_even_amount == pytest.approx(be.fixed_costs / ratio)

    def test_cash_flow_series(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        series = result.annual_cash_flow_series
        investment = result.net_initial_investment

        assert investment == pytest.approx(8235 + 3949 + 7711.26)
        assert series[0].year == 0
        assert series[0].cumulative_cash_flow == pytest.approx(-investment)
        assert len(series) == len(result.annual_summaries) + 1
        assert series[-1].cumulative_cash_flow == pytest.approx(
            -investment + sum(s.cash_flow.net_cash_flow for s in result.annual_summaries)
        )

        monthly = result.monthly_cash_flow_series
        assert monthly[0].label == "Y1M1"
        assert monthly[0].cumulative_cash_flow == pytest.approx(
            -investment + result.monthly_breakdown[0].net_cash_flow
        )

    def test_cost_benefit_series(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        first = result.annual_cost_benefit_series[0]
        assert first.cumulative_costs == pytest.approx(result.net_initial_investment + first.costs)
        assert first.cumulative_net_benefit == pytest.approx(
            first.cumulative_benefits - first.cumulative_costs
        )
        assert len(result.monthly_cost_benefit_series) == 36


class TestFinancialMetrics:
    """Metrics computed from the projection."""

    def test_cost_benefit_ratio(self):
        config = ProjectConfiguration(
            project_duration=2,
            discount_rate=10,
            investment_items=[{"id": 1, "name": "Oven", "amount": 1000}],
            recurring_revenues=[{"id": 1, "name": "Sales", "initial_monthly_amount": 500}],
            recurring_expenses=[
                {"id": 1, "name": "Rent", "category": "fixed", "initial_monthly_amount": 200}
            ],
        )
        result = compute_projections(config, DurationUnit.years)

        benefits = 6000 / 1.1 + 6000 / 1.1 ** 2
        costs = 1000 + 2400 / 1.1 + 2400 / 1.1 ** 2
        assert result.financial_metrics.cost_benefit_ratio == pytest.approx(benefits / costs)

    def test_total_loss_discount_rate(self):
        config = ProjectConfiguration(
            project_duration=2,
            discount_rate=-100,
            investment_items=[{"id": 1, "name": "Oven", "amount": 1000}],
            recurring_revenues=[{"id": 1, "name": "Sales", "initial_monthly_amount": 100}],
        )
        fm = compute_projections(config, DurationUnit.years).financial_metrics

        assert fm.cost_benefit_ratio == math.inf
        assert fm.npv == math.inf

    def test_npv_matches_series(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        flows = [p.net_cash_flow for p in result.annual_cash_flow_series]
        assert result.financial_metrics.npv == pytest.approx(calculate_npv(flows, 0.18))
        assert sum(c.discounted_cash_flow for c in result.annual_npv_contributions) == pytest.approx(
            result.financial_metrics.npv
        )

    def test_npv_zero_at_irr(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        irr = result.financial_metrics.irr
        assert irr is not None
        flows = [p.net_cash_flow for p in result.annual_cash_flow_series]
        scale = max(abs(f) for f in flows)
        assert abs(calculate_npv(flows, irr / 100)) <= 1e-5 * scale
        assert result.financial_metrics.meets_minimum_irr == (irr >= 18)

    def test_payback_boundary(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years)
        payback = result.financial_metrics.payback_period
        series = result.annual_cash_flow_series
        if payback == NEVER:
            assert series[-1].cumulative_cash_flow <= 0
        else:
            assert series[payback.years + 1].cumulative_cash_flow > 0
            assert series[payback.years].cumulative_cash_flow <= 0

    def test_idempotent(self, taqueria_config):
        first = compute_projections(taqueria_config, DurationUnit.years)
        second = compute_projections(taqueria_config, DurationUnit.years)
        assert first == second
        assert first.model_dump() == second.model_dump()


class TestIncrementalAnalysis:
    """Single-investment analysis through the engine."""

    def test_no_selection(self, taqueria_config):
        result = compute_projections(taqueria_config, DurationUnit.years, IncrementalConfig())
        assert result.financial_metrics.incremental_irr is None
        assert result.financial_metrics.incremental_npv is None

    def test_unknown_investment(self, taqueria_config):
        result = compute_projections(
            taqueria_config, DurationUnit.years, IncrementalConfig(investment_id=99)
        )
        assert result.financial_metrics.incremental_npv is None

    def test_investment_with_loan(self, taqueria_config):
        result = compute_projections(
            taqueria_config,
            DurationUnit.years,
            IncrementalConfig(investment_id=1, loan_id=1, impact_percentage=40),
        )
        fm = result.financial_metrics
        assert fm.incremental_npv is not None

        # t0 is the loan-financed share of the 8,235 outlay
        expected_t0 = 6000 - 8235
        flows = [expected_t0] + [
            s.cash_flow.net_cash_flow * 0.4 for s in result.annual_summaries
        ]
        assert fm.incremental_npv < calculate_npv(flows, 0.18)
