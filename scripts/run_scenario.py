"""
Run projections for a saved scenario file and print the headline metrics.

Usage:
    python scripts/run_scenario.py tests/fixtures/taqueria_scenario.json [years|months]
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bizplan.calculations.engine import compute_projections
from bizplan.schemas import DurationUnit, ProjectConfiguration


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    with open(sys.argv[1], encoding="utf-8") as fh:
        config = ProjectConfiguration.model_validate_json(fh.read())

    unit = DurationUnit(sys.argv[2]) if len(sys.argv) > 2 else DurationUnit.years
    result = compute_projections(config, unit)
    fm = result.financial_metrics

    print(f"Horizon: {result.total_months} months")
    print(f"Initial investment: {result.net_initial_investment:,.2f}")
    for summary in result.annual_summaries:
        cf = summary.cash_flow
        print(
            f"  Year {summary.year}: sales {summary.income_statement.sales:,.2f}"
            f"  net income {cf.net_income:,.2f}  net cash flow {cf.net_cash_flow:,.2f}"
        )
    print(f"NPV: {fm.npv:,.2f}")
    print(f"IRR: {'n/a' if fm.irr is None else f'{fm.irr:.2f}%'}")
    if isinstance(fm.payback_period, str):
        print("Payback: never")
    else:
        pb = fm.payback_period
        print(f"Payback: {pb.years} years, {pb.months} months, {pb.days} days")
    print(f"Benefit/cost ratio: {fm.cost_benefit_ratio:.2f}")
    print(f"ROI: {'n/a' if fm.roi is None else f'{fm.roi:.2f}%'}")


if __name__ == "__main__":
    main()
