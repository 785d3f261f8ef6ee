"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bizplan.schemas import ProjectConfiguration

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


def load_scenario(name: str) -> ProjectConfiguration:
    """Load a saved scenario from the fixtures directory."""
    path = FIXTURES_DIR / f"{name}.json"
    return ProjectConfiguration.model_validate_json(path.read_text(encoding="utf-8"))


@pytest.fixture
def blank_config():
    """Empty plan: no investment, revenues, costs or loans."""
    return load_scenario("blank_scenario")


@pytest.fixture
def taqueria_config():
    """Small restaurant plan with products, payroll and a loan."""
    return load_scenario("taqueria_scenario")


@pytest.fixture
def simple_config():
    """One 100,000 investment and 10,000/month flat revenue over 12 months."""
    return ProjectConfiguration(
        project_duration=12,
        tax_rate=0,
        discount_rate=0,
        investment_items=[{"id": 1, "name": "Equipment", "amount": 100000}],
        recurring_revenues=[
            {"id": 1, "name": "Subscriptions", "initial_monthly_amount": 10000}
        ],
    )
