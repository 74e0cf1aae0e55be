"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from core.models import FinancialContext, PayoutPlan, Profile, Transaction


@pytest.fixture
def october_15() -> date:
    return date(2026, 10, 15)


@pytest.fixture
def sample_context() -> FinancialContext:
    return FinancialContext.model_validate({
        "balance": 250000,
        "lockedBalance": 150000,
        "availableBalance": 100000,
        "activePlanCount": 1,
        "totalPlanCount": 2,
        "recentTransactions": [
            {"type": "deposit", "amount": 200000, "status": "completed", "date": "10/1/2026"},
            {"type": "payout", "amount": 20000, "status": "completed", "date": "10/8/2026"},
        ],
    })


@pytest.fixture
def sample_plans():
    return [
        PayoutPlan(name="Rent", status="active", payout_amount=50000, frequency="monthly",
                   completed_payouts=2, duration=12),
        PayoutPlan(name="Old", status="completed", payout_amount=10000, frequency="weekly",
                   completed_payouts=4, duration=4),
    ]


@pytest.fixture
def sample_transactions():
    return [
        Transaction(type="deposit", amount=200000, status="completed", created_at="2026-10-01T09:30:00Z"),
        Transaction(type="payout", amount=20000, status="pending", created_at="2026-10-08T12:00:00+00:00"),
    ]


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(first_name="Ada", last_name="Obi")
