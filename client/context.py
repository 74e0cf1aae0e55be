from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from core.models import FinancialContext, TransactionSummary
from core.money import format_date

CONTEXT_TRANSACTION_LIMIT = 5


class SessionProvider(Protocol):
    user_id: Optional[str]
    access_token: Optional[str]
    display_name: Optional[str]


@dataclass
class Balances:
    balance: float = 0.0
    locked_balance: float = 0.0
    available_balance: float = 0.0


class BalanceProvider(Protocol):
    def get_balances(self) -> Balances: ...


class PayoutPlanProvider(Protocol):
    def list_plans(self) -> List[Dict[str, Any]]: ...


class TransactionProvider(Protocol):
    def list_transactions(self) -> List[Dict[str, Any]]: ...


@dataclass
class StaticSession:
    """Plain SessionProvider for scripts and tests."""

    user_id: Optional[str] = None
    access_token: Optional[str] = None
    display_name: Optional[str] = None


class ContextBuilder:
    """Builds a fresh FinancialContext from the live providers on every call."""

    def __init__(
        self,
        balances: BalanceProvider,
        plans: PayoutPlanProvider,
        transactions: TransactionProvider,
    ):
        self.balances = balances
        self.plans = plans
        self.transactions = transactions

    def __call__(self) -> FinancialContext:
        b = self.balances.get_balances()
        plans = self.plans.list_plans()
        recent = self.transactions.list_transactions()[:CONTEXT_TRANSACTION_LIMIT]

        return FinancialContext(
            balance=b.balance,
            locked_balance=b.locked_balance,
            available_balance=b.available_balance,
            active_plan_count=sum(1 for p in plans if p.get("status") == "active"),
            total_plan_count=len(plans),
            recent_transactions=[
                TransactionSummary(
                    type=t.get("type", ""),
                    amount=t.get("amount", 0),
                    status=t.get("status", ""),
                    date=format_date(t.get("created_at")),
                )
                for t in recent
            ],
        )
