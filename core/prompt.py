from typing import List, Optional

from core.models import FinancialContext, PayoutPlan, Profile, Transaction
from core.money import format_date, naira

PROMPT_TRANSACTION_LIMIT = 5

_GUIDELINES = """IMPORTANT GUIDELINES:
1. Be concise, practical, and personalized in your advice.
2. Focus on helping the user manage their finances better using Planmoni's features.
3. When appropriate, suggest specific actions the user can take in the app.
4. If you recommend creating a payout plan, suggest they go to the Home tab and tap "Plan".
5. If you recommend adding funds, suggest they go to the Home tab and tap "Deposit".
6. Always be respectful of the user's financial situation.
7. Don't make up information - only use the context provided.
8. If you don't know something, say so honestly.

For certain actions, you can provide actionable buttons by including a JSON array in your response like this:
```json
[
  {
    "label": "Create Payout Plan",
    "route": "/create-payout/amount"
  },
  {
    "label": "Add Funds",
    "route": "/add-funds"
  }
]
```

Only include these actions when they're directly relevant to your response."""


def plan_line(plan: PayoutPlan) -> str:
    return (
        f"- {plan.name}: {naira(plan.payout_amount)} {plan.frequency}, "
        f"{plan.completed_payouts}/{plan.duration} completed"
    )


def transaction_line(tx: Transaction) -> str:
    return f"- {tx.type.upper()}: {naira(tx.amount)} ({tx.status}) on {format_date(tx.created_at)}"


def active_plans(plans: List[PayoutPlan]) -> List[PayoutPlan]:
    return [p for p in plans if p.status == "active"]


def build_system_prompt(
    context: FinancialContext,
    profile: Optional[Profile],
    plans: List[PayoutPlan],
    transactions: List[Transaction],
) -> str:
    user_name = (profile.first_name if profile else None) or "User"
    active = active_plans(plans)

    sections = [
        "You are a helpful and knowledgeable financial assistant for Planmoni, a financial app "
        "that helps users manage their finances through automated payout plans.",
        "USER CONTEXT:\n"
        f"- Name: {user_name}\n"
        f"- Available Balance: {naira(context.available_balance)}\n"
        f"- Locked Balance: {naira(context.locked_balance)}\n"
        f"- Total Balance: {naira(context.balance)}\n"
        f"- Active Payout Plans: {len(active)}\n"
        f"- Total Payout Plans: {len(plans)}",
        "PAYOUT PLANS:\n" + "\n".join(plan_line(p) for p in active),
        "RECENT TRANSACTIONS:\n"
        + "\n".join(transaction_line(t) for t in transactions[:PROMPT_TRANSACTION_LIMIT]),
        _GUIDELINES,
    ]
    return "\n\n".join(sections)
