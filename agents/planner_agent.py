import math
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from core.extract import extract_amount, extract_timeframe
from core.models import AssistantAction
from core.money import naira

DEFAULT_TARGET_AMOUNT = 500_000
DEFAULT_TIMEFRAME_MONTHS = 6

WEEKS_PER_MONTH = 4.33
# Plan-creation flow takes whole weeks; a month is booked as 4 of them
HANDOFF_WEEKS_PER_MONTH = 4
CREATE_PLAN_ROUTE = "/create-payout/amount"


class Cadence(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


_TITLES = {
    Cadence.WEEKLY: ("Weekly Plan", "every week"),
    Cadence.BIWEEKLY: ("Bi-weekly Plan", "every two weeks"),
    Cadence.MONTHLY: ("Monthly Plan", "every month"),
}


@dataclass(frozen=True)
class PlanProposal:
    title: str
    cadence: Cadence
    amount_per_cadence: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["cadence"] = self.cadence.value
        return d


@dataclass(frozen=True)
class PlanHandoff:
    amount: float
    frequency: Cadence
    duration_in_weeks: int
    route: str = CREATE_PLAN_ROUTE

    def to_action(self, label: str = "Create Payout Plan") -> AssistantAction:
        return AssistantAction(
            label=label,
            route=self.route,
            params={
                "amount": _plain_number(self.amount),
                "frequency": self.frequency.value,
                "duration": str(self.duration_in_weeks),
            },
        )


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _proposal(cadence: Cadence, amount: int, months: int) -> PlanProposal:
    title, every = _TITLES[cadence]
    return PlanProposal(title, cadence, amount, f"{naira(amount)} {every} for {months} months")


def synthesize_plans(target_amount: float, timeframe_months: int) -> List[PlanProposal]:
    """
    Split a savings goal into weekly, bi-weekly and monthly contributions.

    Every figure is rounded up so following a plan reaches the goal rather
    than falling just short of it.
    """
    if target_amount <= 0:
        raise ValueError(f"target_amount must be positive, got {target_amount}")
    if timeframe_months <= 0:
        raise ValueError(f"timeframe_months must be positive, got {timeframe_months}")

    monthly = math.ceil(target_amount / timeframe_months)
    weekly = math.ceil(monthly / WEEKS_PER_MONTH)
    biweekly = math.ceil(monthly / 2)

    return [
        _proposal(Cadence.WEEKLY, weekly, timeframe_months),
        _proposal(Cadence.BIWEEKLY, biweekly, timeframe_months),
        _proposal(Cadence.MONTHLY, monthly, timeframe_months),
    ]


def handoff(target_amount: float, timeframe_months: int, cadence) -> PlanHandoff:
    """What the plan-creation flow is pre-filled with when a proposal is chosen."""
    return PlanHandoff(
        amount=target_amount,
        frequency=Cadence(cadence),
        duration_in_weeks=timeframe_months * HANDOFF_WEEKS_PER_MONTH,
    )


def handle(text: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Build the plan message (content + metadata) for a plan-intent chat message."""
    amount = extract_amount(text)
    months = extract_timeframe(text, today=today)
    target = amount if amount is not None else DEFAULT_TARGET_AMOUNT
    timeframe = months if months is not None else DEFAULT_TIMEFRAME_MONTHS

    plans = synthesize_plans(target, timeframe)
    return {
        "content": (
            f"Based on your goal to save {naira(target)} over {timeframe} months, "
            "I've created these personalized plans for you:"
        ),
        "metadata": {
            "targetAmount": target,
            "timeframe": timeframe,
            "plans": [p.to_dict() for p in plans],
        },
    }
