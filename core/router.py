from enum import Enum
from typing import Callable, List, Tuple


class Intent(str, Enum):
    PLAN = "plan"
    INSIGHT = "insight"
    GENERIC = "generic"


def _contains_any(t: str, words) -> bool:
    return any(w in t for w in words)


def _asks_for_plan(t: str) -> bool:
    if _contains_any(t, ["save", "plan", "budget", "pay myself"]):
        return True
    # "I earn 200k monthly" is an income statement asking for a plan
    return "earn" in t and _contains_any(t, ["monthly", "weekly"])


def _asks_for_insight(t: str) -> bool:
    return _contains_any(t, ["analyze", "pattern", "spending", "habits", "improve"])


# Evaluated top to bottom; first match wins.
RULES: List[Tuple[Callable[[str], bool], Intent]] = [
    (_asks_for_plan, Intent.PLAN),
    (_asks_for_insight, Intent.INSIGHT),
]


def classify(text: str) -> Intent:
    t = (text or "").lower().strip()
    for predicate, intent in RULES:
        if predicate(t):
            return intent
    return Intent.GENERIC
