"""
Amount and timeframe extraction from free-text chat messages.

Both extractors return None when nothing usable is found. Defaults (500k over
6 months) belong to the caller, never to these functions.
"""
import re
from datetime import date
from typing import Optional

# ₦120,000 | 120000 | 120k | 1.5M ; a suffix only counts if no letter follows it
AMOUNT_RE = re.compile(
    r"₦?\s*(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?(?:([kKmM])(?![a-zA-Z]))?"
)
MONTHS_RE = re.compile(r"(\d+)\s*months?\b", re.IGNORECASE)
YEARS_RE = re.compile(r"(\d+)\s*years?\b", re.IGNORECASE)

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


def extract_amount(text: str) -> Optional[float]:
    """
    Return the first money amount mentioned in `text`, or None.

    Only the first numeric mention is considered; "save 50k out of my 200k
    salary" yields 50000.
    """
    m = AMOUNT_RE.search(text or "")
    if not m:
        return None

    whole, fraction, suffix = m.group(1), m.group(2) or "", m.group(3)
    amount = float(whole.replace(",", "") + fraction)
    if suffix:
        amount *= _MULTIPLIERS[suffix.lower()]

    if amount <= 0:
        return None
    return amount


def months_until(month_index: int, today: date) -> int:
    """Months from today's month forward to month_index (0 = January), in 1..12."""
    diff = (month_index - (today.month - 1)) % 12
    return diff or 12


def extract_timeframe(text: str, today: Optional[date] = None) -> Optional[int]:
    """
    Return the savings horizon in months, or None.

    "6 months" -> 6, "2 years" -> 24, "by September" -> months until the next
    September (never the current month: same month means a year away).
    When several month names appear, the earliest in calendar order wins.
    """
    t = text or ""

    m = MONTHS_RE.search(t)
    if m and int(m.group(1)) > 0:
        return int(m.group(1))

    m = YEARS_RE.search(t)
    if m and int(m.group(1)) > 0:
        return int(m.group(1)) * 12

    lowered = t.lower()
    for i, name in enumerate(MONTH_NAMES):
        if name in lowered:
            return months_until(i, today or date.today())

    return None
