from datetime import datetime
from typing import Optional

CURRENCY = "₦"


def format_amount(amount: float) -> str:
    """120000 -> '120,000'; 1250.5 -> '1,250.5'."""
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}".rstrip("0").rstrip(".")


def naira(amount: float) -> str:
    return f"{CURRENCY}{format_amount(amount)}"


def format_date(raw: Optional[str]) -> str:
    """ISO timestamp -> M/D/YYYY. Unparseable input is returned unchanged."""
    if not raw:
        return ""
    try:
        d = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return raw
    return f"{d.month}/{d.day}/{d.year}"
