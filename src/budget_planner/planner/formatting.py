from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone

from .models import ExpenseKind

CURRENCY_SYMBOL = "zł"

# pl-PL groups thousands with a no-break space, but only from 5 integer digits up
_GROUP_SEPARATOR = "\u00a0"
_MIN_GROUPING_DIGITS = 5

# fromisoformat before 3.11 only takes 3 or 6 fraction digits; .NET sends 7
_FRACTION_RE = re.compile(r"([T ]\d{2}:\d{2}:\d{2})\.(\d+)")

KIND_LABELS: dict[str, str] = {
    "recurring": "cykliczny",
    "planned": "planowany",
}

STATUS_LABELS: dict[str, str] = {
    "active": "aktywny",
    "paused": "wstrzymany",
}


def kind_label(kind: ExpenseKind) -> str:
    return KIND_LABELS.get(kind, KIND_LABELS["planned"])


def parse_date(value: str | None) -> datetime | None:
    """
    ISO date or date-time. Date-only values are midnight UTC; date-times
    without an offset are local time.
    """
    s = (value or "").strip()
    if not s:
        return None
    try:
        if len(s) == 10:
            d = date.fromisoformat(s)
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        s = _FRACTION_RE.sub(lambda m: f"{m[1]}.{m[2][:6].ljust(6, '0')}", s)
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


def to_timestamp(value: str | None) -> float:
    """Unix timestamp; unknown dates are 0 so they order first."""
    dt = parse_date(value)
    if dt is None:
        return 0.0
    try:
        return dt.timestamp()
    except (OverflowError, OSError, ValueError):
        return 0.0


def format_date_pl(value: str | None) -> str:
    dt = parse_date(value)
    if dt is None:
        return "-"
    s = (value or "").strip()
    if len(s) != 10 and dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%d.%m.%Y")


def format_money_pl(amount: float) -> str:
    value = abs(amount) if math.isfinite(amount) else 0.0
    whole, frac = f"{value:.2f}".split(".")
    if len(whole) >= _MIN_GROUPING_DIGITS:
        whole = f"{int(whole):,}".replace(",", _GROUP_SEPARATOR)
    return f"{whole},{frac}"
