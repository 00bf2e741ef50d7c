from __future__ import annotations

from .formatting import CURRENCY_SYMBOL, format_date_pl, format_money_pl
from .models import NotificationRow

RECURRING_PREFIX = "Masz zbliżającą się płatność cykliczną:"
PLANNED_PREFIX = "Masz zbliżającą się płatność:"


def build_notification_text(row: NotificationRow) -> str:
    prefix = RECURRING_PREFIX if row.kind == "recurring" else PLANNED_PREFIX
    return (
        f"{prefix} {row.category_name} - {row.description}: "
        f"{format_money_pl(row.amount)} {CURRENCY_SYMBOL} ({format_date_pl(row.date)})"
    )
