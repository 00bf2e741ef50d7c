from __future__ import annotations

from typing import Sequence

from . import messages
from .models import Budget


def resolve_selected_budget(budgets: Sequence[Budget], stored_id: int | None) -> int | None:
    """Stored selection if it is still an active budget, else the first one."""
    if stored_id is not None and any(b.id == stored_id for b in budgets):
        return stored_id
    return budgets[0].id if budgets else None


def find_budget(budgets: Sequence[Budget], budget_id: int | None) -> Budget | None:
    for b in budgets:
        if b.id == budget_id:
            return b
    return None


def validate_budget_name(name: str) -> str | None:
    """Error message for an unusable budget name, None when it is fine."""
    if not (name or "").strip():
        return messages.BUDGET_NAME_REQUIRED
    return None
