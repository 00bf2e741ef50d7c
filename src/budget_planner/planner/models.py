from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ExpenseKind = Literal["planned", "recurring"]
ExpenseStatus = Literal["active", "paused"]


@dataclass(frozen=True)
class PlannedExpenseRow:
    id: int  # always > 0
    kind: ExpenseKind
    category_name: str
    description: str
    amount: float  # magnitude; the sign is applied only when displayed
    created_at: str
    execution_date: str
    frequency_label: str | None
    status: ExpenseStatus


@dataclass(frozen=True)
class NotificationRow:
    id: str
    kind: ExpenseKind
    category_name: str
    description: str
    amount: float
    date: str


@dataclass(frozen=True)
class Budget:
    id: int
    name: str


@dataclass(frozen=True)
class BudgetMemberRow:
    id: str
    user_name: str | None
    email: str
    added_at: str | None
    role: str
    status: str
