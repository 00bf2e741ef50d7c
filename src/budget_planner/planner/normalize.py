"""
Parsing boundary between raw backend JSON and typed view rows.

Backend payloads are loosely typed and have changed field names over time, so
every normalizer here is total: anything unexpected degrades to an empty list
or to a field default, never to an exception.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from .models import (
    Budget,
    BudgetMemberRow,
    ExpenseKind,
    ExpenseStatus,
    NotificationRow,
    PlannedExpenseRow,
)

RECURRING_TYPE_CODE = 1
PAUSED_STATUS_CODE = 2

EMPTY_LABEL = "-"

# Accepted raw names per logical field, in priority order.
PLANNED_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "type": ("type",),
    "status": ("status",),
    "category_name": ("categoryName", "category", "categoryLabel"),
    "description": ("title", "description", "desc"),
    "amount": ("amount",),
    "created_at": ("date", "createdAt", "dateCreated", "created", "addedAt"),
    "execution_date": ("date", "executionDate", "nextExecutionDate", "startDate"),
    "frequency_label": ("frequencyLabel", "frequency", "frequencyName"),
}

NOTIFICATION_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "kind": ("kind", "type", "expenseType"),
    "category_name": ("categoryName", "category", "categoryLabel"),
    "description": ("description", "desc", "title"),
    "amount": ("amount",),
    "date": ("date", "executionDate", "nextExecutionDate", "startDate"),
}

MEMBER_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("userId", "id"),
    "user_name": ("user", "userName"),
    "email": ("email",),
    "added_at": ("date", "addedAt", "joinedAt"),
    "role": ("role",),
    "status": ("status",),
}

BUDGET_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "name": ("name", "budgetName"),
}


def first_present(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Value of the first alias present in record with a non-null value."""
    for name in aliases:
        value = record.get(name)
        if value is not None:
            return value
    return None


def to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        n = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return 0.0
        if "_" in s:
            return 0.0
        try:
            n = float(s)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return n if math.isfinite(n) else 0.0


def to_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def to_positive_id(value: Any) -> int:
    n = to_number(value)
    if n <= 0 or not n.is_integer():
        return 0
    return int(n)


def unwrap_rows(payload: Any) -> list[Any]:
    """Row-bearing list of a payload: its "data" field, or the payload itself."""
    if isinstance(payload, Mapping):
        payload = payload.get("data")
    if isinstance(payload, list):
        return payload
    return []


def kind_from_code(value: Any) -> ExpenseKind:
    return "recurring" if to_number(value) == RECURRING_TYPE_CODE else "planned"


def status_from_code(value: Any) -> ExpenseStatus:
    return "paused" if to_number(value) == PAUSED_STATUS_CODE else "active"


def kind_from_any(value: Any) -> ExpenseKind:
    """Numeric code, or a label such as "recurring" / "cykliczny"."""
    if isinstance(value, str):
        s = value.lower()
        if "recurr" in s or "cyk" in s:
            return "recurring"
    return kind_from_code(value)


def _planned_row(record: Mapping[str, Any]) -> PlannedExpenseRow | None:
    a = PLANNED_ALIASES
    row_id = to_positive_id(first_present(record, a["id"]))
    if row_id <= 0:
        return None

    kind = kind_from_code(first_present(record, a["type"]))
    # only recurring expenses have a frequency
    frequency = to_text(first_present(record, a["frequency_label"])) if kind == "recurring" else ""

    return PlannedExpenseRow(
        id=row_id,
        kind=kind,
        category_name=to_text(first_present(record, a["category_name"])) or EMPTY_LABEL,
        description=to_text(first_present(record, a["description"])) or EMPTY_LABEL,
        amount=abs(to_number(first_present(record, a["amount"]))),
        created_at=to_text(first_present(record, a["created_at"])),
        execution_date=to_text(first_present(record, a["execution_date"])),
        frequency_label=frequency or None,
        status=status_from_code(first_present(record, a["status"])),
    )


def normalize_planned_rows(payload: Any) -> list[PlannedExpenseRow]:
    out: list[PlannedExpenseRow] = []
    for record in unwrap_rows(payload):
        if not isinstance(record, Mapping):
            continue
        row = _planned_row(record)
        if row is not None:
            out.append(row)
    return out


def _notification_id(raw: Any, category: str, description: str, date: str) -> str:
    if isinstance(raw, str) and raw:
        return raw
    n = to_positive_id(raw)
    if n > 0:
        return str(n)
    return f"{category}-{description}-{date}"


def normalize_notifications(payload: Any) -> list[NotificationRow]:
    a = NOTIFICATION_ALIASES
    out: list[NotificationRow] = []
    for record in unwrap_rows(payload):
        if not isinstance(record, Mapping):
            continue

        category = to_text(first_present(record, a["category_name"]))
        description = to_text(first_present(record, a["description"]))
        date = to_text(first_present(record, a["date"]))
        if not date:
            continue

        out.append(
            NotificationRow(
                id=_notification_id(first_present(record, a["id"]), category, description, date),
                kind=kind_from_any(first_present(record, a["kind"])),
                category_name=category or EMPTY_LABEL,
                description=description or EMPTY_LABEL,
                amount=to_number(first_present(record, a["amount"])),
                date=date,
            )
        )
    return out


def is_archived_budget(record: Mapping[str, Any]) -> bool:
    for flag in ("isArchived", "archived"):
        value = record.get(flag)
        if isinstance(value, bool):
            return value
    status = record.get("status")
    if isinstance(status, str):
        return "arch" in status.lower()
    return False


def normalize_budgets(payload: Any) -> list[Budget]:
    """Active (not archived) budgets, in backend order."""
    out: list[Budget] = []
    for record in unwrap_rows(payload):
        if not isinstance(record, Mapping) or is_archived_budget(record):
            continue
        budget_id = to_positive_id(first_present(record, BUDGET_ALIASES["id"]))
        if budget_id <= 0:
            continue
        name = to_text(first_present(record, BUDGET_ALIASES["name"])).strip()
        out.append(Budget(id=budget_id, name=name or f"Budżet #{budget_id}"))
    return out


def normalize_members(payload: Any) -> list[BudgetMemberRow]:
    a = MEMBER_ALIASES
    out: list[BudgetMemberRow] = []
    for record in unwrap_rows(payload):
        if not isinstance(record, Mapping):
            continue

        raw_id = first_present(record, a["id"])
        if isinstance(raw_id, str):
            member_id = raw_id
        elif to_positive_id(raw_id) > 0:
            member_id = str(to_positive_id(raw_id))
        else:
            member_id = ""

        user = first_present(record, a["user_name"])
        raw_user = record.get("user")
        if isinstance(raw_user, str) and "@" in raw_user:
            email = raw_user
        else:
            email = to_text(first_present(record, a["email"]))

        added_at = first_present(record, a["added_at"])

        out.append(
            BudgetMemberRow(
                id=member_id,
                user_name=user if isinstance(user, str) else None,
                email=email,
                added_at=added_at if isinstance(added_at, str) else None,
                role=to_text(first_present(record, a["role"])),
                status=to_text(first_present(record, a["status"])),
            )
        )
    return out
