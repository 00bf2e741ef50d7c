from .models import Budget, BudgetMemberRow, NotificationRow, PlannedExpenseRow
from .normalize import normalize_notifications, normalize_planned_rows
from .notifications import build_notification_text
from .table import PAGE_SIZE, TableState, paginate, sort_rows, total_pages
from .toggle import StatusToggleFlow, ToggleState

__all__ = [
    "PAGE_SIZE",
    "Budget",
    "BudgetMemberRow",
    "NotificationRow",
    "PlannedExpenseRow",
    "StatusToggleFlow",
    "TableState",
    "ToggleState",
    "build_notification_text",
    "normalize_notifications",
    "normalize_planned_rows",
    "paginate",
    "sort_rows",
    "total_pages",
]
