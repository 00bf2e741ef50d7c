from __future__ import annotations

import asyncio
import logging
import time

from ..api.client import BudgetApiClient
from ..api.errors import BudgetApiError, TransportError, UnauthorizedError
from ..storage.session_store import SessionStore
from . import messages
from .budgets import find_budget, resolve_selected_budget, validate_budget_name
from .messages import Notice
from .models import Budget, NotificationRow, PlannedExpenseRow
from .normalize import normalize_budgets, normalize_notifications, normalize_planned_rows
from .notifications import build_notification_text
from .table import SortKey, TableState, total_pages
from .toggle import StatusToggleFlow, ToggleState

logger = logging.getLogger(__name__)


class PlannedExpensesPage:
    """
    State of the planned-expenses view for one signed-in session.

    Fetches are tagged with the budget selected when they were issued; a
    response for a budget that is no longer selected is dropped on arrival,
    so switching budgets quickly never shows rows of the previous one.
    """

    def __init__(self, client: BudgetApiClient, session: SessionStore):
        self._client = client
        self._session = session

        self.budgets: list[Budget] = []
        self.selected_budget_id: int | None = None

        self.rows: list[PlannedExpenseRow] = []
        self.notifications: list[NotificationRow] = []
        self.table = TableState()

        self.notice: Notice | None = None
        self.signed_out = False

        self.toggle = StatusToggleFlow(client.toggle_expense_status, self.show_notice)

    # --- notices ---

    def show_notice(self, notice: Notice) -> None:
        self.notice = notice

    def current_notice(self, now: float | None = None) -> Notice | None:
        if self.notice is not None and self.notice.expired(time.time() if now is None else now):
            self.notice = None
        return self.notice

    # --- budgets ---

    @property
    def current_budget(self) -> Budget | None:
        return find_budget(self.budgets, self.selected_budget_id)

    def load_budgets(self) -> list[Budget]:
        try:
            payload = self._client.my_budgets()
        except UnauthorizedError:
            self.signed_out = True
            return []
        except BudgetApiError as e:
            logger.warning("Budgets not loaded: %s", e)
            self.budgets = []
            return []

        self.budgets = normalize_budgets(payload)
        self.selected_budget_id = resolve_selected_budget(
            self.budgets, self._session.selected_budget_id()
        )
        self._remember_selection()
        return self.budgets

    def _remember_selection(self) -> None:
        if self.selected_budget_id is None:
            return
        budget = self.current_budget
        self._session.select_budget(self.selected_budget_id, budget.name if budget else None)

    async def select_budget(self, budget_id: int) -> None:
        self.selected_budget_id = budget_id
        self._remember_selection()
        await self.refresh()

    def create_budget(self, name: str) -> str | None:
        """Create a budget. Returns an error for the form, None on success."""
        problem = validate_budget_name(name)
        if problem:
            return problem

        try:
            self._client.create_budget(name.strip())
        except UnauthorizedError:
            self.signed_out = True
            return None
        except TransportError as e:
            logger.warning("Budget not created: %s", e)
            return messages.BUDGET_CREATE_ERROR
        except BudgetApiError as e:
            logger.warning("Budget not created: %s", e)
            return e.detail or messages.BUDGET_CREATE_FAILED

        self.load_budgets()
        self.show_notice(messages.success(messages.BUDGET_CREATED))
        return None

    # --- fetching ---

    def _is_stale(self, budget_id: int, what: str) -> bool:
        if budget_id == self.selected_budget_id:
            return False
        logger.warning(
            "Discarding %s for budget %s: budget %s is selected now",
            what,
            budget_id,
            self.selected_budget_id,
        )
        return True

    async def refresh(self) -> None:
        budget_id = self.selected_budget_id
        if budget_id is None:
            return
        await asyncio.gather(self._load_rows(budget_id), self._load_notifications(budget_id))

    async def _load_rows(self, budget_id: int) -> None:
        try:
            payload = await asyncio.to_thread(self._client.search_transactions, budget_id)
        except UnauthorizedError:
            self.signed_out = True
            return
        except BudgetApiError as e:
            if self._is_stale(budget_id, "rows error"):
                return
            self.rows = []
            self.table.page_index = 1
            if isinstance(e, TransportError):
                self.show_notice(messages.error(messages.ROWS_FETCH_FAILED))
            else:
                self.show_notice(messages.error(messages.rows_fetch_error(e.status_code, e.text)))
            return

        if self._is_stale(budget_id, "rows"):
            return

        self.rows = normalize_planned_rows(payload)
        self.table.page_index = 1
        logger.debug("Budget %s: %s planned expenses", budget_id, len(self.rows))

    async def _load_notifications(self, budget_id: int) -> None:
        try:
            payload = await asyncio.to_thread(self._client.notifications, budget_id)
        except UnauthorizedError:
            self.signed_out = True
            return
        except BudgetApiError as e:
            if self._is_stale(budget_id, "notifications error"):
                return
            self.notifications = []
            if not isinstance(e, TransportError):
                self.show_notice(messages.error(messages.notifications_fetch_error(e.status_code, e.text)))
            return

        if self._is_stale(budget_id, "notifications"):
            return

        self.notifications = normalize_notifications(payload)
        logger.debug("Budget %s: %s notifications", budget_id, len(self.notifications))

    # --- table ---

    def visible_rows(self) -> list[PlannedExpenseRow]:
        return self.table.visible(self.rows)

    def total_pages(self) -> int:
        return total_pages(len(self.rows))

    def toggle_sort(self, key: SortKey) -> None:
        self.table.toggle_sort(key)

    def go_to_page(self, page_index: int) -> None:
        self.table.go_to_page(page_index, len(self.rows))

    # --- notifications ---

    def notification_texts(self) -> list[str]:
        return [build_notification_text(n) for n in self.notifications]

    def dismiss_top_notification(self) -> None:
        self.notifications = self.notifications[1:]

    # --- status toggle ---

    def request_toggle(self, expense_id: int) -> bool:
        for row in self.rows:
            if row.id == expense_id:
                self.toggle.select(row)
                return True
        return False

    def confirm_toggle(self) -> ToggleState:
        state = self.toggle.confirm(self.rows)
        if state == ToggleState.SIGNED_OUT:
            self.signed_out = True
        return state

    def cancel_toggle(self) -> None:
        self.toggle.cancel()
