from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable

from ..api.errors import BudgetApiError, TransportError, UnauthorizedError
from . import messages
from .messages import Notice
from .models import ExpenseStatus, PlannedExpenseRow

logger = logging.getLogger(__name__)


class ToggleState(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    COMMITTING = "committing"
    SIGNED_OUT = "signed_out"


def flipped(status: ExpenseStatus) -> ExpenseStatus:
    return "paused" if status == "active" else "active"


class StatusToggleFlow:
    """
    Confirm-then-commit flow for pausing / resuming one planned expense.

      IDLE -> CONFIRMING -> COMMITTING -> IDLE (saved)
                                       -> CONFIRMING (failed, dialog stays open)
                                       -> SIGNED_OUT (401, terminal)

    Held rows are only touched after the backend acknowledged the change.
    """

    def __init__(
        self,
        toggle_request: Callable[[int], None],
        notify: Callable[[Notice], None],
    ):
        self._toggle_request = toggle_request
        self._notify = notify
        self.state = ToggleState.IDLE
        self.selected: PlannedExpenseRow | None = None

    @property
    def busy(self) -> bool:
        return self.state == ToggleState.COMMITTING

    def select(self, row: PlannedExpenseRow) -> None:
        if self.state not in (ToggleState.IDLE, ToggleState.CONFIRMING):
            return
        self.selected = row
        self.state = ToggleState.CONFIRMING

    def cancel(self) -> None:
        if self.state != ToggleState.CONFIRMING:
            return
        self.selected = None
        self.state = ToggleState.IDLE

    def confirm(self, rows: list[PlannedExpenseRow]) -> ToggleState:
        """Commit the selected row's toggle; on success rows is updated in place."""
        if self.state != ToggleState.CONFIRMING or self.selected is None:
            return self.state

        row = self.selected
        self.state = ToggleState.COMMITTING
        try:
            self._toggle_request(row.id)
        except UnauthorizedError:
            logger.info("Toggle of expense %s rejected: signed out", row.id)
            self.selected = None
            self.state = ToggleState.SIGNED_OUT
            return self.state
        except TransportError as e:
            logger.warning("Toggle of expense %s failed: %s", row.id, e)
            self._notify(messages.error(messages.SAVE_FAILED))
            self.state = ToggleState.CONFIRMING
            return self.state
        except BudgetApiError as e:
            logger.warning("Toggle of expense %s failed: %s", row.id, e)
            self._notify(messages.error(e.detail or messages.SAVE_FAILED))
            self.state = ToggleState.CONFIRMING
            return self.state
        except Exception:
            self.state = ToggleState.CONFIRMING
            raise

        next_status = flipped(row.status)
        for i, r in enumerate(rows):
            if r.id == row.id:
                rows[i] = replace(r, status=next_status)

        logger.info("Expense %s is now %s", row.id, next_status)
        self._notify(messages.success(messages.SAVED))
        self.selected = None
        self.state = ToggleState.IDLE
        return self.state
