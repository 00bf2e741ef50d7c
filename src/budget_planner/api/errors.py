from __future__ import annotations


class BudgetApiError(RuntimeError):
    """Non-success answer from the budget backend (or no answer at all)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
        text: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        # "detail" of a ProblemDetails body, when the backend sent one
        self.detail = detail
        self.text = text


class UnauthorizedError(BudgetApiError):
    """401 from the backend, or no auth token in the session."""


class TransportError(BudgetApiError):
    """Timeout or network failure; no HTTP status available."""
