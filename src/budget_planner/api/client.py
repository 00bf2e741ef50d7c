from __future__ import annotations

import logging
import random
import time
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .. import __version__
from ..storage.session_store import SessionStore
from .errors import BudgetApiError, TransportError, UnauthorizedError
from .models import (
    BackendErrorResponse,
    CreateBudgetRequest,
    InvitationRequest,
    SearchTransactionsRequest,
)

logger = logging.getLogger(__name__)

API_PATHS = {
    "my_budgets": lambda: "/api/budget/my-budgets",
    "create_budget": lambda: "/api/budget/create",
    "transactions_search": lambda budget_id: f"/api/budget/{budget_id}/transactions/search",
    "toggle_expense_status": lambda expense_id: f"/api/planned-expenses/{expense_id}/toggle-status",
    "notifications": lambda: "/api/planned-expenses/notifications",
    "members": lambda budget_id: f"/api/budget/{budget_id}/members",
    "member": lambda budget_id, user_id: f"/api/budget/{budget_id}/members/{user_id}",
    "send_invitation": lambda: "/api/budget/send-invitation",
}


def _sleep_seconds(attempt: int) -> float:
    base = min(20.0, 1.2 * (2**attempt))
    return base + random.random() * 0.8


def _retry_after_seconds(headers: httpx.Headers) -> float | None:
    ra = headers.get("Retry-After")
    if ra and ra.isdigit():
        return float(ra)
    return None


def safe_json(resp: httpx.Response) -> Any | None:
    try:
        return resp.json()
    except ValueError:
        return None


def error_detail(resp: httpx.Response) -> str | None:
    body = safe_json(resp)
    if not isinstance(body, dict):
        return None
    try:
        err = BackendErrorResponse.model_validate(body)
    except ValidationError:
        return None
    return err.detail or None


class BudgetApiClient:
    """
    Thin sync client over the budget REST backend.

    Returns raw JSON (whatever shape the backend sends); turning it into view
    rows is the job of budget_planner.planner.normalize.
    """

    MAX_GET_ATTEMPTS = 3

    def __init__(
        self,
        session: SessionStore,
        base_url: str = "http://localhost:5000",
        *,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._session = session
        self._base_url = base_url.rstrip("/")

        self._client = httpx.Client(
            base_url=self._base_url,
            headers={"User-Agent": f"budget-planner/{__version__}"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BudgetApiClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token()
        if not token:
            raise UnauthorizedError("Not signed in: no auth token in session", status_code=401)
        return {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = self._auth_headers()
        attempts = self.MAX_GET_ATTEMPTS if method == "GET" else 1

        for attempt in range(attempts):
            try:
                resp = self._client.request(method, path, headers=headers, **kwargs)
            except httpx.TransportError as e:
                logger.warning("%s %s failed: %s", method, path, e)
                raise TransportError(f"Budget API request failed: {method} {path}. Error: {e}") from e

            if resp.status_code == 429 and attempt + 1 < attempts:
                sleep_s = _retry_after_seconds(resp.headers)
                if sleep_s is None:
                    sleep_s = _sleep_seconds(attempt)
                time.sleep(min(30.0, sleep_s))
                continue

            if resp.status_code == 401:
                logger.info("%s %s returned 401, clearing session token", method, path)
                self._session.clear_token()
                raise UnauthorizedError(
                    f"Budget API error: 401 {resp.reason_phrase}",
                    status_code=401,
                    detail=error_detail(resp),
                )

            if resp.is_success:
                return resp

            detail = error_detail(resp)
            logger.warning("%s %s returned %s", method, path, resp.status_code)
            raise BudgetApiError(
                f"Budget API error: {resp.status_code} {resp.reason_phrase}. Response: {resp.text}",
                status_code=resp.status_code,
                detail=detail,
                text=resp.text or resp.reason_phrase,
            )

        raise BudgetApiError(f"Budget API request failed after retries: {method} {path}", status_code=429)

    # --- budgets ---

    def my_budgets(self) -> Any | None:
        return safe_json(self._request("GET", API_PATHS["my_budgets"]()))

    def create_budget(self, name: str) -> Any | None:
        body = CreateBudgetRequest(name=name)
        return safe_json(self._request("POST", API_PATHS["create_budget"](), json=body.model_dump()))

    # --- planned expenses ---

    def search_transactions(self, budget_id: int, *, length: int = 200) -> Any | None:
        body = SearchTransactionsRequest(length=length)
        resp = self._request(
            "POST",
            API_PATHS["transactions_search"](budget_id),
            json=body.model_dump(),
        )
        return safe_json(resp)

    def toggle_expense_status(self, expense_id: int) -> None:
        self._request("PATCH", API_PATHS["toggle_expense_status"](expense_id))

    def notifications(self, budget_id: int) -> Any | None:
        resp = self._request("GET", API_PATHS["notifications"](), params={"budgetId": budget_id})
        return safe_json(resp)

    # --- budget team ---

    def budget_members(self, budget_id: int) -> Any | None:
        return safe_json(self._request("GET", API_PATHS["members"](budget_id)))

    def send_invitation(self, budget_id: int, budget_name: str, email: str) -> None:
        body = InvitationRequest(recipientEmail=email, budgetName=budget_name, budgetId=budget_id)
        self._request("POST", API_PATHS["send_invitation"](), json=body.model_dump())

    def remove_member(self, budget_id: int, user_id: str) -> None:
        self._request("DELETE", API_PATHS["member"](budget_id, quote(user_id, safe="")))
