from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchTransactionsRequest(BaseModel):
    draw: int = 1
    start: int = 0
    length: int = 200
    searchValue: str = ""
    orderColumn: int = 0
    orderDir: str = "asc"
    extraFilters: dict[str, Any] = Field(default_factory=dict)


class CreateBudgetRequest(BaseModel):
    name: str


class InvitationRequest(BaseModel):
    recipientEmail: str
    budgetName: str
    budgetId: int


class BackendErrorResponse(BaseModel):
    """ProblemDetails-style error body. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    errors: dict[str, list[str]] | None = None
