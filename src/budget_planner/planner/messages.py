from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

NoticeKind = Literal["success", "error"]

NOTICE_TTL_SECONDS = 3.2

SAVED = "Zapisano zmiany."
SAVE_FAILED = "Nie udało się zapisać zmian."
ROWS_FETCH_FAILED = "Nie udało się pobrać planowanych wydatków."
BUDGET_CREATED = "Utworzono nowy budżet."
BUDGET_CREATE_FAILED = "Nie udało się utworzyć budżetu."
BUDGET_CREATE_ERROR = "Wystąpił błąd podczas tworzenia budżetu."
BUDGET_NAME_REQUIRED = "Podaj nazwę budżetu."
FIELD_REQUIRED = "To pole jest wymagane."
INVALID_EMAIL = "Wpisz poprawny adres e-mail."
NO_BUDGET_SELECTED = "Brak wybranego budżetu."
INVITATION_SENT = "Zaproszenie zostało wysłane."
INVITATION_FAILED = "Nie udało się wysłać zaproszenia."
MEMBERS_FETCH_FAILED = "Nie udało się pobrać członków budżetu."
MEMBER_REMOVED = "Członek budżetu został usunięty."
MEMBER_REMOVE_FAILED = "Nie udało się usunąć członka budżetu."
MEMBER_WITHOUT_ID = "Nie można usunąć tego wpisu (brak ID użytkownika)."
UNKNOWN_MEMBER = "ten użytkownik"


def rows_fetch_error(status: int | None, text: str) -> str:
    return f"Błąd pobierania ({status}): {text}"


def notifications_fetch_error(status: int | None, text: str) -> str:
    return f"Błąd powiadomień ({status}): {text}"


@dataclass(frozen=True)
class Notice:
    """Transient toast shown to the user."""

    kind: NoticeKind
    text: str
    created_at: float = field(default_factory=time.time)
    ttl_seconds: float = NOTICE_TTL_SECONDS

    def expired(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.created_at + self.ttl_seconds

    def render(self) -> str:
        mark = "✅" if self.kind == "success" else "❌"
        return f"{mark} {self.text}"


def success(text: str) -> Notice:
    return Notice(kind="success", text=text)


def error(text: str) -> Notice:
    return Notice(kind="error", text=text)
