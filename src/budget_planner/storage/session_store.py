from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from budget_planner.security.crypto import is_sealed, seal_token, unseal_token


@dataclass(frozen=True)
class SessionState:
    auth_token: str | None
    selected_budget_id: int | None
    selected_budget_name: str | None
    updated_at: float  # unix timestamp


class SessionStore:
    """
    Local disk store for the signed-in session: auth token (encrypted),
    selected budget id and name.
    Stored under .cache/session.json

    This is the only place session state is read or written; the API client
    and the page controller receive an instance instead of reaching for files.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or (Path(".cache") / "session.json")
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        data["updated_at"] = time.time()
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def load(self) -> SessionState:
        data = self.load_raw()
        raw_id = data.get("selected_budget_id")
        name = data.get("selected_budget_name")
        return SessionState(
            auth_token=self.token(),
            selected_budget_id=int(raw_id) if isinstance(raw_id, int) and raw_id > 0 else None,
            selected_budget_name=name.strip() if isinstance(name, str) and name.strip() else None,
            updated_at=float(data.get("updated_at", 0.0) or 0.0),
        )

    # --- auth token ---

    def token(self) -> str | None:
        data = self.load_raw()
        stored = data.get("auth_token")
        if not isinstance(stored, str) or not stored:
            return None

        # Migration: if token is plain, encrypt it
        if not is_sealed(stored):
            data["auth_token"] = seal_token(stored)
            self._write(data)
            return stored

        token = unseal_token(stored)
        if token is None:
            # sealed with a previous MASTER_KEY: unusable, sign in again
            self.clear_token()
        return token

    def set_token(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            raise ValueError("Auth token must not be empty")
        data = self.load_raw()
        data["auth_token"] = seal_token(token)
        self._write(data)

    def clear_token(self) -> None:
        data = self.load_raw()
        if data.pop("auth_token", None) is not None:
            self._write(data)

    # --- selected budget ---

    def selected_budget_id(self) -> int | None:
        return self.load().selected_budget_id

    def selected_budget_name(self) -> str | None:
        return self.load().selected_budget_name

    def select_budget(self, budget_id: int, name: str | None = None) -> None:
        if budget_id <= 0:
            raise ValueError("budget_id must be > 0")
        data = self.load_raw()
        data["selected_budget_id"] = int(budget_id)
        if name and name.strip():
            data["selected_budget_name"] = name.strip()
        else:
            data.pop("selected_budget_name", None)
        self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
