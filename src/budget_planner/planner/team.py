from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..api.client import BudgetApiClient
from ..api.errors import BudgetApiError, UnauthorizedError
from . import messages
from .messages import Notice
from .models import BudgetMemberRow
from .normalize import normalize_members

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_probably_email(value: str) -> bool:
    return bool(_EMAIL_RE.match((value or "").strip()))


def validate_invitation_email(value: str) -> str | None:
    v = (value or "").strip()
    if not v:
        return messages.FIELD_REQUIRED
    if not is_probably_email(v):
        return messages.INVALID_EMAIL
    return None


def member_label(row: BudgetMemberRow) -> str:
    if row.user_name and row.user_name.strip():
        return row.user_name
    if row.email and row.email.strip():
        return row.email
    return messages.UNKNOWN_MEMBER


@dataclass
class BudgetTeam:
    """Members of the selected budget: listing, invitations, removal."""

    client: BudgetApiClient
    budget_id: int
    budget_name: str
    members: list[BudgetMemberRow] = field(default_factory=list)
    notice: Notice | None = None
    signed_out: bool = False

    def load_members(self) -> list[BudgetMemberRow]:
        try:
            self.members = normalize_members(self.client.budget_members(self.budget_id))
        except UnauthorizedError:
            self.signed_out = True
            self.members = []
        except BudgetApiError as e:
            logger.warning("Members of budget %s not loaded: %s", self.budget_id, e)
            self.members = []
            self.notice = messages.error(messages.MEMBERS_FETCH_FAILED)
        return self.members

    def invite(self, email: str) -> str | None:
        """Send an invitation. Returns a validation error for the form, if any."""
        problem = validate_invitation_email(email)
        if problem:
            return problem

        try:
            self.client.send_invitation(self.budget_id, self.budget_name, email.strip())
        except UnauthorizedError:
            self.signed_out = True
            return None
        except BudgetApiError as e:
            logger.warning("Invitation to budget %s failed: %s", self.budget_id, e)
            self.notice = messages.error(messages.INVITATION_FAILED)
            return None

        self.notice = messages.success(messages.INVITATION_SENT)
        self.load_members()
        return None

    def remove(self, member: BudgetMemberRow) -> bool:
        if not member.id:
            self.notice = messages.error(messages.MEMBER_WITHOUT_ID)
            return False

        try:
            self.client.remove_member(self.budget_id, member.id)
        except UnauthorizedError:
            self.signed_out = True
            return False
        except BudgetApiError as e:
            logger.warning("Removing %s from budget %s failed: %s", member_label(member), self.budget_id, e)
            self.notice = messages.error(messages.MEMBER_REMOVE_FAILED)
            return False

        self.notice = messages.success(messages.MEMBER_REMOVED)
        self.load_members()
        return True
