from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence, TypeVar

from .formatting import kind_label, to_timestamp
from .models import PlannedExpenseRow

SortKey = Literal[
    "lp",
    "kind",
    "category_name",
    "description",
    "amount",
    "created_at",
    "execution_date",
    "frequency_label",
]
SortDir = Literal["asc", "desc"]

SORT_KEYS: tuple[str, ...] = (
    "lp",
    "kind",
    "category_name",
    "description",
    "amount",
    "created_at",
    "execution_date",
    "frequency_label",
)

PAGE_SIZE = 8

T = TypeVar("T")

# Polish letters with diacritics are separate letters sorted right after their base.
_PL_LETTERS = {
    "ą": ("a", 1),
    "ć": ("c", 1),
    "ę": ("e", 1),
    "ł": ("l", 1),
    "ń": ("n", 1),
    "ó": ("o", 1),
    "ś": ("s", 1),
    "ź": ("z", 1),
    "ż": ("z", 2),
}


def collation_key(s: str) -> tuple[tuple[str, int], ...]:
    """Case- and accent-insensitive sort key following the Polish alphabet."""
    out: list[tuple[str, int]] = []
    for ch in (s or "").casefold():
        pl = _PL_LETTERS.get(ch)
        if pl is not None:
            out.append(pl)
            continue
        for base in unicodedata.normalize("NFKD", ch):
            if not unicodedata.combining(base):
                out.append((base, 0))
    return tuple(out)


_KEY_FUNCS: dict[str, Callable[[PlannedExpenseRow], Any]] = {
    "kind": lambda r: collation_key(kind_label(r.kind)),
    "category_name": lambda r: collation_key(r.category_name),
    "description": lambda r: collation_key(r.description),
    "amount": lambda r: abs(r.amount),
    "created_at": lambda r: to_timestamp(r.created_at),
    "execution_date": lambda r: to_timestamp(r.execution_date),
    "frequency_label": lambda r: collation_key(r.frequency_label or ""),
}


def sort_rows(
    rows: Sequence[PlannedExpenseRow],
    key: SortKey,
    direction: SortDir = "asc",
) -> list[PlannedExpenseRow]:
    """
    New list ordered by key. Rows with equal keys keep their input order in
    both directions; "lp" (row number) keeps the input order as-is.
    """
    fn = _KEY_FUNCS.get(key)
    if fn is None:
        return list(rows)
    return sorted(rows, key=fn, reverse=(direction == "desc"))


def total_pages(row_count: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(row_count / page_size))


def paginate(rows: Sequence[T], page_index: int, page_size: int = PAGE_SIZE) -> list[T]:
    """
    Slice of 1-based page page_index. Out-of-range pages are empty; clamping
    is up to the caller.
    """
    start = max(0, (page_index - 1) * page_size)
    return list(rows[start : start + page_size])


def clamp_page(page_index: int, row_count: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, page_index), total_pages(row_count, page_size))


@dataclass
class TableState:
    sort_key: SortKey = "execution_date"
    sort_dir: SortDir = "asc"
    page_index: int = 1

    def toggle_sort(self, key: SortKey) -> None:
        if key != self.sort_key:
            self.sort_key = key
            self.sort_dir = "asc"
        else:
            self.sort_dir = "desc" if self.sort_dir == "asc" else "asc"
        self.page_index = 1

    def go_to_page(self, page_index: int, row_count: int) -> None:
        self.page_index = clamp_page(page_index, row_count)

    def visible(self, rows: Sequence[PlannedExpenseRow]) -> list[PlannedExpenseRow]:
        return paginate(sort_rows(rows, self.sort_key, self.sort_dir), self.page_index)
