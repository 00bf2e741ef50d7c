import asyncio
import threading

from budget_planner.api.errors import BudgetApiError, TransportError, UnauthorizedError
from budget_planner.planner.messages import Notice
from budget_planner.planner.page import PlannedExpensesPage
from budget_planner.planner.toggle import ToggleState
from budget_planner.storage.session_store import SessionStore


def _expenses(budget_id: int, count: int = 2) -> dict:
    return {
        "data": [
            {
                "id": budget_id * 100 + i,
                "type": 1 if i % 2 else 0,
                "status": 1,
                "categoryName": f"Kategoria {budget_id}",
                "title": f"Wydatek {i}",
                "amount": 10 * (i + 1),
                "date": f"2025-01-{i + 1:02d}",
            }
            for i in range(count)
        ]
    }


def _notifications(budget_id: int) -> list[dict]:
    return [{"id": f"n{budget_id}", "kind": 1, "categoryName": "Media", "title": "Netflix", "amount": 43, "date": "2025-02-01"}]


class DummyClient:
    def __init__(self):
        self.budgets_payload = [{"id": 1, "name": "Dom"}, {"id": 2, "name": "Auto"}]
        self.rows_error: Exception | None = None
        self.notifications_error: Exception | None = None
        self.toggle_error: Exception | None = None
        self.create_error: Exception | None = None
        self.gates: dict[int, threading.Event] = {}
        self.created: list[str] = []

    def my_budgets(self):
        return self.budgets_payload

    def create_budget(self, name: str):
        if self.create_error is not None:
            raise self.create_error
        self.created.append(name)
        self.budgets_payload = self.budgets_payload + [{"id": 3, "name": name}]
        return {"id": 3}

    def search_transactions(self, budget_id: int):
        gate = self.gates.get(budget_id)
        if gate is not None:
            gate.wait(5)
        if self.rows_error is not None:
            raise self.rows_error
        return _expenses(budget_id)

    def notifications(self, budget_id: int):
        gate = self.gates.get(budget_id)
        if gate is not None:
            gate.wait(5)
        if self.notifications_error is not None:
            raise self.notifications_error
        return _notifications(budget_id)

    def toggle_expense_status(self, expense_id: int) -> None:
        if self.toggle_error is not None:
            raise self.toggle_error


def _page(tmp_path, client: DummyClient | None = None) -> PlannedExpensesPage:
    session = SessionStore(tmp_path / "session.json")
    return PlannedExpensesPage(client or DummyClient(), session)


def test_load_budgets_restores_stored_selection(tmp_path):
    page = _page(tmp_path)
    page._session.select_budget(2, "Auto")

    page.load_budgets()

    assert [b.id for b in page.budgets] == [1, 2]
    assert page.selected_budget_id == 2
    assert page.current_budget.name == "Auto"


def test_load_budgets_falls_back_to_first(tmp_path):
    page = _page(tmp_path)
    page._session.select_budget(9, "Gone")

    page.load_budgets()

    assert page.selected_budget_id == 1
    assert page._session.selected_budget_id() == 1
    assert page._session.selected_budget_name() == "Dom"


def test_select_budget_fetches_rows_and_notifications(tmp_path):
    page = _page(tmp_path)
    page.load_budgets()

    asyncio.run(page.select_budget(2))

    assert [r.id for r in page.rows] == [200, 201]
    assert [n.id for n in page.notifications] == ["n2"]
    assert page.notification_texts()[0].startswith("Masz zbliżającą się płatność cykliczną: Media - Netflix")
    assert page._session.selected_budget_id() == 2


def test_stale_responses_are_discarded(tmp_path):
    client = DummyClient()
    client.gates[1] = threading.Event()
    page = _page(tmp_path, client)
    page.load_budgets()

    async def scenario():
        slow = asyncio.create_task(page.select_budget(1))
        await asyncio.sleep(0.05)
        await page.select_budget(2)
        client.gates[1].set()
        await slow

    asyncio.run(scenario())

    assert page.selected_budget_id == 2
    assert [r.id for r in page.rows] == [200, 201]
    assert [n.id for n in page.notifications] == ["n2"]


def test_rows_error_clears_rows_and_shows_status(tmp_path):
    client = DummyClient()
    page = _page(tmp_path, client)
    page.load_budgets()
    asyncio.run(page.refresh())
    page.table.page_index = 2

    client.rows_error = BudgetApiError("500", status_code=500, text="boom")
    asyncio.run(page.refresh())

    assert page.rows == []
    assert page.table.page_index == 1
    assert page.notice.kind == "error"
    assert page.notice.text == "Błąd pobierania (500): boom"


def test_rows_network_error(tmp_path):
    client = DummyClient()
    client.rows_error = TransportError("down")
    page = _page(tmp_path, client)
    page.load_budgets()

    asyncio.run(page.refresh())

    assert page.rows == []
    assert page.notice.text == "Nie udało się pobrać planowanych wydatków."


def test_notifications_errors(tmp_path):
    client = DummyClient()
    client.notifications_error = BudgetApiError("503", status_code=503, text="maintenance")
    page = _page(tmp_path, client)
    page.load_budgets()

    asyncio.run(page.refresh())
    assert page.notifications == []
    assert page.notice.text == "Błąd powiadomień (503): maintenance"

    page.notice = None
    client.notifications_error = TransportError("down")
    asyncio.run(page.refresh())
    assert page.notifications == []
    assert page.notice is None


def test_unauthorized_marks_page_signed_out(tmp_path):
    client = DummyClient()
    client.rows_error = UnauthorizedError("401", status_code=401)
    page = _page(tmp_path, client)
    page.load_budgets()

    asyncio.run(page.refresh())

    assert page.signed_out is True


def test_toggle_through_page(tmp_path):
    page = _page(tmp_path)
    page.load_budgets()
    asyncio.run(page.refresh())

    assert page.request_toggle(101) is True
    assert page.confirm_toggle() == ToggleState.IDLE

    statuses = {r.id: r.status for r in page.rows}
    assert statuses == {100: "active", 101: "paused"}
    assert page.notice.text == "Zapisano zmiany."


def test_toggle_unknown_row(tmp_path):
    page = _page(tmp_path)
    page.load_budgets()
    asyncio.run(page.refresh())

    assert page.request_toggle(999) is False
    assert page.toggle.state == ToggleState.IDLE


def test_toggle_unauthorized_signs_out(tmp_path):
    client = DummyClient()
    client.toggle_error = UnauthorizedError("401", status_code=401)
    page = _page(tmp_path, client)
    page.load_budgets()
    asyncio.run(page.refresh())

    page.request_toggle(100)
    assert page.confirm_toggle() == ToggleState.SIGNED_OUT
    assert page.signed_out is True


def test_sort_and_page_navigation(tmp_path):
    page = _page(tmp_path)
    page.load_budgets()
    asyncio.run(page.refresh())

    page.toggle_sort("amount")
    page.toggle_sort("amount")
    assert [r.id for r in page.visible_rows()] == [101, 100]

    page.go_to_page(5)
    assert page.table.page_index == 1
    assert page.total_pages() == 1


def test_dismiss_top_notification(tmp_path):
    page = _page(tmp_path)
    page.load_budgets()
    asyncio.run(page.refresh())

    page.dismiss_top_notification()
    assert page.notifications == []


def test_notice_expires(tmp_path):
    page = _page(tmp_path)
    page.show_notice(Notice(kind="success", text="ok", created_at=100.0))

    assert page.current_notice(now=101.0) is not None
    assert page.current_notice(now=104.0) is None
    assert page.notice is None


def test_create_budget(tmp_path):
    client = DummyClient()
    page = _page(tmp_path, client)
    page.load_budgets()

    assert page.create_budget("   ") == "Podaj nazwę budżetu."
    assert client.created == []

    assert page.create_budget(" Wakacje ") is None
    assert client.created == ["Wakacje"]
    assert [b.name for b in page.budgets] == ["Dom", "Auto", "Wakacje"]
    assert page.notice.text == "Utworzono nowy budżet."


def test_create_budget_errors(tmp_path):
    client = DummyClient()
    page = _page(tmp_path, client)

    client.create_error = BudgetApiError("409", status_code=409, detail="Budżet o tej nazwie już istnieje.")
    assert page.create_budget("Dom") == "Budżet o tej nazwie już istnieje."

    client.create_error = BudgetApiError("500", status_code=500)
    assert page.create_budget("Dom") == "Nie udało się utworzyć budżetu."

    client.create_error = TransportError("down")
    assert page.create_budget("Dom") == "Wystąpił błąd podczas tworzenia budżetu."
