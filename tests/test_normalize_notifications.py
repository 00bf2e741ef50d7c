from budget_planner.planner.budgets import resolve_selected_budget
from budget_planner.planner.models import Budget
from budget_planner.planner.normalize import normalize_budgets, normalize_members, normalize_notifications
from budget_planner.planner.team import member_label


def test_notification_aliases():
    rows = normalize_notifications(
        {
            "data": [
                {
                    "id": 10,
                    "kind": "recurring",
                    "category": "Media",
                    "title": "Netflix",
                    "amount": "43.00",
                    "nextExecutionDate": "2025-02-01",
                }
            ]
        }
    )

    assert len(rows) == 1
    n = rows[0]
    assert n.id == "10"
    assert n.kind == "recurring"
    assert n.category_name == "Media"
    assert n.description == "Netflix"
    assert n.amount == 43.0
    assert n.date == "2025-02-01"


def test_notification_id_falls_back_to_composite():
    rows = normalize_notifications([{"categoryName": "Media", "description": "Netflix", "date": "2025-02-01"}])
    assert rows[0].id == "Media-Netflix-2025-02-01"


def test_notification_without_date_is_dropped():
    rows = normalize_notifications([{"id": "a", "categoryName": "Media"}, {"description": "x"}])
    assert rows == []


def test_notification_kind_labels_and_codes():
    rows = normalize_notifications(
        [
            {"id": "1", "type": "Cykliczny", "date": "2025-01-01"},
            {"id": "2", "expenseType": 1, "date": "2025-01-01"},
            {"id": "3", "kind": "planned", "date": "2025-01-01"},
            {"id": "4", "date": "2025-01-01"},
        ]
    )
    assert [r.kind for r in rows] == ["recurring", "recurring", "planned", "planned"]


def test_notification_payload_without_rows():
    assert normalize_notifications({"message": "none"}) == []
    assert normalize_notifications(None) == []


def test_budgets_skip_archived():
    budgets = normalize_budgets(
        [
            {"id": 1, "name": "Dom"},
            {"id": 2, "name": "Stary", "isArchived": True},
            {"id": 3, "budgetName": "Wakacje", "status": "Archived"},
            {"id": 4, "status": "active"},
            {"id": 5, "name": "Auto", "archived": False, "status": "archived"},
            {"id": 0, "name": "Broken"},
        ]
    )

    assert budgets == [
        Budget(id=1, name="Dom"),
        Budget(id=4, name="Budżet #4"),
        Budget(id=5, name="Auto"),
    ]


def test_resolve_selected_budget():
    budgets = [Budget(id=1, name="Dom"), Budget(id=4, name="Auto")]

    assert resolve_selected_budget(budgets, 4) == 4
    assert resolve_selected_budget(budgets, 99) == 1
    assert resolve_selected_budget(budgets, None) == 1
    assert resolve_selected_budget([], 4) is None


def test_members_normalized():
    members = normalize_members(
        {
            "data": [
                {"userId": "u1", "user": "ala@example.com", "date": "2025-01-01", "role": "Owner", "status": "Active"},
                {"id": 7, "userName": "Bob", "email": "bob@example.com", "joinedAt": "2025-01-05"},
                {"role": "Member"},
            ]
        }
    )

    assert [m.id for m in members] == ["u1", "7", ""]
    assert members[0].email == "ala@example.com"
    assert members[0].added_at == "2025-01-01"
    assert members[1].user_name == "Bob"
    assert members[1].email == "bob@example.com"
    assert members[2].user_name is None

    assert member_label(members[1]) == "Bob"
    assert member_label(members[2]) == "ten użytkownik"
