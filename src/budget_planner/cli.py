import argparse
import asyncio
import logging

from dotenv import load_dotenv

from . import __version__
from .config import load_settings
from .logging_setup import setup_logging
from .planner.table import PAGE_SIZE, SORT_KEYS


def mask(value: str | None, show: int = 4) -> str:
    if not value:
        return "None"
    if len(value) <= show:
        return "*" * len(value)
    return value[:show] + "*" * (len(value) - show)


def _print_notice(page_or_team) -> None:
    notice = getattr(page_or_team, "notice", None)
    if notice is not None:
        print(notice.render())


def main() -> int:
    parser = argparse.ArgumentParser(prog="budget-planner")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument(
        "command",
        nargs="?",
        default="health",
        choices=[
            "health",
            "status-env",
            "login",
            "logout",
            "budgets",
            "select",
            "create-budget",
            "expenses",
            "notifications",
            "toggle",
            "members",
            "invite",
        ],
        help="Command to run",
    )

    parser.add_argument("--token", type=str, default=None, help="Auth token to store (used with login)")
    parser.add_argument("--budget", type=int, default=None, help="Budget id (used with select)")
    parser.add_argument("--name", type=str, default=None, help="Budget name (used with create-budget)")
    parser.add_argument(
        "--sort",
        choices=list(SORT_KEYS),
        default="execution_date",
        help="Column to sort planned expenses by. Default: execution_date",
    )
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--page", type=int, default=1, help="Page of planned expenses (8 rows per page)")
    parser.add_argument("--expense", type=int, default=None, help="Expense id (used with toggle)")
    parser.add_argument("--yes", action="store_true", help="Confirm toggle without asking")
    parser.add_argument("--email", type=str, default=None, help="E-mail to invite (used with invite)")

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return 0

    # crypto reads MASTER_KEY from the environment
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    from .api import BudgetApiClient
    from .storage import SessionStore

    session = SessionStore(settings.session_file)

    if args.command == "health":
        logger.info("Application started successfully.")
        print("ok")
        return 0

    if args.command == "status-env":
        state = session.load()
        print("API_URL =", settings.api_url)
        print("MASTER_KEY =", mask(settings.master_key))
        print("LOG_LEVEL =", settings.log_level)
        print("AUTH_TOKEN =", mask(state.auth_token))
        print("SELECTED_BUDGET =", state.selected_budget_id, state.selected_budget_name or "")
        return 0

    if args.command == "login":
        if not args.token:
            print("--token is required")
            return 2
        session.set_token(args.token)
        print("token saved")
        return 0

    if args.command == "logout":
        session.clear_token()
        print("signed out")
        return 0

    from .planner.page import PlannedExpensesPage

    client = BudgetApiClient(session, settings.api_url, timeout=settings.http_timeout)
    try:
        page = PlannedExpensesPage(client, session)

        if args.command in ("members", "invite"):
            from .planner.team import BudgetTeam, member_label

            budget_id = session.selected_budget_id()
            if not budget_id:
                print("No budget selected. Run `budget-planner budgets` first.")
                return 1

            team = BudgetTeam(
                client=client,
                budget_id=budget_id,
                budget_name=session.selected_budget_name() or "Wybrany budżet",
            )

            if args.command == "invite":
                problem = team.invite(args.email or "")
                if problem:
                    print(problem)
                    return 1
            else:
                team.load_members()

            if team.signed_out:
                print("Session expired. Run `budget-planner login --token ...`.")
                return 1

            _print_notice(team)
            print("budget_id =", budget_id)
            print("members_count =", len(team.members))
            for m in team.members:
                print("member:", m.id or "-", member_label(m), "role=", m.role or "-", "status=", m.status or "-")
            return 0

        page.load_budgets()
        if page.signed_out:
            print("Session expired. Run `budget-planner login --token ...`.")
            return 1

        if args.command == "create-budget":
            problem = page.create_budget(args.name or "")
            if problem:
                print(problem)
                return 1
            _print_notice(page)
            return 0

        if args.command == "budgets":
            print("budgets_count =", len(page.budgets))
            for b in page.budgets:
                marker = "*" if b.id == page.selected_budget_id else " "
                print(f"{marker} {b.id}: {b.name}")
            return 0

        if args.command == "select":
            if args.budget is None or all(b.id != args.budget for b in page.budgets):
                print("Unknown budget:", args.budget)
                return 1
            asyncio.run(page.select_budget(args.budget))
            print("selected_budget =", page.selected_budget_id)
            return 0

        asyncio.run(page.refresh())
        if page.signed_out:
            print("Session expired. Run `budget-planner login --token ...`.")
            return 1

        if args.command == "notifications":
            _print_notice(page)
            print("notifications_count =", len(page.notifications))
            for text in page.notification_texts():
                print("-", text)
            return 0

        if args.command == "expenses":
            from .planner.formatting import STATUS_LABELS, format_date_pl, format_money_pl, kind_label

            page.table.sort_key = args.sort
            page.table.sort_dir = "desc" if args.desc else "asc"
            page.go_to_page(args.page)

            _print_notice(page)
            budget = page.current_budget
            print("budget =", budget.name if budget else None)
            print(f"page = {page.table.page_index}/{page.total_pages()}")
            first_lp = (page.table.page_index - 1) * PAGE_SIZE + 1
            for lp, r in enumerate(page.visible_rows(), start=first_lp):
                print(
                    f"{lp:>3}. #{r.id} {kind_label(r.kind)} | {r.category_name} | {r.description} | "
                    f"{format_money_pl(r.amount)} zł | {format_date_pl(r.execution_date)} | "
                    f"{r.frequency_label or '-'} | {STATUS_LABELS[r.status]}"
                )
            return 0

        if args.command == "toggle":
            from .planner.toggle import ToggleState

            if args.expense is None or not page.request_toggle(args.expense):
                print("Unknown expense:", args.expense)
                return 1

            row = page.toggle.selected
            action = "wstrzymać" if row.status == "active" else "wznowić"
            if not args.yes:
                answer = input(f"Czy na pewno chcesz {action} wydatek #{row.id}? [t/N] ")
                if answer.strip().lower() not in ("t", "tak", "y", "yes"):
                    page.cancel_toggle()
                    print("cancelled")
                    return 0

            state = page.confirm_toggle()
            if state == ToggleState.SIGNED_OUT:
                print("Session expired. Run `budget-planner login --token ...`.")
                return 1
            _print_notice(page)
            return 0 if state == ToggleState.IDLE else 1

    finally:
        client.close()

    return 1
