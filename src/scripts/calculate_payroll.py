#!/usr/bin/env python3
"""
Calculate an employee's payroll for a month from exported calendar events.

Reads the client roster and the calendar events from JSON exports, matches
events to clients (honouring stored decisions), prints the report and
optionally walks through the uncertain matches interactively.

Usage:
    uv run python src/scripts/calculate_payroll.py --employee-id emp-1 --month 2025-11 \
        --clients data/clients.json --events data/events.json --interactive
"""

import argparse
import calendar
import sys
import traceback
from datetime import date, datetime, time
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.logger import configure_logging
from core.normalize import starts_with
from models.matching import ConfirmationFailed, UncertainMatch
from models.payroll import Employee, SupervisionConfig
from services.calendar import load_clients_file, load_events_file
from services.confirmations import SqliteMatchConfirmationStore
from services.orchestrator import (
    MatchResolutionOrchestrator,
    StaticClientRoster,
    StaticEventSource,
)
from services.reports import format_payroll_report, format_uncertain_match


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_monthly_date_range(month_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for monthly payroll.

    Args:
        month_str: Optional month string (YYYY-MM). Uses previous month if None.

    Returns:
        Tuple of (first_of_month, last_of_month)
    """
    if month_str:
        # Parse YYYY-MM format
        year, month = map(int, month_str.split("-"))
        target_date = date(year, month, 1)
    else:
        # Default to previous month
        today = date.today()
        if today.month == 1:
            target_date = date(today.year - 1, 12, 1)
        else:
            target_date = date(today.year, today.month - 1, 1)

    first_of_month = target_date.replace(day=1)
    _, last_day = calendar.monthrange(target_date.year, target_date.month)
    last_of_month = target_date.replace(day=last_day)

    return first_of_month, last_of_month


# =============================================================================
# INTERACTIVE CONFIRMATION
# =============================================================================


def prompt_decision(match: UncertainMatch, client_names: list[str]) -> tuple[str, str | None] | None:
    """
    Ask the operator how to resolve one match.

    A typed client name may be shortened to any unambiguous prefix
    ("ζωη κουσ" for "Ζωή Κουσουλού").

    Returns ("confirm", name), ("reject", None), or None to skip.
    """
    candidates = list(match.candidate_names)
    while True:
        answer = input("  Candidate number, client name, 'r' to reject, Enter to skip: ").strip()
        if not answer:
            return None
        if answer.lower() == "r":
            return ("reject", None)
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return ("confirm", candidates[int(answer) - 1])
        if answer in client_names:
            return ("confirm", answer)
        prefixed = [name for name in client_names if starts_with(name, answer)]
        if len(prefixed) == 1:
            return ("confirm", prefixed[0])
        if prefixed:
            print(f"  '{answer}' matches {len(prefixed)} clients: {', '.join(prefixed)}")
            continue
        print(f"  '{answer}' is not a candidate or a known client.")


def resolve_interactively(orchestrator: MatchResolutionOrchestrator, client_names: list[str]) -> bool:
    """Walk the pending matches; returns True if any decision was saved."""
    saved = False
    for idx, match in enumerate(orchestrator.pending, start=1):
        # A decision on an earlier match may already cover this title
        if match not in orchestrator.pending:
            continue
        print()
        print("\n".join(format_uncertain_match(idx, match)))
        decision = prompt_decision(match, client_names)
        if decision is None:
            continue

        action, client_name = decision
        if action == "reject":
            result = orchestrator.reject_match(match)
        else:
            result = orchestrator.confirm_match(match, client_name)

        if isinstance(result, ConfirmationFailed):
            print(f"  Not saved: {result.reason} (try again later)")
        else:
            print(f"  Saved ({len(result.remaining)} still pending)")
            saved = True
    return saved


# =============================================================================
# MAIN
# =============================================================================


def main(args: argparse.Namespace) -> int:
    """Main entry point for payroll calculation."""
    store = SqliteMatchConfirmationStore(DB_PATH)
    try:
        # 1. Calculate date range (full month)
        start_date, end_date = get_monthly_date_range(args.month)
        period_start = datetime.combine(start_date, time.min)
        period_end = datetime.combine(end_date, time(23, 59, 59))
        print(f"Calculating payroll for {start_date} to {end_date}")

        # 2. Load roster and events
        supervision = SupervisionConfig()
        clients = load_clients_file(Path(args.clients))
        events = load_events_file(Path(args.events), supervision.keywords)
        print(f"Loaded {len(clients)} client(s) and {len(events)} event(s)")

        employee = Employee(id=args.employee_id, name=args.employee_name or args.employee_id)
        roster = StaticClientRoster(clients)
        orchestrator = MatchResolutionOrchestrator(
            store=store,
            roster=roster,
            events=StaticEventSource(events),
            supervision_config=supervision,
        )

        # 3. Calculate, resolving uncertain matches until none are left or the operator skips
        result = orchestrator.calculate_payroll(employee, period_start, period_end)
        while True:
            if not result.ok:
                print(f"\nError: {result.error}")
                return 1

            print()
            print(format_payroll_report(result.report, result.uncertain_matches))

            if not (args.interactive and result.uncertain_matches):
                break
            client_names = [c.name for c in roster.clients_for(employee.id)]
            if not resolve_interactively(orchestrator, client_names):
                break
            print("\nRecalculating...")
            result = orchestrator.recalculate()

        print("\nDone!")
        return 0

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise
    finally:
        store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Calculate monthly payroll for an employee")
    parser.add_argument("--employee-id", required=True, help="Employee ID (matches clients' employeeId)")
    parser.add_argument("--employee-name", help="Display name for the report")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to previous month.",
    )
    parser.add_argument("--clients", required=True, help="Client roster JSON file")
    parser.add_argument("--events", required=True, help="Calendar events JSON export")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for each uncertain match and recalculate",
    )
    args = parser.parse_args()

    configure_logging()
    sys.exit(main(args))
