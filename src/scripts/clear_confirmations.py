#!/usr/bin/env python3
"""
Forget all stored match decisions for an employee.

Usage:
    uv run python src/scripts/clear_confirmations.py --employee-id emp-1
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.logger import configure_logging
from services.confirmations import SqliteMatchConfirmationStore


def main(employee_id: str, yes: bool = False) -> int:
    store = SqliteMatchConfirmationStore(DB_PATH)
    try:
        confirmations = store.list_confirmations(employee_id)
        if not confirmations:
            print(f"No stored decisions for {employee_id}.")
            return 0

        print(f"{len(confirmations)} stored decision(s) for {employee_id}:")
        for c in confirmations:
            print(f"  '{c.normalized_title}' -> {c.client_name}")

        if not yes and input("Delete all of them? [y/N] ").strip().lower() != "y":
            print("Aborted.")
            return 1

        result = store.delete_all(employee_id)
        if not result.ok:
            print(f"Error: {result.reason}")
            return 1
        print("Done!")
        return 0
    finally:
        store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Clear stored match confirmations")
    parser.add_argument("--employee-id", required=True, help="Employee whose decisions to clear")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    args = parser.parse_args()

    configure_logging()
    sys.exit(main(args.employee_id, args.yes))
