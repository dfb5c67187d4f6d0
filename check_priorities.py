#!/usr/bin/env python3
"""
Check (and optionally repair) client priorities in a Shiptivity SQLite database.

Every lane must hold the priorities 1..N with no gaps and no duplicates.
This script reports each lane that does not and, with ``--fix``,
renumbers the broken lanes in their current (priority, id) order inside
a single transaction.

Usage:
    python check_priorities.py --db ./shiptivity_api/clients.db
    python check_priorities.py --db ./shiptivity_api/clients.db --fix

Exit status: 0 when every lane is consistent (or was repaired), 2 when
violations remain, 1 when the database file does not exist.
"""

import argparse
import os
import sqlite3
import sys
from collections import defaultdict

LANES = ("backlog", "in-progress", "complete")


def find_violations(conn: sqlite3.Connection) -> dict:
    """Return ``{lane: sorted priorities}`` for every lane that is not 1..N.

    Rows whose status is not a known lane are reported under their own
    status value.
    """
    lanes = defaultdict(list)
    for status, priority in conn.execute("SELECT status, priority FROM clients"):
        lanes[status].append(priority)
    violations = {}
    for status, priorities in lanes.items():
        priorities.sort(key=lambda p: (p is None, p))
        if status not in LANES or priorities != list(range(1, len(priorities) + 1)):
            violations[status] = priorities
    return violations


def renumber(conn: sqlite3.Connection, lanes) -> int:
    """Rewrite priorities of ``lanes`` as 1..N; return the number of rows changed."""
    changed = 0
    try:
        conn.execute("BEGIN IMMEDIATE")
        for lane in lanes:
            rows = conn.execute(
                "SELECT id, priority FROM clients WHERE status = ? "
                "ORDER BY priority IS NULL, priority ASC, id ASC",
                (lane,),
            ).fetchall()
            for position, (client_id, priority) in enumerate(rows, start=1):
                if priority != position:
                    conn.execute("UPDATE clients SET priority = ? WHERE id = ?", (position, client_id))
                    changed += 1
        conn.execute("COMMIT")
    except sqlite3.Error:
        conn.execute("ROLLBACK")
        raise
    return changed


def main():
    ap = argparse.ArgumentParser(description="Check Shiptivity lane priorities (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./shiptivity_api/clients.db)")
    ap.add_argument("--fix", action="store_true", help="Renumber broken lanes to 1..N")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    conn = sqlite3.connect(args.db, isolation_level=None)
    try:
        violations = find_violations(conn)
        for lane, priorities in violations.items():
            print(f"[!] Lane {lane!r}: priorities {priorities}, expected 1..{len(priorities)}")
        unknown = [lane for lane in violations if lane not in LANES]
        if unknown:
            print(f"[!] Unknown lanes, not repaired: {unknown}", file=sys.stderr)

        if args.fix and violations:
            fixable = [lane for lane in violations if lane in LANES]
            changed = renumber(conn, fixable)
            print(f"[+] Renumbered {changed} client(s) in {len(fixable)} lane(s)")
            violations = find_violations(conn)

        if violations:
            sys.exit(2)
        print("[+] All lanes are densely ranked")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
