"""Pytest fixtures for the Shiptivity API."""
from __future__ import annotations

from collections import defaultdict
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from shiptivity_api.app.core import db
from shiptivity_api.app.core.config import settings
from shiptivity_api.app.main import app

# (id, name, status, priority)
BOARD = [
    (1, "Stark, White and Abbott", "backlog", 1),
    (2, "Wiza LLC", "backlog", 2),
    (3, "Nolan LLC", "backlog", 3),
    (4, "Thompson PLC", "in-progress", 1),
    (5, "Walker-Williamson", "in-progress", 2),
    (6, "Boehm and Sons", "complete", 1),
]


def insert_clients(rows) -> None:
    with db.transaction() as conn:
        conn.executemany(
            "INSERT INTO clients (id, name, description, status, priority) VALUES (?, ?, NULL, ?, ?)",
            rows,
        )


def lanes(conn) -> dict:
    """Return ``{lane: [priority, ...]}`` sorted, straight from the table."""
    result = defaultdict(list)
    for row in conn.execute("SELECT status, priority FROM clients"):
        result[row["status"]].append(row["priority"])
    return {lane: sorted(priorities) for lane, priorities in result.items()}


def positions(conn) -> dict:
    """Return ``{id: (lane, priority)}`` for every client."""
    return {
        row["id"]: (row["status"], row["priority"])
        for row in conn.execute("SELECT id, status, priority FROM clients")
    }


def assert_dense(conn) -> None:
    for lane, priorities in lanes(conn).items():
        assert priorities == list(range(1, len(priorities) + 1)), lane


@pytest.fixture()
def database(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "clients.db"))
    conn = db.open_database()
    try:
        db.init_db()
        yield conn
    finally:
        db.close_database()


@pytest.fixture()
def board(database):
    insert_clients(BOARD)
    return database


@pytest.fixture()
def api(board):
    # Lifespan reuses the already-open connection and closes it on exit.
    with TestClient(app) as client:
        yield client
