# tests/test_clients_api.py
# HTTP surface of /api/v1/clients using FastAPI's TestClient

from __future__ import annotations

import sqlite3

from conftest import assert_dense, positions
from shiptivity_api.app.api.v1.endpoints.clients import SERVER_ERROR
from shiptivity_api.app.services.client_service import ClientService
from shiptivity_api.app.services.rank_store import SQLiteRankStore


def test_root_message(api):
    resp = api.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "SHIPTIVITY API. Read documentation to see API docs"}


def test_list_all_clients(api):
    resp = api.get("/api/v1/clients")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 6
    assert set(data[0]) == {"id", "name", "description", "status", "priority"}


def test_list_clients_by_status(api):
    resp = api.get("/api/v1/clients", params={"status": "in-progress"})
    assert resp.status_code == 200
    assert [(c["id"], c["priority"]) for c in resp.json()] == [(4, 1), (5, 2)]


def test_list_clients_invalid_status(api):
    resp = api.get("/api/v1/clients", params={"status": "done"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid status provided."
    assert body["long_message"] == "Status can only be one of the following: [backlog | in-progress | complete]."


def test_get_client(api):
    resp = api.get("/api/v1/clients/4")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Thompson PLC"


def test_get_client_non_numeric_id(api):
    resp = api.get("/api/v1/clients/abc")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid id provided.", "long_message": "Id can only be integer."}


def test_get_client_unknown_id(api):
    resp = api.get("/api/v1/clients/999")
    assert resp.status_code == 400
    assert resp.json()["long_message"] == "Cannot find client with that id."


def test_put_reorders_within_lane(api, board):
    resp = api.put("/api/v1/clients/1", json={"priority": 3})
    assert resp.status_code == 200
    by_id = {c["id"]: c for c in resp.json()}
    assert len(by_id) == 6
    assert [by_id[i]["priority"] for i in (1, 2, 3)] == [3, 1, 2]
    assert_dense(board)


def test_put_moves_to_other_lane(api, board):
    resp = api.put("/api/v1/clients/2", json={"status": "complete"})
    assert resp.status_code == 200
    assert positions(board)[2] == ("complete", 2)
    assert positions(board)[3] == ("backlog", 2)


def test_put_accepts_numeric_string_priority(api, board):
    resp = api.put("/api/v1/clients/5", json={"priority": "1"})
    assert resp.status_code == 200
    assert positions(board)[5] == ("in-progress", 1)


def test_put_with_invalid_priority_and_no_status_is_a_noop(api, board):
    before = positions(board)
    for priority in (0, -2, "high", None):
        resp = api.put("/api/v1/clients/2", json={"priority": priority})
        assert resp.status_code == 200
        assert len(resp.json()) == 6
    assert positions(board) == before


def test_put_without_body_returns_snapshot(api, board):
    before = positions(board)
    resp = api.put("/api/v1/clients/2")
    assert resp.status_code == 200
    assert {c["id"]: (c["status"], c["priority"]) for c in resp.json()} == before


def test_put_applies_valid_status_and_ignores_invalid_priority(api, board):
    resp = api.put("/api/v1/clients/1", json={"status": "in-progress", "priority": "top"})
    assert resp.status_code == 200
    assert positions(board)[1] == ("in-progress", 3)
    assert_dense(board)


def test_put_applies_valid_priority_and_ignores_invalid_status(api, board):
    resp = api.put("/api/v1/clients/3", json={"status": "archived", "priority": 1})
    assert resp.status_code == 200
    assert positions(board)[3] == ("backlog", 1)


def test_put_unknown_id(api, board):
    before = positions(board)
    resp = api.put("/api/v1/clients/999", json={"status": "complete", "priority": 1})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid id provided."
    assert positions(board) == before


def test_put_non_numeric_id(api):
    resp = api.put("/api/v1/clients/x1", json={"priority": 1})
    assert resp.status_code == 400
    assert resp.json()["long_message"] == "Id can only be integer."


class BrokenStore(SQLiteRankStore):
    def shift_range(self, lane, lower, upper, delta):
        super().shift_range(lane, lower, upper, delta)
        raise sqlite3.OperationalError("disk I/O error")


def test_put_storage_failure_is_500_and_rolled_back(api, board, monkeypatch):
    monkeypatch.setattr(ClientService, "store", BrokenStore())
    before = positions(board)
    resp = api.put("/api/v1/clients/1", json={"status": "complete"})
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Server Error: Could not process the given request"
    assert "disk" not in str(body)
    assert positions(board) == before


HUGE_ID = "99999999999999999999999"


def test_get_client_id_beyond_integer_range(api):
    resp = api.get(f"/api/v1/clients/{HUGE_ID}")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid id provided.", "long_message": "Cannot find client with that id."}


def test_put_client_id_beyond_integer_range(api, board):
    before = positions(board)
    resp = api.put(f"/api/v1/clients/{HUGE_ID}", json={"status": "complete"})
    assert resp.status_code == 400
    assert resp.json()["long_message"] == "Cannot find client with that id."
    assert positions(board) == before


class CrashingStore(SQLiteRankStore):
    """Fails with errors that do not come from sqlite."""

    def get(self, client_id):
        raise KeyError("status")

    def list_all(self):
        raise RuntimeError("boom")


class CrashingShiftStore(SQLiteRankStore):
    def shift_range(self, lane, lower, upper, delta):
        super().shift_range(lane, lower, upper, delta)
        raise RuntimeError("boom")


def test_get_unexpected_failure_is_500(api, monkeypatch):
    monkeypatch.setattr(ClientService, "store", CrashingStore())
    for path in ("/api/v1/clients", "/api/v1/clients/1"):
        resp = api.get(path)
        assert resp.status_code == 500
        assert resp.json() == SERVER_ERROR


def test_put_unexpected_failure_is_500_and_rolled_back(api, board, monkeypatch, caplog):
    monkeypatch.setattr(ClientService, "store", CrashingShiftStore())
    before = positions(board)
    resp = api.put("/api/v1/clients/1", json={"priority": 3})
    assert resp.status_code == 500
    assert resp.json() == SERVER_ERROR
    assert positions(board) == before
    assert any(record.exc_info for record in caplog.records if record.levelname == "ERROR")
