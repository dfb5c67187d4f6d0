"""
Rank store: lanes and priorities of clients.

``RankStore`` lists the operations the reordering engine relies on.
``SQLiteRankStore`` implements them over the ``clients`` table through
the shared connection from ``core.db``.  Mutations are only meant to
run inside ``transaction()``; a failure there rolls everything back and
surfaces as ``StoreError``.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from shiptivity_api.app.core import db
from shiptivity_api.app.core.exceptions import StoreError
from shiptivity_api.app.schemas.client import ClientRead, Lane

logger = logging.getLogger(__name__)


class RankStore(ABC):
    """Storage operations needed to keep lanes densely ranked."""

    @abstractmethod
    def get(self, client_id: int) -> Optional[ClientRead]:
        ...

    @abstractmethod
    def list_by_lane(self, lane: Lane) -> List[ClientRead]:
        """Clients of ``lane`` ordered by priority ascending."""

    @abstractmethod
    def list_all(self) -> List[ClientRead]:
        ...

    @abstractmethod
    def count_in_lane(self, lane: Lane) -> int:
        ...

    @abstractmethod
    def shift_range(self, lane: Lane, lower: int, upper: Optional[int], delta: int) -> int:
        """Add ``delta`` to every priority in ``lane`` within ``[lower, upper]``.

        ``upper=None`` leaves the range open-ended.  Returns the number
        of clients shifted.
        """

    @abstractmethod
    def set_lane_and_priority(self, client_id: int, lane: Lane, priority: int) -> None:
        ...

    @abstractmethod
    def transaction(self):
        """Context manager grouping operations into one atomic unit."""


class SQLiteRankStore(RankStore):
    """``RankStore`` backed by the ``clients`` table."""

    _COLUMNS = "id, name, description, status, priority"

    @staticmethod
    def _row_to_client(row: sqlite3.Row) -> ClientRead:
        return ClientRead(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            status=row["status"],
            priority=row["priority"],
        )

    def get(self, client_id: int) -> Optional[ClientRead]:
        with db.locked() as conn:
            row = conn.execute(
                f"SELECT {self._COLUMNS} FROM clients WHERE id = ?",
                (client_id,),
            ).fetchone()
        return self._row_to_client(row) if row else None

    def list_by_lane(self, lane: Lane) -> List[ClientRead]:
        with db.locked() as conn:
            rows = conn.execute(
                f"SELECT {self._COLUMNS} FROM clients WHERE status = ? ORDER BY priority ASC, id ASC",
                (Lane(lane).value,),
            ).fetchall()
        return [self._row_to_client(row) for row in rows]

    def list_all(self) -> List[ClientRead]:
        with db.locked() as conn:
            rows = conn.execute(
                f"SELECT {self._COLUMNS} FROM clients ORDER BY status ASC, priority ASC, id ASC"
            ).fetchall()
        return [self._row_to_client(row) for row in rows]

    def count_in_lane(self, lane: Lane) -> int:
        with db.locked() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total FROM clients WHERE status = ?",
                (Lane(lane).value,),
            ).fetchone()
        return row["total"] if row else 0

    def shift_range(self, lane: Lane, lower: int, upper: Optional[int], delta: int) -> int:
        if delta not in (-1, 1):
            raise ValueError(f"delta must be +1 or -1, got {delta}")
        query = "UPDATE clients SET priority = priority + ? WHERE status = ? AND priority >= ?"
        params: list = [delta, Lane(lane).value, lower]
        if upper is not None:
            query += " AND priority <= ?"
            params.append(upper)
        with db.locked() as conn:
            cursor = conn.execute(query, params)
        return cursor.rowcount

    def set_lane_and_priority(self, client_id: int, lane: Lane, priority: int) -> None:
        with db.locked() as conn:
            conn.execute(
                "UPDATE clients SET status = ?, priority = ? WHERE id = ?",
                (Lane(lane).value, priority, client_id),
            )

    @contextmanager
    def transaction(self) -> Iterator["SQLiteRankStore"]:
        try:
            with db.transaction():
                yield self
        except sqlite3.Error as exc:
            logger.exception("Rank store transaction rolled back")
            raise StoreError(str(exc)) from exc
