"""
Reordering engine keeping every lane densely ranked.

Priorities in a lane always form the sequence ``1..N``.  Moving a
client to another lane closes the gap it leaves behind and appends it
to the bottom of the destination lane; changing its priority shifts
the clients between the old and new slot by one towards the vacated
slot.  The moving client always ends up on exactly the requested slot,
clamped to the end of the lane.

All reads and writes of one ``reorder`` call, including a lane change
followed by a re-rank, run inside a single store transaction.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from shiptivity_api.app.core.exceptions import ClientNotFoundError
from shiptivity_api.app.schemas.client import ClientRead, Lane
from shiptivity_api.app.services.rank_store import RankStore

logger = logging.getLogger(__name__)


class ReorderEngine:
    """Apply lane and priority changes to one client at a time."""

    def __init__(self, store: RankStore) -> None:
        self.store = store

    def reorder(
        self,
        client_id: int,
        lane: Optional[Lane] = None,
        priority: Optional[int] = None,
    ) -> List[ClientRead]:
        """Move a client and return a fresh snapshot of all clients.

        Parameters
        ----------
        client_id : int
            Identifier of the client to move.
        lane : Optional[Lane]
            Destination lane.  ``None`` keeps the current lane.
        priority : Optional[int]
            Requested 1-based priority in the destination lane, already
            validated as positive.  Values past the end of the lane are
            clamped.  ``None`` requests no re-rank, although a lane
            change still places the client at the bottom.

        Raises
        ------
        ClientNotFoundError
            If no client has ``client_id``.  Nothing is modified.
        StoreError
            If the store fails; the transaction is rolled back.
        """
        with self.store.transaction():
            client = self.store.get(client_id)
            if client is None:
                raise ClientNotFoundError()

            old_lane = Lane(client.status)
            target_lane = Lane(lane) if lane is not None else old_lane
            lane_change = target_lane != old_lane

            max_allowed = self.store.count_in_lane(target_lane)
            if lane_change:
                max_allowed += 1

            current_priority = client.priority
            if lane_change:
                self._move_to_lane(client, target_lane, max_allowed)
                current_priority = max_allowed

            if priority is not None:
                self._rerank(client.id, target_lane, current_priority, min(priority, max_allowed))

            return self.store.list_all()

    def _move_to_lane(self, client: ClientRead, lane: Lane, bottom: int) -> None:
        # Close the gap in the old lane, then append at the bottom of the new one.
        self.store.shift_range(Lane(client.status), client.priority + 1, None, -1)
        self.store.set_lane_and_priority(client.id, lane, bottom)
        logger.info(
            "Moved client %s from %s#%s to %s#%s",
            client.id,
            client.status,
            client.priority,
            lane.value,
            bottom,
        )

    def _rerank(self, client_id: int, lane: Lane, current: int, new: int) -> None:
        if new == current:
            return
        if new < current:
            self.store.shift_range(lane, new, current - 1, 1)
        else:
            self.store.shift_range(lane, current + 1, new, -1)
        self.store.set_lane_and_priority(client_id, lane, new)
        logger.info("Re-ranked client %s in %s from %s to %s", client_id, lane.value, current, new)
