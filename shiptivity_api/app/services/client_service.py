"""
Service for listing clients and moving them between lanes.

This is the layer the API endpoints talk to.  It validates raw
request values, resolves clients and delegates every lane or priority
change to the ``ReorderEngine``.  An invalid ``status`` or
``priority`` in an update request only disables that part of the
update; an unknown client aborts the request.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from shiptivity_api.app.core.exceptions import (
    ClientNotFoundError,
    InvalidLaneError,
    InvalidPriorityError,
)
from shiptivity_api.app.schemas.client import ClientRead, Lane, parse_lane, parse_priority
from shiptivity_api.app.services.rank_store import RankStore, SQLiteRankStore
from shiptivity_api.app.services.reorder_engine import ReorderEngine

logger = logging.getLogger(__name__)


class ClientService:
    """Service class for reading and reordering clients."""

    store: RankStore = SQLiteRankStore()

    @classmethod
    async def list_clients(cls, status: Optional[Any] = None) -> List[ClientRead]:
        """Return all clients, or only those of lane ``status``.

        An empty ``status`` is treated as absent.

        Raises
        ------
        InvalidLaneError
            If ``status`` is given but is not a known lane.
        """
        if status is None or status == "":
            return cls.store.list_all()
        return cls.store.list_by_lane(parse_lane(status))

    @classmethod
    async def get_client(cls, client_id: int) -> ClientRead:
        """Return one client.

        Raises
        ------
        ClientNotFoundError
            If no client has ``client_id``.
        """
        client = cls.store.get(client_id)
        if client is None:
            raise ClientNotFoundError()
        return client

    @classmethod
    async def update_client(
        cls,
        client_id: int,
        status: Optional[Any] = None,
        priority: Optional[Any] = None,
    ) -> List[ClientRead]:
        """Change a client's lane and/or priority.

        ``status`` and ``priority`` are validated independently and
        any invalid one is ignored, so a request carrying a valid lane
        and an invalid priority still moves the client.  With neither
        valid, nothing changes and the current snapshot is returned.
        The engine resolves the client before applying anything, so an
        unknown id fails the request whatever the arguments are.

        Returns
        -------
        List[ClientRead]
            All clients after the update.

        Raises
        ------
        ClientNotFoundError
            If no client has ``client_id``.
        StoreError
            If applying the change failed and was rolled back.
        """
        lane: Optional[Lane] = None
        if status is not None:
            try:
                lane = parse_lane(status)
            except InvalidLaneError:
                logger.warning("Ignoring invalid status %r for client %s", status, client_id)

        new_priority: Optional[int] = None
        if priority is not None:
            try:
                new_priority = parse_priority(priority)
            except InvalidPriorityError:
                logger.warning("Ignoring invalid priority %r for client %s", priority, client_id)

        engine = ReorderEngine(cls.store)
        return engine.reorder(client_id, lane=lane, priority=new_priority)
