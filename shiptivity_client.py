"""Shiptivity API client.

A thin wrapper around the Shiptivity REST API for scripts and other
services that need to read the board or move clients around.  The
client uses the ``requests`` library internally.

The client exposes one method per endpoint:

* :meth:`list_clients` – return all clients, optionally for one lane.
* :meth:`get_client` – fetch a single client by its identifier.
* :meth:`update_client` – move a client to another lane and/or priority.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with ``status_code``, ``message`` and ``long_message`` taken from the
server's error body when there is one.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

LANES = ("backlog", "in-progress", "complete")


class ShiptivityClient:
    """Client for the ``/api/v1/clients`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:3001",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:3001``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Timeout in seconds for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET`` or ``PUT``).
            path: Path relative to :attr:`base_url` (e.g. ``/api/v1/clients``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            long_message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    if isinstance(err_json, dict):
                        message = err_json.get("message") or str(err_json.get("detail") or "")
                        long_message = err_json.get("long_message") or ""
                    else:
                        message = str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message, "long_message": long_message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc), "long_message": ""}

    # ------------------------------------------------------------------
    # Client operations
    # ------------------------------------------------------------------
    def list_clients(self, status: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve all clients, or the clients of one lane.

        Args:
            status: Optional lane to filter by.
        Returns:
            A tuple ``(clients, error)``.  ``clients`` is empty on failure.
        """
        params = {"status": status} if status is not None else None
        data, error = self._request("GET", "/api/v1/clients", params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def get_client(self, client_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve a single client by ID."""
        return self._request("GET", f"/api/v1/clients/{client_id}")

    def update_client(
        self,
        client_id: Any,
        *,
        status: Optional[str] = None,
        priority: Optional[int] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Move a client to another lane and/or priority.

        Args:
            client_id: Identifier of the client.
            status: Destination lane.  Omitted from the body when ``None``.
            priority: Destination priority.  Omitted from the body when ``None``.
        Returns:
            A tuple ``(clients, error)`` where ``clients`` is the whole
            board after the update.
        """
        payload: Dict[str, Any] = {}
        if status is not None:
            payload["status"] = status
        if priority is not None:
            payload["priority"] = priority
        data, error = self._request("PUT", f"/api/v1/clients/{client_id}", json_body=payload)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def board(self) -> Tuple[Dict[str, List[Dict[str, Any]]], Optional[Dict[str, Any]]]:
        """Return the clients grouped by lane, each lane sorted by priority."""
        clients, error = self.list_clients()
        if error:
            return {}, error
        lanes: Dict[str, List[Dict[str, Any]]] = {lane: [] for lane in LANES}
        for client in clients:
            lanes.setdefault(client.get("status"), []).append(client)
        for members in lanes.values():
            members.sort(key=lambda c: c.get("priority") or 0)
        return lanes, None
