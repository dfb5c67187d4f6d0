"""
Client endpoints for API v1.

These routes list clients, fetch a single client and move a client
between lanes or within its lane.  Errors are returned as
``{"message": ..., "long_message": ...}`` bodies rather than FastAPI's
default ``detail`` wrapper, which is what the board frontend reads.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from shiptivity_api.app.core.exceptions import StoreError, ValidationError
from shiptivity_api.app.schemas.client import ClientRead, ClientUpdate, ErrorMessage, parse_client_id
from shiptivity_api.app.services.client_service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter()

SERVER_ERROR = {
    "message": "Server Error: Could not process the given request",
    "long_message": "",
}


def _bad_request(exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


def _server_error() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=SERVER_ERROR)


@router.get(
    "",
    response_model=List[ClientRead],
    responses={400: {"model": ErrorMessage}, 500: {"model": ErrorMessage}},
    summary="List clients",
)
async def list_clients(
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        description="Only return clients of this lane: backlog, in-progress or complete.",
    ),
):
    """Return all clients, optionally filtered by lane."""
    try:
        return await ClientService.list_clients(status=status_filter)
    except ValidationError as e:
        return _bad_request(e)
    except Exception:
        logger.exception("Listing clients failed")
        return _server_error()


@router.get(
    "/{client_id}",
    response_model=ClientRead,
    responses={400: {"model": ErrorMessage}, 500: {"model": ErrorMessage}},
    summary="Get a client",
)
async def get_client(client_id: str):
    """Return a single client.

    Responds with HTTP 400 when the id is not an integer or no client
    has that id.
    """
    try:
        return await ClientService.get_client(parse_client_id(client_id))
    except ValidationError as e:
        return _bad_request(e)
    except Exception:
        logger.exception("Reading client %s failed", client_id)
        return _server_error()


@router.put(
    "/{client_id}",
    response_model=List[ClientRead],
    responses={400: {"model": ErrorMessage}, 500: {"model": ErrorMessage}},
    summary="Move a client to another lane and/or priority",
)
async def update_client(client_id: str, client_in: Optional[ClientUpdate] = Body(None)):
    """Update a client's lane (``status``) and/or ``priority``.

    When ``status`` is provided the client moves to the bottom of that
    lane.  When ``priority`` is provided the client takes that slot and
    the other clients of the lane shift to keep priorities contiguous;
    ``1`` is the top of the lane.  Invalid values for either field are
    ignored.  Returns the full list of clients on success.
    """
    payload = client_in or ClientUpdate()
    try:
        return await ClientService.update_client(
            parse_client_id(client_id),
            status=payload.status,
            priority=payload.priority,
        )
    except ValidationError as e:
        return _bad_request(e)
    except StoreError:
        # Already logged with its traceback by the rank store.
        logger.error("Update of client %s failed", client_id)
        return _server_error()
    except Exception:
        logger.exception("Update of client %s failed", client_id)
        return _server_error()
