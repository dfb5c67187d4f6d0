"""
Pydantic schemas and input predicates for clients.

A client sits in exactly one lane (its ``status``) and holds a 1-based
``priority`` within that lane.  ``name`` and ``description`` are
descriptive payload that the ranking logic never looks at.

Request bodies are parsed loosely (``ClientUpdate`` accepts any JSON
value for both fields) so that a bad ``status`` or ``priority`` does
not reject the whole request; the ``parse_*`` helpers below decide
what is valid.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from shiptivity_api.app.core.exceptions import (
    ClientNotFoundError,
    InvalidClientIdError,
    InvalidLaneError,
    InvalidPriorityError,
)


class Lane(str, Enum):
    """The three workflow lanes a client can be in."""

    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class ClientRead(BaseModel):
    """Schema for a client returned by the API."""

    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    status: Lane
    priority: int

    model_config = {
        "from_attributes": True,
        "use_enum_values": True,
    }


class ClientUpdate(BaseModel):
    """Body of ``PUT /clients/{id}``.  Both fields are optional."""

    status: Optional[Any] = Field(None, description="Target lane: backlog, in-progress or complete")
    priority: Optional[Any] = Field(None, description="Target 1-based priority within the lane")


class ErrorMessage(BaseModel):
    """Error body returned on 4xx/5xx responses."""

    message: str
    long_message: str = ""


def parse_lane(value: Any) -> Lane:
    """Return the ``Lane`` named by ``value`` or raise ``InvalidLaneError``."""
    if isinstance(value, Lane):
        return value
    if isinstance(value, str):
        try:
            return Lane(value)
        except ValueError:
            pass
    raise InvalidLaneError()


def parse_priority(value: Any) -> int:
    """Return ``value`` as a positive integer or raise ``InvalidPriorityError``.

    Integers, integral floats (``2.0``) and decimal strings (``"2"``)
    are accepted.  Booleans, zero, negatives, fractions and anything
    non-numeric are rejected.
    """
    if isinstance(value, bool):
        raise InvalidPriorityError()
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        number = int(value.strip())
    else:
        raise InvalidPriorityError()
    if number <= 0:
        raise InvalidPriorityError()
    return number

# SQLite INTEGER is a signed 64-bit value; no stored row can have an id outside it.
SQLITE_INTEGER_MIN = -(2 ** 63)
SQLITE_INTEGER_MAX = 2 ** 63 - 1


def parse_client_id(value: Any) -> int:
    """Return the integer id in ``value``.

    Raises ``InvalidClientIdError`` when ``value`` is not an integer and
    ``ClientNotFoundError`` when it cannot be a stored id at all.
    """
    if isinstance(value, bool):
        raise InvalidClientIdError()
    if isinstance(value, int):
        client_id = value
    elif isinstance(value, str):
        try:
            client_id = int(value.strip(), 10)
        except ValueError:
            raise InvalidClientIdError() from None
    else:
        raise InvalidClientIdError()
    if not SQLITE_INTEGER_MIN <= client_id <= SQLITE_INTEGER_MAX:
        raise ClientNotFoundError()
    return client_id
