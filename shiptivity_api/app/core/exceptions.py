"""
Exceptions raised by the service layer.

Validation errors subclass ``ValueError`` and carry the two
caller-facing strings returned by the API (``message`` and
``long_message``).  ``StoreError`` marks a storage failure; its text
is logged but never sent to the caller.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """Base class for caller-facing validation failures."""

    message = "Invalid request."
    long_message = ""

    def __init__(self, long_message: str | None = None) -> None:
        if long_message is not None:
            self.long_message = long_message
        super().__init__(f"{self.message} {self.long_message}".strip())

    def to_dict(self) -> dict:
        return {"message": self.message, "long_message": self.long_message}


class InvalidClientIdError(ValidationError):
    message = "Invalid id provided."
    long_message = "Id can only be integer."


class ClientNotFoundError(ValidationError):
    message = "Invalid id provided."
    long_message = "Cannot find client with that id."


class InvalidLaneError(ValidationError):
    message = "Invalid status provided."
    long_message = "Status can only be one of the following: [backlog | in-progress | complete]."


class InvalidPriorityError(ValidationError):
    message = "Invalid priority provided."
    long_message = "Priority can only be positive integer."


class StoreError(RuntimeError):
    """The rank store failed; the surrounding transaction was rolled back."""
