"""Failures raised by the ticket services."""

from __future__ import annotations


class TicketServiceError(Exception):
    """Base class; ``message`` is safe to show to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TicketServiceError):
    """A required field is missing or empty."""


class NotFoundError(TicketServiceError):
    """The targeted ticket, category or user does not exist."""


class StoreError(TicketServiceError):
    """The database failed (connection loss, uncategorised constraint violation)."""
