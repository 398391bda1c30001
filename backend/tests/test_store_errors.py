"""
Tests for database failures and the error-to-status mapping
"""
import asyncio
import json
import logging

import pytest
from starlette.requests import Request

from backend.app.errors import NotFoundError, StoreError
from backend.app.main import ticket_service_error_handler
from backend.app.models import Category, Ticket, User
from backend.app.services.tickets import (
    TicketCreate,
    create_ticket,
    list_categories,
    list_tickets,
)


@pytest.fixture
def broken_store(engine, session):
    """Reference rows exist, but the tickets table is gone"""
    session.add(Category(name="Support"))
    session.add(User(username="admin"))
    session.commit()
    Ticket.__table__.drop(engine)
    return session


class TestStoreFailures:
    """SQLAlchemy errors surface as StoreError"""

    def test_read_failure_raises_store_error(self, broken_store):
        with pytest.raises(StoreError) as exc_info:
            list_tickets(broken_store)

        assert exc_info.value.message == "Failed to fetch tickets"

    def test_write_failure_is_logged_and_session_stays_usable(self, broken_store, caplog):
        data = TicketCreate(title="t", description="d", category_id=1, user_id=1)

        with caplog.at_level(logging.ERROR, logger="ticket_assistant.tickets"):
            with pytest.raises(StoreError) as exc_info:
                create_ticket(broken_store, data)

        assert exc_info.value.message == "Failed to create ticket"
        assert "Failed to create ticket" in caplog.text
        assert [c.name for c in list_categories(broken_store)] == ["Support"]

    def test_api_returns_500(self, client, broken_store):
        response = client.get("/api/tickets")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch tickets"}


class TestErrorMapping:
    """Status codes follow the error class hierarchy"""

    @staticmethod
    def _handle(exc):
        request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})
        return asyncio.run(ticket_service_error_handler(request, exc))

    def test_subclass_uses_parent_status(self):
        class AttachmentNotFoundError(NotFoundError):
            pass

        response = self._handle(AttachmentNotFoundError("Attachment not found"))

        assert response.status_code == 404
        assert json.loads(response.body) == {"detail": "Attachment not found"}
