"""
Tests for ticket create/update/delete
"""
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from backend.app.errors import NotFoundError, ValidationError
from backend.app.models import Category, User
from backend.app.services.tickets import (
    TicketCreate,
    TicketUpdate,
    create_ticket,
    delete_ticket,
    get_ticket,
    list_tickets,
    update_ticket,
)


def _ids(session):
    category = session.exec(select(Category).where(Category.name == "Support")).one()
    user = session.exec(select(User).where(User.username == "user1")).one()
    return category.id, user.id


@pytest.fixture
def valid_data(seeded):
    category_id, user_id = _ids(seeded)
    return {
        "title": "Broken checkout",
        "description": "Checkout button does nothing on Safari",
        "summary": "Checkout blocked on Safari",
        "category_id": category_id,
        "user_id": user_id,
    }


class TestCreate:
    """Ticket creation"""

    def test_create_returns_enriched_ticket(self, seeded, valid_data):
        ticket = create_ticket(seeded, TicketCreate(**valid_data))

        assert ticket.id is not None
        assert ticket.title == "Broken checkout"
        assert ticket.category.name == "Support"
        assert ticket.user.username == "user1"
        assert ticket.created_at
        assert ticket.updated_at

    def test_summary_is_optional(self, seeded, valid_data):
        valid_data.pop("summary")

        ticket = create_ticket(seeded, TicketCreate(**valid_data))

        assert ticket.summary is None

    @pytest.mark.parametrize("field", ["title", "description", "category_id", "user_id"])
    def test_missing_required_field_fails(self, seeded, valid_data, field):
        valid_data.pop(field)

        with pytest.raises(ValidationError) as exc_info:
            create_ticket(seeded, TicketCreate(**valid_data))

        assert field in exc_info.value.message

    @pytest.mark.parametrize("field", ["title", "description", "category_id"])
    def test_empty_required_field_fails(self, seeded, valid_data, field):
        valid_data[field] = ""

        with pytest.raises(ValidationError):
            create_ticket(seeded, TicketCreate(**valid_data))

    def test_unknown_category_fails(self, seeded, valid_data):
        valid_data["category_id"] = 9999

        with pytest.raises(NotFoundError):
            create_ticket(seeded, TicketCreate(**valid_data))

    def test_unknown_user_fails(self, seeded, valid_data):
        valid_data["user_id"] = 9999

        with pytest.raises(NotFoundError):
            create_ticket(seeded, TicketCreate(**valid_data))

    def test_create_then_fetch_round_trip(self, seeded, valid_data):
        created = create_ticket(seeded, TicketCreate(**valid_data))

        assert get_ticket(seeded, created.id) == created


class TestUpdate:
    """Partial updates"""

    @pytest.fixture
    def ticket(self, seeded, valid_data):
        return create_ticket(seeded, TicketCreate(**valid_data))

    def test_empty_title_keeps_existing(self, seeded, ticket):
        updated = update_ticket(seeded, ticket.id, TicketUpdate(title=""))

        assert updated.title == ticket.title

    def test_empty_description_keeps_existing(self, seeded, ticket):
        updated = update_ticket(seeded, ticket.id, TicketUpdate(description=""))

        assert updated.description == ticket.description

    def test_empty_category_keeps_existing(self, seeded, ticket):
        updated = update_ticket(seeded, ticket.id, TicketUpdate(category_id=""))

        assert updated.category_id == ticket.category_id

    def test_empty_summary_clears_it(self, seeded, ticket):
        updated = update_ticket(seeded, ticket.id, TicketUpdate(summary=""))

        assert updated.summary == ""

    def test_omitted_summary_is_kept(self, seeded, ticket):
        updated = update_ticket(seeded, ticket.id, TicketUpdate(title="Checkout fails"))

        assert updated.title == "Checkout fails"
        assert updated.summary == ticket.summary
        assert updated.description == ticket.description

    def test_category_change_is_enriched(self, seeded, ticket):
        critical = seeded.exec(select(Category).where(Category.name == "Critical")).one()

        updated = update_ticket(seeded, ticket.id, TicketUpdate(category_id=critical.id))

        assert updated.category_id == critical.id
        assert updated.category.name == "Critical"

    def test_unknown_category_fails(self, seeded, ticket):
        with pytest.raises(NotFoundError):
            update_ticket(seeded, ticket.id, TicketUpdate(category_id=9999))

    def test_rejected_update_changes_nothing(self, seeded, ticket):
        with pytest.raises(NotFoundError):
            update_ticket(
                seeded,
                ticket.id,
                TicketUpdate(title="Rejected", description="Rejected too", category_id=9999),
            )

        assert get_ticket(seeded, ticket.id) == ticket

        # a later commit on the same session must not carry the rejected values
        other = list_tickets(seeded).tickets[-1]
        delete_ticket(seeded, other.id)
        seeded.expire_all()

        stored = get_ticket(seeded, ticket.id)
        assert stored.title == "Broken checkout"
        assert stored.description == ticket.description
        assert stored.updated_at == ticket.updated_at

    def test_updated_at_advances(self, seeded, ticket):
        first = update_ticket(seeded, ticket.id, TicketUpdate(title="One"))
        second = update_ticket(seeded, ticket.id, TicketUpdate(title="Two"))

        assert datetime.fromisoformat(first.updated_at) > datetime.fromisoformat(ticket.updated_at)
        assert datetime.fromisoformat(second.updated_at) > datetime.fromisoformat(first.updated_at)
        assert second.created_at == ticket.created_at

    def test_unknown_ticket_fails(self, seeded):
        with pytest.raises(NotFoundError):
            update_ticket(seeded, 9999, TicketUpdate(title="Nope"))


class TestDelete:
    """Hard deletes"""

    def test_delete_removes_ticket(self, seeded, valid_data):
        ticket = create_ticket(seeded, TicketCreate(**valid_data))

        delete_ticket(seeded, ticket.id)

        with pytest.raises(NotFoundError):
            get_ticket(seeded, ticket.id)

    def test_unknown_ticket_fails(self, seeded):
        with pytest.raises(NotFoundError):
            delete_ticket(seeded, 9999)

    def test_update_after_delete_fails(self, seeded, valid_data):
        ticket = create_ticket(seeded, TicketCreate(**valid_data))
        delete_ticket(seeded, ticket.id)

        with pytest.raises(NotFoundError):
            update_ticket(seeded, ticket.id, TicketUpdate(title="Too late"))

    def test_category_in_use_cannot_be_deleted(self, seeded):
        critical = seeded.exec(select(Category).where(Category.name == "Critical")).one()

        seeded.delete(critical)
        with pytest.raises(IntegrityError):
            seeded.commit()
        seeded.rollback()
