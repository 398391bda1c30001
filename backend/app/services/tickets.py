"""
Ticket query and command services.

Route handlers and the seeding script call these with an open SQLModel
session; every function is its own round-trip and commits its own work.
Failures surface as the typed errors in ``backend.app.errors``.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, select

from backend.app.errors import NotFoundError, StoreError, TicketServiceError, ValidationError
from backend.app.models import Category, Ticket, User

logger = logging.getLogger("ticket_assistant.tickets")

# Category filter value that means "no filter"
ALL_CATEGORIES = "All"

EXPORT_COLUMNS = [
    "id",
    "title",
    "description",
    "summary",
    "category",
    "username",
    "created_at",
    "updated_at",
]


# ── Schemas ───────────────────────────────────────────────────────────
class TicketFilter(BaseModel):
    search: str = ""
    category: str = ""


class Pagination(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str]


class UserRef(BaseModel):
    username: str


class TicketOut(BaseModel):
    id: int
    title: str
    description: str
    summary: Optional[str]
    category_id: int
    user_id: int
    created_at: str
    updated_at: str
    category: CategoryOut
    user: UserRef


class PageInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TicketPage(BaseModel):
    tickets: list[TicketOut]
    pagination: PageInfo


def _blank_to_none(value):
    # Form fields arrive as "" when nothing was chosen
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TicketCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    category_id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator("category_id", "user_id", mode="before")
    @classmethod
    def blank_ids_to_none(cls, value):
        return _blank_to_none(value)


class TicketUpdate(BaseModel):
    """Partial update; only fields present in the request are considered."""

    title: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    category_id: Optional[int] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def blank_id_to_none(cls, value):
        return _blank_to_none(value)


class TicketStats(BaseModel):
    total_tickets: int
    by_category: dict[str, int]


# ── Helpers ───────────────────────────────────────────────────────────
@contextmanager
def _store_errors(session: Session, action: str) -> Iterator[None]:
    """
    Rolls back on any failure; database failures are re-raised as StoreError.

    Service errors pass through unchanged, but nothing they left pending in
    the session survives.
    """
    try:
        yield
    except TicketServiceError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise StoreError(f"Failed to {action}") from exc


def _isoformat(value: datetime) -> str:
    return value.isoformat()


def _advance(previous: Optional[datetime]) -> datetime:
    """Returns a timestamp strictly after ``previous``."""
    now = datetime.now(timezone.utc)
    if previous is None:
        return now
    # SQLite hands back naive values
    if previous.tzinfo is None:
        now = now.replace(tzinfo=None)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def to_ticket_out(ticket: Ticket) -> TicketOut:
    """Enriches a ticket with its category and its author's username."""
    category = ticket.category
    return TicketOut(
        id=ticket.id,  # type: ignore[arg-type]
        title=ticket.title,
        description=ticket.description,
        summary=ticket.summary,
        category_id=ticket.category_id,
        user_id=ticket.user_id,
        created_at=_isoformat(ticket.created_at),
        updated_at=_isoformat(ticket.updated_at),
        category=CategoryOut(
            id=category.id,  # type: ignore[union-attr,arg-type]
            name=category.name,  # type: ignore[union-attr]
            description=category.description,  # type: ignore[union-attr]
        ),
        user=UserRef(username=ticket.user.username),  # type: ignore[union-attr]
    )


def _filter_clauses(filters: TicketFilter) -> list:
    clauses = []
    if filters.search:
        term = filters.search
        # NULL summaries never match
        clauses.append(
            or_(
                col(Ticket.title).icontains(term, autoescape=True),
                col(Ticket.description).icontains(term, autoescape=True),
                col(Ticket.summary).icontains(term, autoescape=True),
            )
        )
    if filters.category and filters.category != ALL_CATEGORIES:
        clauses.append(col(Category.name) == filters.category)
    return clauses


def _filtered(query, filters: TicketFilter):
    query = query.join(Category, col(Ticket.category_id) == col(Category.id))
    clauses = _filter_clauses(filters)
    if clauses:
        query = query.where(*clauses)
    return query


def _get_or_404(session: Session, ticket_id: int) -> Ticket:
    ticket = session.get(Ticket, ticket_id)
    if ticket is None:
        raise NotFoundError("Ticket not found")
    return ticket


# ── Queries ───────────────────────────────────────────────────────────
def list_tickets(
    session: Session,
    filters: TicketFilter | None = None,
    pagination: Pagination | None = None,
) -> TicketPage:
    """
    Returns one page of enriched tickets matching ``filters``.

    Most recent first; tickets created at the same instant keep insertion
    order. ``total`` counts every match regardless of paging.
    """
    filters = filters or TicketFilter()
    pagination = pagination or Pagination()

    query = (
        _filtered(select(Ticket), filters)
        .order_by(col(Ticket.created_at).desc(), col(Ticket.id).asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    count_query = _filtered(select(func.count()).select_from(Ticket), filters)

    with _store_errors(session, "fetch tickets"):
        tickets = session.exec(query).all()
        total = session.exec(count_query).one()
        items = [to_ticket_out(t) for t in tickets]

    return TicketPage(
        tickets=items,
        pagination=PageInfo(
            page=pagination.page,
            limit=pagination.limit,
            total=total,
            total_pages=math.ceil(total / pagination.limit),
        ),
    )


def get_ticket(session: Session, ticket_id: int) -> TicketOut:
    with _store_errors(session, "fetch ticket"):
        return to_ticket_out(_get_or_404(session, ticket_id))


def list_categories(session: Session) -> list[CategoryOut]:
    """All categories, alphabetically."""
    with _store_errors(session, "fetch categories"):
        categories = session.exec(select(Category).order_by(col(Category.name))).all()
    return [CategoryOut(id=c.id, name=c.name, description=c.description) for c in categories]  # type: ignore[arg-type]


def ticket_stats(session: Session) -> TicketStats:
    """Total ticket count and per-category counts (empty categories included)."""
    with _store_errors(session, "fetch ticket stats"):
        total = session.exec(select(func.count(col(Ticket.id)))).one()
        rows = session.exec(
            select(Category.name, func.count(col(Ticket.id)))
            .select_from(Category)
            .outerjoin(Ticket, col(Ticket.category_id) == col(Category.id))
            .group_by(Category.name)
        ).all()
    return TicketStats(total_tickets=total, by_category={name: count for name, count in rows})


def export_tickets_csv(session: Session, filters: TicketFilter | None = None) -> str:
    """Every ticket matching ``filters`` as CSV text, in list order."""
    filters = filters or TicketFilter()
    query = _filtered(select(Ticket), filters).order_by(
        col(Ticket.created_at).desc(), col(Ticket.id).asc()
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    with _store_errors(session, "export tickets"):
        for ticket in session.exec(query).all():
            out = to_ticket_out(ticket)
            writer.writerow([
                out.id,
                out.title,
                out.description,
                out.summary or "",
                out.category.name,
                out.user.username,
                out.created_at,
                out.updated_at,
            ])
    return buffer.getvalue()


# ── Commands ──────────────────────────────────────────────────────────
def create_ticket(session: Session, data: TicketCreate) -> TicketOut:
    """Validates and persists a new ticket."""
    missing = [
        name
        for name in ("title", "description", "category_id", "user_id")
        if not getattr(data, name)
    ]
    if missing:
        raise ValidationError("Missing required fields: " + ", ".join(missing))

    with _store_errors(session, "create ticket"):
        if session.get(Category, data.category_id) is None:
            raise NotFoundError("Category not found")
        if session.get(User, data.user_id) is None:
            raise NotFoundError("User not found")

        ticket = Ticket(
            title=data.title,  # type: ignore[arg-type]
            description=data.description,  # type: ignore[arg-type]
            summary=data.summary,
            category_id=data.category_id,  # type: ignore[arg-type]
            user_id=data.user_id,  # type: ignore[arg-type]
        )
        session.add(ticket)
        session.commit()
        session.refresh(ticket)
        logger.info("Ticket %s created", ticket.id)
        return to_ticket_out(ticket)


def update_ticket(session: Session, ticket_id: int, patch: TicketUpdate) -> TicketOut:
    """
    Applies a partial update.

    Empty ``title``, ``description`` and ``category_id`` are ignored and keep
    the stored value; ``summary`` is applied whenever it is sent, so an empty
    string clears it.
    """
    with _store_errors(session, "update ticket"):
        ticket = _get_or_404(session, ticket_id)
        if patch.category_id and session.get(Category, patch.category_id) is None:
            raise NotFoundError("Category not found")

        if patch.title:
            ticket.title = patch.title
        if patch.description:
            ticket.description = patch.description
        if "summary" in patch.model_fields_set:
            ticket.summary = patch.summary
        if patch.category_id:
            ticket.category_id = patch.category_id

        ticket.updated_at = _advance(ticket.updated_at)
        session.add(ticket)
        session.commit()
        session.refresh(ticket)
        logger.info("Ticket %s updated", ticket.id)
        return to_ticket_out(ticket)


def delete_ticket(session: Session, ticket_id: int) -> None:
    """Hard-deletes a ticket."""
    with _store_errors(session, "delete ticket"):
        ticket = _get_or_404(session, ticket_id)
        session.delete(ticket)
        session.commit()
    logger.info("Ticket %s deleted", ticket_id)
