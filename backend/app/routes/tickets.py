"""Ticket management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from backend.app.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from backend.app.db import get_session
from backend.app.services.tickets import (
    Pagination,
    TicketCreate,
    TicketFilter,
    TicketOut,
    TicketPage,
    TicketStats,
    TicketUpdate,
    create_ticket,
    delete_ticket,
    export_tickets_csv,
    get_ticket,
    list_tickets,
    ticket_stats,
    update_ticket,
)

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


# ── Listing ───────────────────────────────────────────────────────────
@router.get("", response_model=TicketPage)
def list_tickets_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str = Query("", max_length=200),
    category: str = Query(""),
    session: Session = Depends(get_session),
) -> TicketPage:
    """
    Lists tickets, most recent first.

    ``search`` matches title, description or summary case-insensitively;
    ``category`` is an exact category name, "All" or empty for every category.
    """
    return list_tickets(
        session,
        TicketFilter(search=search, category=category),
        Pagination(page=page, limit=limit),
    )


@router.get("/export")
def export_tickets_endpoint(
    search: str = Query("", max_length=200),
    category: str = Query(""),
    session: Session = Depends(get_session),
) -> Response:
    """Every matching ticket as a CSV download."""
    body = export_tickets_csv(session, TicketFilter(search=search, category=category))
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="tickets.csv"'},
    )


@router.get("/stats", response_model=TicketStats)
def ticket_stats_endpoint(session: Session = Depends(get_session)) -> TicketStats:
    """Total tickets and their distribution over categories."""
    return ticket_stats(session)


# ── Single ticket ─────────────────────────────────────────────────────
@router.post("", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
def create_ticket_endpoint(
    body: TicketCreate,
    session: Session = Depends(get_session),
) -> TicketOut:
    return create_ticket(session, body)


@router.get("/{ticket_id}", response_model=TicketOut)
def get_ticket_endpoint(ticket_id: int, session: Session = Depends(get_session)) -> TicketOut:
    return get_ticket(session, ticket_id)


@router.put("/{ticket_id}", response_model=TicketOut)
def update_ticket_endpoint(
    ticket_id: int,
    body: TicketUpdate,
    session: Session = Depends(get_session),
) -> TicketOut:
    """Partial update: empty title/description/category_id are ignored, summary may be cleared."""
    return update_ticket(session, ticket_id, body)


@router.delete("/{ticket_id}")
def delete_ticket_endpoint(ticket_id: int, session: Session = Depends(get_session)) -> dict:
    delete_ticket(session, ticket_id)
    return {"message": "Ticket deleted successfully"}
