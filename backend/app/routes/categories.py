"""Category endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from backend.app.db import get_session
from backend.app.services.tickets import CategoryOut, list_categories

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories_endpoint(session: Session = Depends(get_session)) -> list[CategoryOut]:
    """Categories for the ticket filter and edit form, alphabetically."""
    return list_categories(session)
