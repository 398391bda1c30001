"""SQLModel data models."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Category ──────────────────────────────────────────────────────────
class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    description: Optional[str] = Field(default=None)

    tickets: List["Ticket"] = Relationship(
        back_populates="category",
        # the foreign key blocks deletes while tickets exist
        sa_relationship_kwargs={"passive_deletes": "all"},
    )


# ── User ──────────────────────────────────────────────────────────────
class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=64, unique=True, index=True)

    tickets: List["Ticket"] = Relationship(
        back_populates="user",
        # the foreign key blocks deletes while tickets exist
        sa_relationship_kwargs={"passive_deletes": "all"},
    )


# ── Ticket ────────────────────────────────────────────────────────────
class Ticket(SQLModel, table=True):
    __tablename__ = "tickets"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    summary: Optional[str] = Field(default=None)
    category_id: int = Field(foreign_key="categories.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_now, index=True)
    updated_at: datetime = Field(default_factory=_now)

    category: Optional[Category] = Relationship(back_populates="tickets")
    user: Optional[User] = Relationship(back_populates="tickets")
