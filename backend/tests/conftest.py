"""
Shared pytest fixtures.

Every test gets its own in-memory SQLite database; the API client is wired
to it through a ``get_session`` dependency override.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine, select

from backend.app.db import create_db_and_tables, get_session
from backend.app.main import app
from backend.app.models import Category, Ticket, User
from backend.app.seed import seed


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def seeded(session):
    """Database holding the reference categories, users and sample tickets"""
    seed(session)
    return session


@pytest.fixture
def client(engine):
    def _override_session():
        with Session(engine) as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_ticket(session):
    """Factory inserting a ticket (and its category/user) directly"""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _get_category(name):
        category = session.exec(select(Category).where(Category.name == name)).first()
        if category is None:
            category = Category(name=name)
            session.add(category)
            session.commit()
        return category

    def _get_user(username):
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            user = User(username=username)
            session.add(user)
            session.commit()
        return user

    def _make(
        title="Sample ticket",
        description="Sample description",
        summary=None,
        category="Support",
        username="admin",
        minutes=0,
    ):
        ticket = Ticket(
            title=title,
            description=description,
            summary=summary,
            category_id=_get_category(category).id,
            user_id=_get_user(username).id,
            created_at=base + timedelta(minutes=minutes),
            updated_at=base + timedelta(minutes=minutes),
        )
        session.add(ticket)
        session.commit()
        session.refresh(ticket)
        return ticket

    return _make
