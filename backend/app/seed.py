"""
Reference data and sample tickets.

Run directly:
    python -m backend.app.seed
"""

from __future__ import annotations

import logging

from sqlmodel import Session, col, func, select

from backend.app.db import create_db_and_tables, engine
from backend.app.models import Category, Ticket, User

logger = logging.getLogger("ticket_assistant.seed")

# ── Categories ────────────────────────────────────────────────────────
CATEGORIES: dict[str, str] = {
    "Hotel": "Hotel-related tickets",
    "Restaurant": "Restaurant-related tickets",
    "Campaign": "Campaign-related tickets",
    "Critical": "Critical issues requiring immediate attention",
    "Feature Request": "New feature requests",
    "Performance": "Performance-related issues",
    "Security": "Security-related issues",
    "UI/UX": "User interface and experience issues",
    "Support": "General support requests",
}

USERNAMES: list[str] = ["admin", "user1", "user2"]

# (title, description, summary, category, username)
SAMPLE_TICKETS: list[tuple[str, str, str, str, str]] = [
    (
        "Bug Report: Login Issue",
        "Users are unable to log in to the system after entering correct credentials. "
        "This issue affects all user types and occurs across different browsers. "
        "The login form accepts the credentials but fails to authenticate properly.",
        "Critical login functionality broken for all users",
        "Critical",
        "admin",
    ),
    (
        "Feature Request: Dark Mode",
        "Add dark mode theme option for better user experience in low-light environments. "
        "This should include a toggle in the user settings and remember the user's "
        "preference across sessions.",
        "Request for dark theme implementation",
        "Feature Request",
        "user1",
    ),
    (
        "Performance Issue: Slow Loading",
        "Dashboard takes more than 10 seconds to load on mobile devices. The issue is "
        "particularly noticeable on slower network connections and older devices. "
        "Initial page load and subsequent navigation are both affected.",
        "Mobile dashboard performance degradation",
        "Performance",
        "user2",
    ),
    (
        "Security Vulnerability: XSS",
        "Cross-site scripting vulnerability found in comment section. Users can inject "
        "malicious scripts through the comment form. This poses a significant security "
        "risk and needs immediate attention.",
        "Critical security issue requiring immediate attention",
        "Security",
        "admin",
    ),
    (
        "UI Bug: Button Alignment",
        "Submit button is misaligned on the contact form page. The button appears to be "
        "shifted to the right and doesn't align properly with the form fields. This "
        "affects the visual consistency of the interface.",
        "Minor UI alignment issue",
        "UI/UX",
        "user1",
    ),
    (
        "Database Connection Error",
        "Application cannot connect to the database server. This is causing complete "
        "system downtime and preventing all database operations. Error logs indicate "
        "connection timeout issues.",
        "Database connectivity issue affecting all operations",
        "Critical",
        "user2",
    ),
    (
        "Email Notification Failure",
        "Email notifications are not being sent to users. The email service appears to "
        "be down or misconfigured. Users are not receiving important system "
        "notifications and updates.",
        "Email service disruption",
        "Support",
        "admin",
    ),
    (
        "Mobile Responsiveness Issue",
        "Website layout breaks on mobile devices with screen width less than 768px. "
        "Elements are overlapping, text is unreadable, and navigation becomes unusable "
        "on smaller screens.",
        "Mobile responsive design problem",
        "UI/UX",
        "user1",
    ),
    (
        "API Rate Limiting",
        "API endpoints are hitting rate limits too frequently. This is causing "
        "intermittent failures for users making multiple requests. The current rate "
        "limiting configuration appears to be too restrictive.",
        "API performance optimization needed",
        "Performance",
        "user2",
    ),
    (
        "User Permission Error",
        "Users cannot access features they should have permission for. The permission "
        "system is incorrectly denying access to authorized users. This affects user "
        "productivity and system usability.",
        "Permission system malfunction",
        "Security",
        "admin",
    ),
]


def seed(session: Session) -> dict[str, int]:
    """
    Upserts categories and users; adds sample tickets only to an empty table.

    Safe to run repeatedly. Returns how many rows of each kind were created.
    """
    created = {"categories": 0, "users": 0, "tickets": 0}

    categories: dict[str, Category] = {}
    for name, description in CATEGORIES.items():
        category = session.exec(select(Category).where(Category.name == name)).first()
        if category is None:
            category = Category(name=name, description=description)
            session.add(category)
            created["categories"] += 1
        categories[name] = category

    users: dict[str, User] = {}
    for username in USERNAMES:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            user = User(username=username)
            session.add(user)
            created["users"] += 1
        users[username] = user

    session.commit()

    existing = session.exec(select(func.count(col(Ticket.id)))).one()
    if not existing:
        for title, description, summary, category, username in SAMPLE_TICKETS:
            session.add(
                Ticket(
                    title=title,
                    description=description,
                    summary=summary,
                    category_id=categories[category].id,  # type: ignore[arg-type]
                    user_id=users[username].id,  # type: ignore[arg-type]
                )
            )
            created["tickets"] += 1
        session.commit()

    logger.info(
        "Seed complete: %d categories, %d users, %d tickets created",
        created["categories"],
        created["users"],
        created["tickets"],
    )
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as db_session:
        seed(db_session)
