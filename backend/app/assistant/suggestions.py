"""
Suggestion tables offered by the ticket assistant.

The assistant does not generate text yet: every step offers the same four
options whatever the user typed. ``SuggestionProvider`` is the seam where a
generating backend can be plugged into ``DialogueEngine`` later.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from backend.app.assistant.dialogue import Draft

# ── Static tables ─────────────────────────────────────────────────────
TITLE_SUGGESTIONS: list[str] = [
    "Bug Fix Request",
    "Feature Enhancement",
    "Performance Issue",
    "User Experience Improvement",
]

CATEGORY_SUGGESTIONS: list[str] = [
    "Frontend",
    "Backend",
    "Database",
    "Infrastructure",
]

DESCRIPTION_SUGGESTIONS: list[str] = [
    "Fix login authentication issue affecting users in the mobile app during peak hours",
    "Resolve database connection timeout that occurs when processing large datasets",
    "Update user interface to improve accessibility for users with visual impairments",
    "Optimize API response time for search functionality in the web application",
]

SUMMARY_SUGGESTIONS: list[str] = [
    "This ticket addresses a critical authentication issue in the mobile app "
    "that affects user experience during peak usage hours.",
    "The ticket focuses on resolving database performance issues that impact "
    "system reliability when handling large data volumes.",
    "This enhancement improves accessibility compliance and user experience "
    "for users with visual impairments.",
    "The optimization targets API performance to enhance search functionality "
    "and overall application responsiveness.",
]


class SuggestionProvider(Protocol):
    """Supplies the options shown at each suggesting step of the dialogue."""

    def titles(self, draft: Draft) -> list[str]: ...

    def categories(self, draft: Draft) -> list[str]: ...

    def descriptions(self, draft: Draft, text: str) -> list[str]: ...

    def summaries(self, draft: Draft) -> list[str]: ...


class StaticSuggestionProvider:
    """Returns the fixed tables above, ignoring the draft."""

    def titles(self, draft: Draft) -> list[str]:
        return list(TITLE_SUGGESTIONS)

    def categories(self, draft: Draft) -> list[str]:
        return list(CATEGORY_SUGGESTIONS)

    def descriptions(self, draft: Draft, text: str) -> list[str]:
        return list(DESCRIPTION_SUGGESTIONS)

    def summaries(self, draft: Draft) -> list[str]:
        return list(SUMMARY_SUGGESTIONS)
