"""
Guided ticket-drafting dialogue.

The assistant walks the user through a fixed sequence of questions:

    0  anything          -> ask for the purpose
    1  purpose           -> offer titles
    2  title             -> offer categories
    3  category          -> ask for a description
    4  raw description   -> offer enhanced descriptions
    5  description       -> offer summaries
    6  summary           -> confirm
    7  (finished)

Each user message moves the dialogue exactly one step forward; nothing is
validated and nothing is persisted. Sessions travel with the request, the
engine keeps no state of its own.
"""

from __future__ import annotations

import logging
from typing import Callable, Literal, Optional

from pydantic import BaseModel, Field

from backend.app.assistant.categories import DEFAULT_CATEGORIES, related_categories
from backend.app.assistant.suggestions import StaticSuggestionProvider, SuggestionProvider

logger = logging.getLogger("ticket_assistant.assistant")

FINAL_STEP = 7

# ── Prompts ───────────────────────────────────────────────────────────
PURPOSE_PROMPT = "What is the purpose of this ticket?"
TITLES_PROMPT = "Based on your purpose, here are 4 suggested ticket titles:"
CATEGORIES_PROMPT = "Great choice! Here are 4 suggested categories:"
DESCRIPTION_PROMPT = "Please provide a brief description (when, whom, where, what, etc.)"
DESCRIPTIONS_PROMPT = "Here are 4 enhanced descriptions based on your input:"
SUMMARIES_PROMPT = "Based on your selections, here are 4 summary options:"
DONE_PROMPT = (
    "Perfect! Your ticket has been created successfully. "
    "Here's a summary of what we've accomplished:"
)


# ── Session state ─────────────────────────────────────────────────────
class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    suggestions: Optional[list[str]] = None


class Draft(BaseModel):
    purpose: str = ""
    selected_title: str = ""
    selected_category: str = ""
    selected_description: str = ""
    summary: str = ""


class DialogueSession(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    step: int = Field(0, ge=0, le=FINAL_STEP)
    draft: Draft = Field(default_factory=Draft)

    @property
    def finished(self) -> bool:
        return self.step >= FINAL_STEP


class Preview(BaseModel):
    title_suggestions: list[str]
    description: str
    summary: str
    related_categories: list[str]


class DialogueTurn(BaseModel):
    session: DialogueSession
    preview: Preview


def build_preview(draft: Draft) -> Preview:
    """Ticket preview derived from the draft accumulated so far."""
    title = draft.selected_title
    return Preview(
        title_suggestions=[title] if title else [],
        description=draft.selected_description or "",
        summary=draft.summary or "",
        related_categories=related_categories(title) if title else list(DEFAULT_CATEGORIES),
    )


# ── Engine ────────────────────────────────────────────────────────────
_Reply = tuple[str, Optional[list[str]]]


class DialogueEngine:
    """Step-driven state machine over ``DialogueSession``."""

    def __init__(self, provider: SuggestionProvider | None = None) -> None:
        self._provider: SuggestionProvider = provider or StaticSuggestionProvider()
        self._handlers: dict[int, Callable[[Draft, str], _Reply]] = {
            0: self._ask_purpose,
            1: self._offer_titles,
            2: self._offer_categories,
            3: self._ask_description,
            4: self._offer_descriptions,
            5: self._offer_summaries,
            6: self._confirm,
        }

    def advance(self, session: DialogueSession, text: str) -> DialogueTurn:
        """
        Consumes one user message and returns the next session and preview.

        The incoming session is left untouched. Once finished, messages are
        still recorded but get no reply.
        """
        session = session.model_copy(deep=True)
        session.messages.append(ChatMessage(role="user", content=text))

        handler = self._handlers.get(session.step)
        if handler is None:
            logger.debug("Dialogue already finished; message recorded without reply")
            return DialogueTurn(session=session, preview=build_preview(session.draft))

        prompt, suggestions = handler(session.draft, text)
        session.messages.append(
            ChatMessage(role="assistant", content=prompt, suggestions=suggestions)
        )
        session.step += 1
        logger.debug("Dialogue advanced to step %d", session.step)
        return DialogueTurn(session=session, preview=build_preview(session.draft))

    def edit_preview(
        self,
        session: DialogueSession,
        title: str | None = None,
        description: str | None = None,
    ) -> DialogueTurn:
        """Overwrites the drafted title and/or description from the preview pane."""
        session = session.model_copy(deep=True)
        if title is not None:
            session.draft.selected_title = title
        if description is not None:
            session.draft.selected_description = description
        return DialogueTurn(session=session, preview=build_preview(session.draft))

    # ── Step handlers ─────────────────────────────────────────────────
    def _ask_purpose(self, draft: Draft, text: str) -> _Reply:
        draft.purpose = text
        return PURPOSE_PROMPT, None

    def _offer_titles(self, draft: Draft, text: str) -> _Reply:
        draft.purpose = text
        return TITLES_PROMPT, self._provider.titles(draft)

    def _offer_categories(self, draft: Draft, text: str) -> _Reply:
        draft.selected_title = text
        return CATEGORIES_PROMPT, self._provider.categories(draft)

    def _ask_description(self, draft: Draft, text: str) -> _Reply:
        draft.selected_category = text
        return DESCRIPTION_PROMPT, None

    def _offer_descriptions(self, draft: Draft, text: str) -> _Reply:
        # The raw description only feeds the suggestions
        return DESCRIPTIONS_PROMPT, self._provider.descriptions(draft, text)

    def _offer_summaries(self, draft: Draft, text: str) -> _Reply:
        draft.selected_description = text
        return SUMMARIES_PROMPT, self._provider.summaries(draft)

    def _confirm(self, draft: Draft, text: str) -> _Reply:
        draft.summary = text
        return DONE_PROMPT, None


# Module-level engine used by the routes
dialogue_engine = DialogueEngine()
