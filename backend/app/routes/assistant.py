"""Ticket assistant endpoints.

The client owns the dialogue session and sends it back with every call.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from backend.app.assistant.dialogue import DialogueSession, DialogueTurn, dialogue_engine

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


# ── Request schemas ───────────────────────────────────────────────────
class AssistantMessageRequest(BaseModel):
    session: DialogueSession = Field(default_factory=DialogueSession)
    text: str = Field("", max_length=2000)


class PreviewEditRequest(BaseModel):
    session: DialogueSession
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)


@router.post("/message", response_model=DialogueTurn)
def send_message(body: AssistantMessageRequest) -> DialogueTurn:
    """Advances the dialogue by one step. Any text is accepted, even empty."""
    return dialogue_engine.advance(body.session, body.text)


@router.post("/preview", response_model=DialogueTurn)
def edit_preview(body: PreviewEditRequest) -> DialogueTurn:
    """Applies a title/description edit made in the preview pane."""
    return dialogue_engine.edit_preview(body.session, title=body.title, description=body.description)
