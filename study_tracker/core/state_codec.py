"""
Export and import of the full application state as a plain document
"""

import json
import logging
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ImportFormatError, InvalidInputError
from .models import Activity, AppState, StudySession, VocabCard

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class CardDocument(BaseModel):
    """Serialized vocabulary card"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    front: str
    back: str
    ease_factor: float = Field(ge=1.3)
    interval: int = Field(ge=1)
    due: date
    repetitions: int = Field(default=0, ge=0)
    last_reviewed: date | None = None
    created: date | None = None


class SessionDocument(BaseModel):
    """Serialized study session"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    date: date
    minutes: float = Field(gt=0)
    activity: Activity
    notes: str | None = None

    @field_validator("activity", mode="before")
    @classmethod
    def parse_activity(cls, value: Any) -> Activity:
        """Accept the same activity spellings as a logged session"""
        return Activity.parse(value)


class StateDocument(BaseModel):
    """Top-level export document"""

    model_config = ConfigDict(extra="ignore")

    cards: list[CardDocument] = Field(default_factory=list)
    sessions: list[SessionDocument] = Field(default_factory=list)
    extras: dict[str, Any] = Field(default_factory=dict)


def export_state(state: AppState) -> dict[str, Any]:
    """Serialize state into a JSON-compatible document"""
    cards = [
        CardDocument(
            id=card.id,
            front=card.front,
            back=card.back,
            ease_factor=card.ease_factor,
            interval=card.interval,
            due=card.due,
            repetitions=card.repetitions,
            last_reviewed=card.last_reviewed,
            created=card.created,
        ).model_dump(mode="json")
        for card in state.cards.values()
    ]
    sessions = [
        SessionDocument(
            id=session.id,
            date=session.date,
            minutes=session.minutes,
            activity=session.activity,
            notes=session.notes,
        ).model_dump(mode="json")
        for session in state.sessions
    ]

    return {
        "export_info": {
            "exported_at": datetime.now().isoformat(),
            "format_version": FORMAT_VERSION,
        },
        "cards": cards,
        "sessions": sessions,
        "extras": dict(state.extras),
        "statistics": {
            "total_cards": len(cards),
            "total_sessions": len(sessions),
        },
    }


def import_state(document: dict[str, Any] | str | bytes) -> AppState:
    """
    Build a new AppState from an exported document

    Accepts the parsed document or its JSON text. Any structural problem,
    invalid value or duplicate id raises ImportFormatError; nothing is
    partially applied because a fresh state is returned.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ImportFormatError(f"Document is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ImportFormatError(
            f"Document must be an object, got {type(document).__name__}"
        )

    try:
        parsed = StateDocument.model_validate(document)
    except ValidationError as e:
        raise ImportFormatError(f"Invalid state document: {e}") from e

    try:
        cards: dict[str, VocabCard] = {}
        for item in parsed.cards:
            if item.id in cards:
                raise ImportFormatError(f"Duplicate card id: {item.id}")
            cards[item.id] = VocabCard(**item.model_dump())

        sessions: list[StudySession] = []
        session_ids: set[str] = set()
        for item in parsed.sessions:
            if item.id in session_ids:
                raise ImportFormatError(f"Duplicate session id: {item.id}")
            session_ids.add(item.id)
            sessions.append(StudySession(**item.model_dump()))
    except InvalidInputError as e:
        raise ImportFormatError(f"Invalid state document: {e}") from e

    logger.info(f"Parsed state document: {len(cards)} cards, {len(sessions)} sessions")
    return AppState(cards=cards, sessions=sessions, extras=dict(parsed.extras))
