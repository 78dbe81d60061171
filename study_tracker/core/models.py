"""
Data models for the Study Tracker
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from .errors import InvalidInputError

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
MIN_QUALITY = 0
MAX_QUALITY = 5


class Activity(Enum):
    """Kinds of study activity, in display order"""

    SPEAKING = "Speaking"
    LISTENING = "Listening"
    VOCAB = "Vocab"
    GRAMMAR = "Grammar"
    WRITING = "Writing"
    READING = "Reading"
    REVIEW = "Review"

    @classmethod
    def parse(cls, value: "Activity | str") -> "Activity":
        """Convert a member, its value or its name (any case) to an Activity"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for activity in cls:
                if key in (activity.value.lower(), activity.name.lower()):
                    return activity
        raise InvalidInputError(f"Unknown activity: {value!r}")


def new_id() -> str:
    """Generate a unique identifier for cards and sessions"""
    return uuid.uuid4().hex


def as_day(value: date) -> date:
    """Drop the time-of-day component, keeping day granularity"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidInputError(f"Expected a date, got {value!r}")


def ensure_quality(value: Any) -> int:
    """Return a review quality as int, rejecting anything outside 0..5"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"Quality must be an integer, got {value!r}")
    if value < MIN_QUALITY or value > MAX_QUALITY:
        raise InvalidInputError(
            f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {value}"
        )
    return value


def ensure_minutes(value: Any) -> float:
    """Return a positive, finite minute count"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Minutes must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"Minutes must be positive, got {value}")
    return value


@dataclass(frozen=True)
class VocabCard:
    """Vocabulary card with its scheduling state"""

    id: str
    front: str
    back: str
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 1
    due: date = field(default_factory=date.today)
    repetitions: int = 0
    last_reviewed: date | None = None
    created: date | None = None

    def __post_init__(self):
        if not self.id:
            raise InvalidInputError("Card id must not be empty")
        if not isinstance(self.front, str) or not self.front.strip():
            raise InvalidInputError("Card front must not be blank")
        if not isinstance(self.back, str) or not self.back.strip():
            raise InvalidInputError("Card back must not be blank")
        if isinstance(self.ease_factor, bool) or not isinstance(
            self.ease_factor, (int, float)
        ):
            raise InvalidInputError(f"Invalid ease factor: {self.ease_factor!r}")
        if self.ease_factor < MIN_EASE_FACTOR:
            raise InvalidInputError(
                f"Ease factor must be at least {MIN_EASE_FACTOR}, got {self.ease_factor}"
            )
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise InvalidInputError(f"Interval must be an integer, got {self.interval!r}")
        if self.interval < 1:
            raise InvalidInputError(f"Interval must be at least 1, got {self.interval}")
        if self.repetitions < 0:
            raise InvalidInputError(f"Repetitions must not be negative, got {self.repetitions}")

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "due", as_day(self.due))
        if self.last_reviewed is not None:
            object.__setattr__(self, "last_reviewed", as_day(self.last_reviewed))
        if self.created is not None:
            object.__setattr__(self, "created", as_day(self.created))

    def is_due(self, today: date) -> bool:
        """Check if the card is eligible for review on the given day"""
        return self.due <= as_day(today)


@dataclass(frozen=True)
class StudySession:
    """Completed study session, one entry of the study log"""

    id: str
    date: date
    minutes: float
    activity: Activity
    notes: str | None = None

    def __post_init__(self):
        if not self.id:
            raise InvalidInputError("Session id must not be empty")
        object.__setattr__(self, "date", as_day(self.date))
        object.__setattr__(self, "minutes", ensure_minutes(self.minutes))
        object.__setattr__(self, "activity", Activity.parse(self.activity))
        if self.notes is not None and not isinstance(self.notes, str):
            raise InvalidInputError(f"Notes must be text, got {self.notes!r}")


@dataclass
class AppState:
    """Complete application state owned by the coordinator"""

    cards: dict[str, VocabCard] = field(default_factory=dict)
    sessions: list[StudySession] = field(default_factory=list)
    extras: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> "AppState":
        """Shallow copy; cards and sessions are immutable values"""
        return AppState(
            cards=dict(self.cards),
            sessions=list(self.sessions),
            extras=dict(self.extras),
        )
