"""
Utility functions for the Study Tracker
"""

import logging
import re
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from .analytics import Dashboard
from .core.models import MAX_QUALITY, MIN_QUALITY, VocabCard

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"[\w']+", re.UNICODE)


def today_in_timezone(timezone: str = "UTC") -> date:
    """Current calendar day in the given IANA time zone"""
    return datetime.now(ZoneInfo(timezone)).date()


def validate_quality(quality: int | str) -> int | None:
    """Validate and convert a quality value coming from user input"""
    if isinstance(quality, bool):
        return None
    try:
        quality_int = int(quality)
        if MIN_QUALITY <= quality_int <= MAX_QUALITY:
            return quality_int
    except (ValueError, TypeError):
        pass

    return None


def safe_float(value: Any, default: float = 0.0) -> float:
    """Safely convert value to float"""
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def parse_date_safely(date_str: str) -> date | None:
    """Safely parse date string"""
    if not date_str:
        return None

    try:
        # Try ISO format first
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        pass

    # Try other common formats
    formats = ["%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y"]
    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    logger.warning(f"Failed to parse date: {date_str}")
    return None


def format_date_relative(target_date: date, today: date) -> str:
    """Format date relative to today"""
    delta = (target_date - today).days

    if delta == 0:
        return "today"
    elif delta == 1:
        return "tomorrow"
    elif delta == -1:
        return "yesterday"
    elif delta > 0:
        return f"in {delta} days"
    else:
        return f"{abs(delta)} days ago"


def format_duration(minutes: float) -> str:
    """Format a number of minutes in human-readable format"""
    total = int(round(minutes))
    if total < 60:
        return f"{total}m"
    hours, rest = divmod(total, 60)
    return f"{hours}h {rest}m" if rest else f"{hours}h"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length"""
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def get_difficulty_level(easiness_factor: float) -> str:
    """Get difficulty level description"""
    if easiness_factor >= 2.5:
        return "Easy"
    elif easiness_factor >= 2.0:
        return "Medium"
    elif easiness_factor >= 1.5:
        return "Hard"
    else:
        return "Very hard"


def tokenize(text: str) -> set[str]:
    """Lowercase word tokens of a text"""
    if not text:
        return set()
    return set(WORD_PATTERN.findall(text.lower()))


def word_overlap(recognized: str, reference: str) -> float:
    """
    Coarse similarity between a recognized utterance and its prompt

    Intersection over union of the lowercase word sets. This is a heuristic
    signal only, not a pronunciation score.
    """
    said = tokenize(recognized)
    expected = tokenize(reference)
    if not said and not expected:
        return 0.0
    return len(said & expected) / len(said | expected)


def quality_from_overlap(score: float) -> int:
    """Map an overlap score in [0, 1] to a review quality 0..5"""
    score = min(1.0, max(0.0, safe_float(score)))
    return int(score * MAX_QUALITY + 0.5)


def format_card(card: VocabCard, today: date) -> str:
    """Format a card for terminal display"""
    due = format_date_relative(card.due, today)
    return (
        f"{truncate_text(card.front, 30)} -> {truncate_text(card.back, 30)} "
        f"(due {due}, every {card.interval}d, {get_difficulty_level(card.ease_factor)})"
    )


def format_dashboard(dashboard: Dashboard) -> str:
    """Format analytics views for terminal display"""
    weekly = dashboard.weekly
    last_week = dashboard.rolling[-7:]

    result = f"📊 Study statistics for {dashboard.today.isoformat()}\n\n"
    result += f"🔥 Current streak: {dashboard.streaks.current} days\n"
    result += f"🏆 Best streak: {dashboard.streaks.best} days\n"
    result += (
        f"🎯 This week: {format_duration(weekly.minutes)} of "
        f"{format_duration(weekly.goal_minutes)} ({weekly.percent}%)\n"
    )
    result += (
        f"📅 Last {len(last_week)} days: "
        f"{format_duration(sum(day.minutes for day in last_week))}\n"
    )

    active = [
        f"{activity.value} {format_duration(minutes)}"
        for activity, minutes in dashboard.breakdown.items()
        if minutes
    ]
    if active:
        result += f"🗂️ {', '.join(active)}\n"

    return result.strip()
