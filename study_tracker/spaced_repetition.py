"""
Spaced Repetition System implementation using SuperMemo 2 algorithm
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta

from .config import Settings, get_settings
from .core.models import VocabCard, as_day, ensure_quality

logger = logging.getLogger(__name__)

# Reviews below this quality count as a failed recall
PASSING_QUALITY = 3


@dataclass
class ReviewResult:
    """Result of a spaced repetition review"""

    new_interval: int
    new_easiness_factor: float
    next_review_date: date
    is_graduated: bool = False  # Card has moved beyond the first graduation step


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(math.floor(value + 0.5))


class SpacedRepetitionSystem:
    """SuperMemo 2 spaced repetition algorithm implementation"""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.default_easiness = settings.default_easiness_factor
        self.min_easiness = settings.min_easiness_factor

    def calculate_review(
        self,
        quality: int,
        interval_days: int,
        easiness_factor: float,
        review_date: date | None = None,
    ) -> ReviewResult:
        """
        Calculate next review based on SuperMemo 2 algorithm

        Args:
            quality: Recall quality (0=total failure ... 5=perfect recall)
            interval_days: Current interval in days
            easiness_factor: Current easiness factor
            review_date: Day of review (defaults to today)

        Returns:
            ReviewResult with new parameters
        """
        quality = ensure_quality(quality)
        review_date = as_day(review_date) if review_date is not None else date.today()

        logger.debug(
            f"Calculating review: quality={quality}, "
            f"interval={interval_days}, ef={easiness_factor}"
        )

        new_easiness = self._calculate_new_easiness(quality, easiness_factor)
        new_interval = self._calculate_new_interval(quality, interval_days, new_easiness)

        result = ReviewResult(
            new_interval=new_interval,
            new_easiness_factor=new_easiness,
            next_review_date=review_date + timedelta(days=new_interval),
            is_graduated=new_interval > 2,
        )

        logger.debug(
            f"Review result: interval={result.new_interval}, "
            f"ef={result.new_easiness_factor}, next={result.next_review_date}"
        )

        return result

    def schedule(
        self, card: VocabCard, quality: int, today: date | None = None
    ) -> VocabCard:
        """Return the card's next state after one review; the input card is untouched"""
        today = as_day(today) if today is not None else date.today()
        result = self.calculate_review(
            quality, card.interval, card.ease_factor, review_date=today
        )
        return replace(
            card,
            ease_factor=result.new_easiness_factor,
            interval=result.new_interval,
            due=result.next_review_date,
            repetitions=card.repetitions + 1,
            last_reviewed=today,
        )

    def _calculate_new_easiness(self, quality: int, current_easiness: float) -> float:
        """Calculate new easiness factor based on quality"""
        miss = 5 - quality
        new_easiness = current_easiness + (0.1 - miss * (0.08 + miss * 0.02))
        return max(self.min_easiness, new_easiness)

    def _calculate_new_interval(
        self, quality: int, current_interval: int, easiness_factor: float
    ) -> int:
        """Calculate new interval based on SuperMemo 2 algorithm"""
        if quality < PASSING_QUALITY:
            # Forgotten: start spacing over
            return 1

        if current_interval == 1:
            # First successful graduation
            return 2

        return max(1, round_half_up(current_interval * easiness_factor))

    def new_card(
        self, card_id: str, front: str, back: str, today: date | None = None
    ) -> VocabCard:
        """Create a card with the initial review schedule"""
        today = as_day(today) if today is not None else date.today()
        return VocabCard(
            id=card_id,
            front=front,
            back=back,
            ease_factor=self.default_easiness,
            interval=1,
            due=today,
            created=today,
        )


# Global instance
_srs_system = None


def get_srs_system() -> SpacedRepetitionSystem:
    """Get global SRS system instance"""
    global _srs_system
    if _srs_system is None:
        _srs_system = SpacedRepetitionSystem()
    return _srs_system


def schedule(card: VocabCard, quality: int, today: date | None = None) -> VocabCard:
    """Convenience function to apply one review to a card"""
    return get_srs_system().schedule(card, quality, today)
