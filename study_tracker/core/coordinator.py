"""
Coordinator wiring study actions to the scheduler, the log and analytics
"""

import logging
import threading
from collections.abc import Callable
from datetime import date
from typing import Any

from ..analytics import (
    AnalyticsEngine,
    Dashboard,
    DailyTotal,
    HeatmapCell,
    StreakSummary,
    WeeklyProgress,
    daily_totals,
)
from ..config import Settings, get_settings
from ..spaced_repetition import SpacedRepetitionSystem
from ..utils import today_in_timezone
from . import state_codec
from .database.state_repository import StatePersistence
from .models import (
    Activity,
    AppState,
    StudySession,
    VocabCard,
    as_day,
    ensure_minutes,
    ensure_quality,
    new_id,
)
from .store.card_store import VocabCardStore
from .store.study_log import StudyLog

logger = logging.getLogger(__name__)


class StudyCoordinator:
    """
    Owns the card store and the study log for the lifetime of the application

    Mutations (adding a card, reviewing a card, logging a session, importing)
    each replace one card, append one entry or swap the whole state, and are
    followed by a best-effort save. Reads compute analytics over a snapshot
    of the log with a single resolved "today".
    """

    def __init__(
        self,
        persistence: StatePersistence | None = None,
        settings: Settings | None = None,
        clock: Callable[[], date] | None = None,
    ):
        self.settings = settings or get_settings()
        self.persistence = persistence
        self.srs = SpacedRepetitionSystem(self.settings)
        self.analytics = AnalyticsEngine(self.settings)
        self._clock = clock or (lambda: today_in_timezone(self.settings.timezone))
        self._lock = threading.RLock()
        self._cards = VocabCardStore()
        self._log = StudyLog()
        self._extras: dict[str, Any] = {}

    # Lifecycle
    def start(self) -> None:
        """Load the persisted state, starting empty when there is none"""
        state = None
        if self.persistence is not None:
            try:
                state = self.persistence.load()
            except Exception as e:
                logger.error(f"Failed to load saved state, starting empty: {e}")

        with self._lock:
            self._apply_state(state or AppState())

        logger.info(
            f"Coordinator started with {len(self._cards)} cards "
            f"and {len(self._log)} sessions"
        )

    def reset(self) -> None:
        """Drop all cards and sessions"""
        with self._lock:
            self._apply_state(AppState())
            self._persist()
        logger.info("State reset")

    def today(self) -> date:
        """Current calendar day in the configured time zone"""
        return as_day(self._clock())

    # Mutations
    def add_card(self, front: str, back: str, today: date | None = None) -> VocabCard:
        """Add a vocabulary card due today"""
        today = self._resolve_today(today)
        card = self.srs.new_card(new_id(), front, back, today)
        with self._lock:
            self._cards.add(card)
            self._persist()
        logger.info(f"Added card {card.id}: {card.front!r}")
        return card

    def review_card(
        self, card_id: str, quality: int, today: date | None = None
    ) -> VocabCard:
        """Apply one review to a card and store its new schedule"""
        quality = ensure_quality(quality)
        today = self._resolve_today(today)
        with self._lock:
            card = self._cards.require(card_id)
            updated = self.srs.schedule(card, quality, today)
            self._cards.replace(updated)
            self._persist()

        logger.info(
            f"Reviewed card {card_id} with quality {quality}: "
            f"interval {card.interval} -> {updated.interval}, due {updated.due}"
        )
        return updated

    def add_session(
        self,
        minutes: float,
        activity: Activity | str,
        notes: str | None = None,
        day: date | None = None,
    ) -> StudySession:
        """Append a completed study session to the log"""
        session = StudySession(
            id=new_id(),
            date=self._resolve_today(day),
            minutes=ensure_minutes(minutes),
            activity=Activity.parse(activity),
            notes=notes,
        )
        with self._lock:
            self._log.append(session)
            self._persist()

        logger.info(
            f"Logged {session.minutes} min of {session.activity.value} on {session.date}"
        )
        return session

    def update_extras(self, **values: Any) -> None:
        """Store UI-owned fields alongside the state"""
        with self._lock:
            self._extras.update(values)
            self._persist()

    def import_state(self, document: dict[str, Any] | str | bytes) -> None:
        """Replace the whole state with an imported document"""
        state = state_codec.import_state(document)
        with self._lock:
            self._apply_state(state)
            self._persist()
        logger.info(
            f"Imported {len(state.cards)} cards and {len(state.sessions)} sessions"
        )

    # Reads
    def export_state(self) -> dict[str, Any]:
        """Serialize the current state verbatim"""
        return state_codec.export_state(self.snapshot())

    def snapshot(self) -> AppState:
        """Consistent copy of the current state"""
        with self._lock:
            return AppState(
                cards=self._cards.as_dict(),
                sessions=list(self._log.snapshot()),
                extras=dict(self._extras),
            )

    def get_card(self, card_id: str) -> VocabCard | None:
        with self._lock:
            return self._cards.get(card_id)

    def cards(self) -> list[VocabCard]:
        with self._lock:
            return self._cards.all()

    def due_cards(self, today: date | None = None) -> list[VocabCard]:
        today = self._resolve_today(today)
        with self._lock:
            return self._cards.due(today)

    def sessions(self) -> tuple[StudySession, ...]:
        with self._lock:
            return self._log.snapshot()

    def daily_totals(self) -> dict[date, float]:
        return daily_totals(self.sessions())

    def rolling_series(
        self, window: int | None = None, today: date | None = None
    ) -> list[DailyTotal]:
        return self.analytics.rolling_series(
            self.sessions(), self._resolve_today(today), window
        )

    def activity_breakdown(
        self, days: int | None = None, today: date | None = None
    ) -> dict[Activity, float]:
        return self.analytics.activity_breakdown(
            self.sessions(), self._resolve_today(today), days
        )

    def streaks(self, today: date | None = None) -> StreakSummary:
        return self.analytics.streaks(self.sessions(), self._resolve_today(today))

    def weekly_progress(
        self, goal_minutes: float | None = None, today: date | None = None
    ) -> WeeklyProgress:
        return self.analytics.weekly_progress(
            self.sessions(), self._resolve_today(today), goal_minutes
        )

    def heatmap(
        self, weeks: int | None = None, today: date | None = None
    ) -> list[list[HeatmapCell]]:
        return self.analytics.heatmap(self.sessions(), self._resolve_today(today), weeks)

    def dashboard(self, today: date | None = None) -> Dashboard:
        return self.analytics.dashboard(self.sessions(), self._resolve_today(today))

    # Internals
    def _resolve_today(self, today: date | None) -> date:
        return as_day(today) if today is not None else self.today()

    def _apply_state(self, state: AppState) -> None:
        cards = VocabCardStore(state.cards.values())
        log = StudyLog(state.sessions)
        self._cards = cards
        self._log = log
        self._extras = dict(state.extras)

    def _persist(self) -> None:
        """Save the full state; failures are logged and never propagated"""
        if self.persistence is None:
            return
        try:
            self.persistence.save(self.snapshot())
        except Exception as e:
            logger.warning(f"Failed to persist state, continuing in memory: {e}")
