"""
Study analytics derived from the study log

Every function here is pure: it reads a sequence of sessions and a reference
"today" and never touches the clock. Callers resolve "today" once per pass so
that streaks, weekly totals and series agree with each other.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from .config import Settings, get_settings
from .core.errors import InvalidInputError
from .core.models import Activity, StudySession, as_day

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class DailyTotal:
    """Minutes studied on one day"""

    date: date
    minutes: float


@dataclass(frozen=True)
class StreakSummary:
    """Current and best run of consecutive study days"""

    current: int
    best: int


@dataclass(frozen=True)
class WeeklyProgress:
    """Minutes studied in the current week against the weekly goal"""

    week_start: date
    week_end: date
    minutes: float
    goal_minutes: float
    ratio: float

    @property
    def percent(self) -> int:
        """Completion as a whole percentage, capped at 100"""
        return min(100, int(self.ratio * 100 + 0.5))


@dataclass(frozen=True)
class HeatmapCell:
    """One day of the calendar heatmap"""

    date: date
    weekday: int  # 0 = Monday
    minutes: float


@dataclass(frozen=True)
class Dashboard:
    """All analytics views computed against the same day"""

    today: date
    rolling: list[DailyTotal]
    breakdown: dict[Activity, float]
    streaks: StreakSummary
    weekly: WeeklyProgress
    heatmap: list[list[HeatmapCell]]


def _ensure_count(name: str, value: int, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidInputError(f"{name} must be at least {minimum}, got {value}")
    return value


def _days_back(today: date, days: int) -> date:
    """First day of an inclusive window of `days` days ending at today"""
    return today - timedelta(days=days - 1)


def start_of_week(day: date, week_start: int = 0) -> date:
    """Most recent week-start day on or before the given day"""
    _ensure_count("week_start", week_start, 0)
    if week_start > 6:
        raise InvalidInputError(f"week_start must be between 0 and 6, got {week_start}")
    return day - timedelta(days=(day.weekday() - week_start) % DAYS_PER_WEEK)


def daily_totals(sessions: Iterable[StudySession]) -> dict[date, float]:
    """Sum of minutes per day; days without sessions are absent"""
    totals: dict[date, float] = {}
    for session in sessions:
        totals[session.date] = totals.get(session.date, 0) + session.minutes
    return dict(sorted(totals.items()))


def rolling_series(
    sessions: Iterable[StudySession], today: date, window: int = 28
) -> list[DailyTotal]:
    """Per-day totals for the `window` days ending at today, oldest first"""
    _ensure_count("window", window, 0)
    today = as_day(today)
    totals = daily_totals(sessions)
    first = _days_back(today, window)
    return [
        DailyTotal(date=day, minutes=totals.get(day, 0))
        for day in (first + timedelta(days=offset) for offset in range(window))
    ]


def activity_breakdown(
    sessions: Iterable[StudySession], today: date, days: int = 7
) -> dict[Activity, float]:
    """Minutes per activity over the trailing `days` days, every kind listed"""
    _ensure_count("days", days, 1)
    today = as_day(today)
    first = _days_back(today, days)

    breakdown: dict[Activity, float] = {activity: 0 for activity in Activity}
    for session in sessions:
        if first <= session.date <= today:
            breakdown[session.activity] += session.minutes
    return breakdown


def _study_days(
    sessions: Iterable[StudySession], today: date, lookback: int
) -> set[date]:
    """Days with at least one session inside the lookback horizon"""
    _ensure_count("lookback", lookback, 1)
    first = _days_back(today, lookback)
    return {session.date for session in sessions if first <= session.date <= today}


def current_streak(
    sessions: Iterable[StudySession], today: date, lookback: int = 365
) -> int:
    """Consecutive study days ending today; zero when today has no session"""
    today = as_day(today)
    days = _study_days(sessions, today, lookback)

    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def best_streak(
    sessions: Iterable[StudySession], today: date, lookback: int = 365
) -> int:
    """Longest run of consecutive study days inside the lookback horizon"""
    today = as_day(today)
    days = sorted(_study_days(sessions, today, lookback))

    best = 0
    run = 0
    previous = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def streaks(
    sessions: Iterable[StudySession], today: date, lookback: int = 365
) -> StreakSummary:
    """Current and best streak from a single snapshot of the log"""
    snapshot = tuple(sessions)
    return StreakSummary(
        current=current_streak(snapshot, today, lookback),
        best=best_streak(snapshot, today, lookback),
    )


def weekly_progress(
    sessions: Iterable[StudySession],
    today: date,
    goal_minutes: float,
    week_start: int = 0,
) -> WeeklyProgress:
    """Minutes logged in the week containing today, divided by the full goal"""
    if isinstance(goal_minutes, bool) or not isinstance(goal_minutes, (int, float)):
        raise InvalidInputError(f"Weekly goal must be a number, got {goal_minutes!r}")
    if goal_minutes <= 0:
        raise InvalidInputError(f"Weekly goal must be positive, got {goal_minutes}")

    today = as_day(today)
    first = start_of_week(today, week_start)
    last = first + timedelta(days=DAYS_PER_WEEK - 1)

    minutes = sum(
        (session.minutes for session in sessions if first <= session.date <= last), 0
    )
    return WeeklyProgress(
        week_start=first,
        week_end=last,
        minutes=minutes,
        goal_minutes=goal_minutes,
        ratio=minutes / goal_minutes,
    )


def heatmap(
    sessions: Iterable[StudySession],
    today: date,
    weeks: int = 12,
    week_start: int = 0,
) -> list[list[HeatmapCell]]:
    """
    Calendar grid of daily totals, one row per week

    Rows start on the week-start day; the first row begins `weeks - 1` weeks
    before the current week and the last row stops at today.
    """
    _ensure_count("weeks", weeks, 1)
    today = as_day(today)
    totals = daily_totals(sessions)
    first = start_of_week(today, week_start) - timedelta(weeks=weeks - 1)

    grid: list[list[HeatmapCell]] = []
    for week in range(weeks):
        row = []
        for offset in range(DAYS_PER_WEEK):
            day = first + timedelta(days=week * DAYS_PER_WEEK + offset)
            if day > today:
                break
            row.append(
                HeatmapCell(date=day, weekday=day.weekday(), minutes=totals.get(day, 0))
            )
        grid.append(row)
    return grid


class AnalyticsEngine:
    """Analytics views with configured defaults"""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.rolling_window = settings.rolling_window_days
        self.breakdown_days = settings.breakdown_window_days
        self.lookback = settings.streak_lookback_days
        self.weekly_goal = settings.weekly_goal_minutes
        self.week_start = settings.week_start_day
        self.heatmap_weeks = settings.heatmap_weeks

    def rolling_series(
        self, sessions: Iterable[StudySession], today: date, window: int | None = None
    ) -> list[DailyTotal]:
        return rolling_series(
            sessions, today, self.rolling_window if window is None else window
        )

    def activity_breakdown(
        self, sessions: Iterable[StudySession], today: date, days: int | None = None
    ) -> dict[Activity, float]:
        return activity_breakdown(
            sessions, today, self.breakdown_days if days is None else days
        )

    def streaks(self, sessions: Iterable[StudySession], today: date) -> StreakSummary:
        return streaks(sessions, today, self.lookback)

    def weekly_progress(
        self,
        sessions: Iterable[StudySession],
        today: date,
        goal_minutes: float | None = None,
    ) -> WeeklyProgress:
        return weekly_progress(
            sessions,
            today,
            self.weekly_goal if goal_minutes is None else goal_minutes,
            self.week_start,
        )

    def heatmap(
        self, sessions: Iterable[StudySession], today: date, weeks: int | None = None
    ) -> list[list[HeatmapCell]]:
        return heatmap(
            sessions,
            today,
            self.heatmap_weeks if weeks is None else weeks,
            self.week_start,
        )

    def dashboard(self, sessions: Iterable[StudySession], today: date) -> Dashboard:
        """Compute every view from one snapshot and one reference day"""
        snapshot = tuple(sessions)
        today = as_day(today)
        logger.debug(f"Computing dashboard for {today} over {len(snapshot)} sessions")
        return Dashboard(
            today=today,
            rolling=self.rolling_series(snapshot, today),
            breakdown=self.activity_breakdown(snapshot, today),
            streaks=self.streaks(snapshot, today),
            weekly=self.weekly_progress(snapshot, today),
            heatmap=self.heatmap(snapshot, today),
        )
