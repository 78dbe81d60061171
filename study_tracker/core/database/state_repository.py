"""
State repository: full-state load and save on SQLite
"""

import json
import logging
import sqlite3
from datetime import datetime
from typing import Protocol

from ..errors import InvalidInputError, PersistenceError
from ..models import AppState, StudySession, VocabCard
from ..state_codec import FORMAT_VERSION
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


class StatePersistence(Protocol):
    """Persistence collaborator used by the coordinator"""

    def load(self) -> AppState | None: ...

    def save(self, state: AppState) -> None: ...


class StateRepository:
    """Stores the whole application state, replacing it on every save"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    @classmethod
    def from_path(cls, db_path: str | None = None) -> "StateRepository":
        """Open (and initialize) a repository backed by the given database file"""
        try:
            db_connection = DatabaseConnection(db_path)
            db_connection.init_database()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Cannot open database {db_path}: {e}") from e
        return cls(db_connection)

    def load(self) -> AppState | None:
        """Load the saved state, or None if nothing was ever saved"""
        try:
            with self.db_connection.get_connection() as conn:
                meta = conn.execute(
                    "SELECT format_version, saved_at FROM state_meta WHERE id = 1"
                ).fetchone()
                if meta is None:
                    logger.info("No saved state found")
                    return None

                card_rows = conn.execute(
                    """
                    SELECT id, front, back, ease_factor, interval_days, due,
                           repetitions, last_reviewed, created
                    FROM cards
                    ORDER BY position
                    """
                ).fetchall()
                session_rows = conn.execute(
                    """
                    SELECT id, session_date, minutes, activity, notes
                    FROM sessions
                    ORDER BY position
                    """
                ).fetchall()
                extra_rows = conn.execute("SELECT key, value FROM extras").fetchall()
        except (sqlite3.Error, ValueError) as e:
            raise PersistenceError(f"Failed to load state: {e}") from e

        try:
            cards = {}
            for row in card_rows:
                cards[row["id"]] = VocabCard(
                    id=row["id"],
                    front=row["front"],
                    back=row["back"],
                    ease_factor=row["ease_factor"],
                    interval=row["interval_days"],
                    due=row["due"],
                    repetitions=row["repetitions"],
                    last_reviewed=row["last_reviewed"],
                    created=row["created"],
                )
            sessions = [
                StudySession(
                    id=row["id"],
                    date=row["session_date"],
                    minutes=row["minutes"],
                    activity=row["activity"],
                    notes=row["notes"],
                )
                for row in session_rows
            ]
            extras = {row["key"]: json.loads(row["value"]) for row in extra_rows}
        except (InvalidInputError, ValueError) as e:
            raise PersistenceError(f"Stored state is corrupt: {e}") from e

        logger.info(
            f"Loaded state saved at {meta['saved_at']}: "
            f"{len(cards)} cards, {len(sessions)} sessions"
        )
        return AppState(cards=cards, sessions=sessions, extras=extras)

    def save(self, state: AppState) -> None:
        """Replace the stored state with the given one in a single transaction"""
        try:
            extras = [(key, json.dumps(value)) for key, value in state.extras.items()]
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Extras are not serializable: {e}") from e

        try:
            with self.db_connection.get_connection() as conn:
                conn.execute("DELETE FROM cards")
                conn.execute("DELETE FROM sessions")
                conn.execute("DELETE FROM extras")

                conn.executemany(
                    """
                    INSERT INTO cards (
                        id, position, front, back, ease_factor, interval_days,
                        due, repetitions, last_reviewed, created
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            card.id,
                            position,
                            card.front,
                            card.back,
                            card.ease_factor,
                            card.interval,
                            card.due,
                            card.repetitions,
                            card.last_reviewed,
                            card.created,
                        )
                        for position, card in enumerate(state.cards.values())
                    ],
                )
                conn.executemany(
                    """
                    INSERT INTO sessions (
                        position, id, session_date, minutes, activity, notes
                    )
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            position,
                            session.id,
                            session.date,
                            session.minutes,
                            session.activity.value,
                            session.notes,
                        )
                        for position, session in enumerate(state.sessions)
                    ],
                )
                conn.executemany(
                    "INSERT INTO extras (key, value) VALUES (?, ?)", extras
                )
                conn.execute(
                    """
                    INSERT INTO state_meta (id, format_version, saved_at)
                    VALUES (1, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        format_version = excluded.format_version,
                        saved_at = excluded.saved_at
                    """,
                    (FORMAT_VERSION, datetime.now()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save state: {e}") from e

        logger.debug(
            f"Saved state: {len(state.cards)} cards, {len(state.sessions)} sessions"
        )
