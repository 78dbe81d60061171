"""
Unit tests for database operations
"""

import logging
import os
import tempfile
from datetime import date
from unittest.mock import patch

import pytest

from study_tracker.core.database.connection import DatabaseConnection
from study_tracker.core.database.state_repository import StateRepository
from study_tracker.core.errors import PersistenceError
from study_tracker.core.models import Activity, AppState, StudySession, VocabCard
from study_tracker.database import init_db


class TestStateRepository:
    """Test StateRepository class"""

    @pytest.fixture
    def temp_db_path(self):
        """Create temporary database file path"""
        temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
        temp_file.close()

        yield temp_file.name

        # Cleanup
        for suffix in ("", "-wal", "-shm"):
            if os.path.exists(temp_file.name + suffix):
                os.unlink(temp_file.name + suffix)

    @pytest.fixture
    def repository(self, temp_db_path):
        """Create repository on a temporary database"""
        return init_db(temp_db_path)

    @pytest.fixture
    def sample_state(self):
        """Sample state for testing"""
        card = VocabCard(
            id="c1",
            front="la maison",
            back="the house",
            ease_factor=2.6,
            interval=2,
            due=date(2024, 1, 5),
            repetitions=1,
            last_reviewed=date(2024, 1, 3),
            created=date(2024, 1, 3),
        )
        sessions = [
            StudySession(id="s2", date=date(2024, 1, 3), minutes=45, activity=Activity.GRAMMAR),
            StudySession(
                id="s1",
                date=date(2024, 1, 1),
                minutes=10,
                activity=Activity.LISTENING,
                notes="podcast",
            ),
        ]
        return AppState(cards={card.id: card}, sessions=sessions, extras={"tab": "news"})

    def test_database_initialization(self, repository):
        """Test database initialization"""
        with repository.db_connection.get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT name FROM sqlite_master
                WHERE type='table' AND name NOT LIKE 'sqlite_%'
            """
            )
            tables = [row[0] for row in cursor.fetchall()]

        for table in ["state_meta", "cards", "sessions", "extras"]:
            assert table in tables

    def test_load_before_first_save(self, repository):
        """A fresh database has no saved state"""
        assert repository.load() is None

    def test_save_and_load(self, repository, sample_state):
        """Saved state loads back identically, log order included"""
        repository.save(sample_state)

        loaded = repository.load()

        assert loaded.cards == sample_state.cards
        assert [session.id for session in loaded.sessions] == ["s2", "s1"]
        assert loaded.sessions == sample_state.sessions
        assert loaded.extras == {"tab": "news"}
        assert isinstance(loaded.cards["c1"].due, date)

    def test_save_replaces_previous_state(self, repository, sample_state):
        """Each save is a full replacement"""
        repository.save(sample_state)
        repository.save(AppState())

        loaded = repository.load()

        assert loaded is not None
        assert loaded.cards == {}
        assert loaded.sessions == []

    def test_state_survives_new_repository(self, temp_db_path, sample_state):
        """Data persists across repository instances"""
        init_db(temp_db_path).save(sample_state)

        loaded = StateRepository(DatabaseConnection(temp_db_path)).load()

        assert len(loaded.sessions) == 2

    def test_unserializable_extras(self, repository):
        """Extras that cannot be stored raise PersistenceError"""
        with pytest.raises(PersistenceError):
            repository.save(AppState(extras={"bad": object()}))

    def test_sqlite_errors_are_wrapped(self, repository, sample_state):
        """sqlite3 errors surface as PersistenceError"""
        repository.save(sample_state)
        with repository.db_connection.get_connection() as conn:
            conn.execute("DROP TABLE sessions")
            conn.commit()

        with pytest.raises(PersistenceError):
            repository.save(sample_state)
        with pytest.raises(PersistenceError):
            repository.load()

    def test_unopenable_database(self):
        """Opening a database in an unusable location raises PersistenceError"""
        with patch(
            "study_tracker.core.database.state_repository.DatabaseConnection",
            side_effect=OSError("read-only file system"),
        ):
            with pytest.raises(PersistenceError):
                StateRepository.from_path("/nonexistent/db.sqlite")

    def test_corrupt_stored_date(self, repository, sample_state):
        """Rows that fail type conversion surface as PersistenceError"""
        repository.save(sample_state)
        with repository.db_connection.get_connection() as conn:
            conn.execute("UPDATE sessions SET session_date = 'garbage'")
            conn.commit()

        with pytest.raises(PersistenceError):
            repository.load()

    def test_failed_save_is_not_logged_as_error(self, repository, sample_state, caplog):
        """The connection layer leaves error reporting to the caller"""
        repository.save(sample_state)
        with repository.db_connection.get_connection() as conn:
            conn.execute("DROP TABLE sessions")
            conn.commit()

        with caplog.at_level(logging.ERROR):
            with pytest.raises(PersistenceError):
                repository.save(sample_state)

        assert caplog.records == []
