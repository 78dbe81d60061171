"""
Tests for state export and import
"""

import json
from datetime import date

import pytest

from study_tracker.core.errors import ImportFormatError
from study_tracker.core.models import Activity, AppState, StudySession, VocabCard
from study_tracker.core.state_codec import export_state, import_state


@pytest.fixture
def sample_state():
    """State with a reviewed card, a new card and an unordered log"""
    cards = [
        VocabCard(
            id="c1",
            front="la maison",
            back="the house",
            ease_factor=2.6,
            interval=2,
            due=date(2024, 1, 5),
            repetitions=1,
            last_reviewed=date(2024, 1, 3),
            created=date(2024, 1, 3),
        ),
        VocabCard(id="c2", front="le chat", back="the cat", due=date(2024, 1, 3)),
    ]
    sessions = [
        StudySession(id="s1", date=date(2024, 1, 3), minutes=30, activity=Activity.SPEAKING),
        StudySession(
            id="s2",
            date=date(2024, 1, 1),
            minutes=12.5,
            activity=Activity.READING,
            notes="Le Monde article",
        ),
    ]
    return AppState(
        cards={card.id: card for card in cards},
        sessions=sessions,
        extras={"theme": "gradient", "selected_tab": 2},
    )


class TestExportState:
    """Test document export"""

    def test_document_layout(self, sample_state):
        document = export_state(sample_state)

        assert document["cards"][0]["due"] == "2024-01-05"
        assert document["sessions"][1]["activity"] == "Reading"
        assert document["extras"] == {"theme": "gradient", "selected_tab": 2}
        assert document["statistics"] == {"total_cards": 2, "total_sessions": 2}
        assert "exported_at" in document["export_info"]

    def test_document_is_json_serializable(self, sample_state):
        text = json.dumps(export_state(sample_state))

        assert json.loads(text)["cards"][1]["front"] == "le chat"


class TestImportState:
    """Test document import"""

    def test_round_trip(self, sample_state):
        restored = import_state(export_state(sample_state))

        assert restored.cards == sample_state.cards
        assert list(restored.cards) == list(sample_state.cards)
        assert restored.sessions == sample_state.sessions
        assert restored.extras == sample_state.extras

    def test_round_trip_through_json_text(self, sample_state):
        restored = import_state(json.dumps(export_state(sample_state)))

        assert [session.id for session in restored.sessions] == ["s1", "s2"]

    def test_empty_document(self):
        state = import_state({})

        assert state.cards == {}
        assert state.sessions == []

    @pytest.mark.parametrize(
        "document",
        [
            "not json at all",
            "[1, 2, 3]",
            {"cards": "nope"},
            {"cards": [{"id": "x", "front": "a", "back": "b"}]},
            {"cards": [{"id": "x", "front": "a", "back": "b", "ease_factor": 1.0,
                        "interval": 1, "due": "2024-01-01"}]},
            {"cards": [{"id": "x", "front": "a", "back": "b", "ease_factor": 2.5,
                        "interval": 0, "due": "2024-01-01"}]},
            {"cards": [{"id": "x", "front": " ", "back": "b", "ease_factor": 2.5,
                        "interval": 1, "due": "2024-01-01"}]},
            {"sessions": [{"id": "s", "date": "2024-01-01", "minutes": 0,
                           "activity": "Vocab"}]},
            {"sessions": [{"id": "s", "date": "2024-01-01", "minutes": 10,
                           "activity": "Cooking"}]},
            {"sessions": [{"id": "s", "date": "yesterday", "minutes": 10,
                           "activity": "Vocab"}]},
        ],
    )
    def test_malformed_documents(self, document):
        with pytest.raises(ImportFormatError):
            import_state(document)

    def test_duplicate_session_ids(self):
        session = {"id": "s", "date": "2024-01-01", "minutes": 10, "activity": "Vocab"}

        with pytest.raises(ImportFormatError):
            import_state({"sessions": [session, dict(session)]})

    def test_duplicate_card_ids(self):
        card = {"id": "c", "front": "a", "back": "b", "ease_factor": 2.5,
                "interval": 1, "due": "2024-01-01"}

        with pytest.raises(ImportFormatError):
            import_state({"cards": [card, dict(card)]})

    def test_activity_spellings_match_logged_sessions(self):
        state = import_state(
            {
                "sessions": [
                    {"id": "a", "date": "2024-01-01", "minutes": 10, "activity": "vocab"},
                    {"id": "b", "date": "2024-01-02", "minutes": 5, "activity": "LISTENING"},
                ]
            }
        )

        assert [s.activity for s in state.sessions] == [Activity.VOCAB, Activity.LISTENING]
