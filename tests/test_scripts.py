"""
Tests for the export and import scripts
"""

import importlib.util
import json
from datetime import date
from pathlib import Path

import pytest

from study_tracker.core.models import Activity, AppState, StudySession, VocabCard
from study_tracker.database import init_db

SCRIPTS_DIR = Path(__file__).resolve().parent.parent / "scripts"


def load_script(name: str):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def sample_state():
    card = VocabCard(id="c1", front="la gare", back="the station", due=date(2024, 1, 3))
    session = StudySession(
        id="s1", date=date(2024, 1, 3), minutes=20, activity=Activity.LISTENING
    )
    return AppState(cards={card.id: card}, sessions=[session], extras={"tab": 1})


class TestScripts:
    """Test moving state between a database and a JSON file"""

    def test_export_then_import(self, tmp_path, sample_state, capsys):
        source_db = tmp_path / "source.db"
        target_db = tmp_path / "target.db"
        backup = tmp_path / "backup" / "state.json"
        init_db(str(source_db)).save(sample_state)

        assert load_script("export_state").export_state_data(str(source_db), str(backup))
        assert json.loads(backup.read_text(encoding="utf-8"))["statistics"] == {
            "total_cards": 1,
            "total_sessions": 1,
        }

        assert load_script("import_state").import_state_data(str(backup), str(target_db))

        restored = init_db(str(target_db)).load()
        assert restored.cards == sample_state.cards
        assert restored.sessions == sample_state.sessions
        assert restored.extras == {"tab": 1}
        assert "Successfully imported" in capsys.readouterr().out

    def test_invalid_document_leaves_database_untouched(
        self, tmp_path, sample_state, capsys
    ):
        db_path = tmp_path / "study.db"
        init_db(str(db_path)).save(sample_state)
        bad = tmp_path / "bad.json"
        bad.write_text('{"sessions": [{"id": "x", "minutes": 5}]}', encoding="utf-8")

        assert not load_script("import_state").import_state_data(str(bad), str(db_path))

        assert init_db(str(db_path)).load().sessions == sample_state.sessions
        assert "Invalid document" in capsys.readouterr().out
