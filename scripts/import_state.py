#!/usr/bin/env python3
"""
Import study tracker state from JSON, replacing the database contents
"""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from study_tracker.core.database.state_repository import StateRepository  # noqa: E402
from study_tracker.core.errors import ImportFormatError, PersistenceError  # noqa: E402
from study_tracker.core.state_codec import import_state  # noqa: E402


def import_state_data(json_path: str, db_path: str) -> bool:
    """Import cards and sessions from JSON; the database is left untouched on error"""
    try:
        print(f"📖 Loading data from {json_path}")
        with open(json_path, 'r', encoding='utf-8') as f:
            state = import_state(f.read())

        print(f"  📝 Loaded {len(state.cards)} cards")
        print(f"  📈 Loaded {len(state.sessions)} sessions")

        print(f"🔗 Writing to database {db_path}")
        StateRepository.from_path(db_path).save(state)

        print(f"✅ Successfully imported data into {db_path}")
        return True

    except ImportFormatError as e:
        print(f"❌ Invalid document: {e}")
        return False
    except (PersistenceError, OSError) as e:
        print(f"❌ Import failed: {e}")
        return False


def main():
    """Main import function"""
    if len(sys.argv) != 3:
        print("Usage: python import_state.py <input_json_path> <database_path>")
        print("Example: python import_state.py data/backup.json data/study_tracker.db")
        sys.exit(1)

    json_path = sys.argv[1]
    db_path = sys.argv[2]

    if not Path(json_path).exists():
        print(f"❌ JSON file not found: {json_path}")
        sys.exit(1)

    print(f"🚀 Starting import from {json_path} to {db_path}")

    if import_state_data(json_path, db_path):
        print("🎉 Import completed successfully!")
        sys.exit(0)
    else:
        print("💥 Import failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
