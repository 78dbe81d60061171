#!/usr/bin/env python3
"""
Export study tracker state from a database to JSON
"""

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from study_tracker.core.database.state_repository import StateRepository  # noqa: E402
from study_tracker.core.errors import PersistenceError  # noqa: E402
from study_tracker.core.models import AppState  # noqa: E402
from study_tracker.core.state_codec import export_state  # noqa: E402


def export_state_data(db_path: str, output_path: str) -> bool:
    """Export all cards and study sessions to JSON"""
    try:
        print(f"📖 Exporting state from {db_path}")
        state = StateRepository.from_path(db_path).load() or AppState()
        document = export_state(state)

        print(f"  📝 Found {len(document['cards'])} cards")
        print(f"  📈 Found {len(document['sessions'])} sessions")

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)

        print(f"✅ Successfully exported data to {output_path}")
        return True

    except (PersistenceError, OSError) as e:
        print(f"❌ Export failed: {e}")
        return False


def main():
    """Main export function"""
    if len(sys.argv) != 3:
        print("Usage: python export_state.py <database_path> <output_json_path>")
        print("Example: python export_state.py data/study_tracker.db data/backup.json")
        sys.exit(1)

    db_path = sys.argv[1]
    output_path = sys.argv[2]

    if not Path(db_path).exists():
        print(f"❌ Database file not found: {db_path}")
        sys.exit(1)

    print(f"🚀 Starting export from {db_path} to {output_path}")

    if export_state_data(db_path, output_path):
        print("🎉 Export completed successfully!")
        sys.exit(0)
    else:
        print("💥 Export failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
