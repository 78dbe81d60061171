#!/usr/bin/env python3
"""
Study Tracker
Command line entry point

Usage:
    python main.py stats
    python main.py due
    python main.py add-card <front> <back>
    python main.py review <card_id> <quality 0-5>
    python main.py log <minutes> <activity> [notes...]
"""

import logging
import sys

from study_tracker.config import get_settings
from study_tracker.core.coordinator import StudyCoordinator
from study_tracker.core.errors import PersistenceError, StudyTrackerError
from study_tracker.database import init_db
from study_tracker.utils import (
    format_card,
    format_dashboard,
    safe_float,
    validate_quality,
)

logger = logging.getLogger(__name__)


def run(argv: list[str], coordinator: StudyCoordinator) -> int:
    """Execute one command against a started coordinator"""
    command = argv[0] if argv else "stats"
    args = argv[1:]

    try:
        if command == "stats":
            print(format_dashboard(coordinator.dashboard()))
        elif command == "due":
            today = coordinator.today()
            due = coordinator.due_cards(today)
            if not due:
                print("🎉 Nothing to review")
            for card in due:
                print(f"{card.id}  {format_card(card, today)}")
        elif command == "add-card" and len(args) == 2:
            card = coordinator.add_card(args[0], args[1])
            print(f"✅ Added {card.id}")
        elif command == "review" and len(args) == 2:
            quality = validate_quality(args[1])
            if quality is None:
                print(f"❌ Quality must be a number from 0 to 5, got {args[1]!r}")
                return 1
            card = coordinator.review_card(args[0], quality)
            print(f"✅ Next review on {card.due.isoformat()} ({card.interval}d)")
        elif command == "log" and len(args) >= 2:
            minutes = safe_float(args[0], default=0.0)
            notes = " ".join(args[2:]) or None
            session = coordinator.add_session(minutes, args[1], notes)
            print(f"✅ Logged {session.minutes:g} min of {session.activity.value}")
        else:
            print(__doc__.strip())
            return 2
    except StudyTrackerError as e:
        print(f"❌ {e}")
        return 1

    return 0


def main():
    """Main application entry point"""
    # Load configuration
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info("Starting Study Tracker...")

    try:
        repository = init_db()
    except PersistenceError as e:
        logger.error(f"Database unavailable, changes will not be saved: {e}")
        repository = None

    coordinator = StudyCoordinator(repository, settings)
    coordinator.start()

    sys.exit(run(sys.argv[1:], coordinator))


if __name__ == "__main__":
    main()
