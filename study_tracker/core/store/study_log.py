"""
Append-only log of completed study sessions
"""

import logging
from collections.abc import Iterable, Iterator

from ..errors import InvalidInputError
from ..models import StudySession

logger = logging.getLogger(__name__)


class StudyLog:
    """Ordered log of study sessions; entries are never mutated or reordered"""

    def __init__(self, sessions: Iterable[StudySession] = ()):
        self._sessions: list[StudySession] = []
        self._ids: set[str] = set()
        self.replace_all(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[StudySession]:
        return iter(self.snapshot())

    def append(self, session: StudySession) -> StudySession:
        """Append a session to the end of the log"""
        if not isinstance(session, StudySession):
            raise InvalidInputError(f"Expected a StudySession, got {session!r}")
        if session.id in self._ids:
            raise InvalidInputError(f"Duplicate session id: {session.id}")
        self._sessions.append(session)
        self._ids.add(session.id)
        logger.debug(
            f"Logged session {session.id}: {session.minutes} min "
            f"{session.activity.value} on {session.date}"
        )
        return session

    def snapshot(self) -> tuple[StudySession, ...]:
        """Immutable view of the log at this moment"""
        return tuple(self._sessions)

    def replace_all(self, sessions: Iterable[StudySession]) -> None:
        """Replace the whole log, keeping the given order"""
        replacement = list(sessions)
        for session in replacement:
            if not isinstance(session, StudySession):
                raise InvalidInputError(f"Expected a StudySession, got {session!r}")
        ids = {session.id for session in replacement}
        if len(ids) != len(replacement):
            raise InvalidInputError("Duplicate session ids in log")
        self._sessions = replacement
        self._ids = ids
