"""
Error types raised by the Study Tracker core
"""


class StudyTrackerError(Exception):
    """Base class for all study tracker errors"""


class InvalidInputError(StudyTrackerError, ValueError):
    """Raised when a value is rejected at the boundary (quality, minutes, activity)"""


class NotFoundError(StudyTrackerError, LookupError):
    """Raised when a card id is not present in the store"""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class PersistenceError(StudyTrackerError):
    """Raised by the persistence collaborator when load or save fails"""


class ImportFormatError(StudyTrackerError):
    """Raised when an imported document is malformed"""
