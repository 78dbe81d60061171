"""
In-memory store for vocabulary cards and their scheduling state
"""

import logging
from collections.abc import Iterable
from datetime import date

from ..errors import InvalidInputError, NotFoundError
from ..models import VocabCard, as_day

logger = logging.getLogger(__name__)


class VocabCardStore:
    """Keyed collection of vocabulary cards, insertion ordered"""

    def __init__(self, cards: Iterable[VocabCard] = ()):
        self._cards: dict[str, VocabCard] = {}
        self.replace_all(cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def add(self, card: VocabCard) -> VocabCard:
        """Add a new card; ids must be unique"""
        if card.id in self._cards:
            raise InvalidInputError(f"Duplicate card id: {card.id}")
        self._cards[card.id] = card
        logger.debug(f"Added card {card.id} ({card.front!r})")
        return card

    def get(self, card_id: str) -> VocabCard | None:
        """Get card by ID"""
        return self._cards.get(card_id)

    def require(self, card_id: str) -> VocabCard:
        """Get card by ID or raise NotFoundError"""
        card = self._cards.get(card_id)
        if card is None:
            raise NotFoundError(card_id)
        return card

    def replace(self, card: VocabCard) -> VocabCard:
        """Swap in the new state of an existing card"""
        if card.id not in self._cards:
            raise NotFoundError(card.id)
        self._cards[card.id] = card
        return card

    def all(self) -> list[VocabCard]:
        """All cards in insertion order"""
        return list(self._cards.values())

    def due(self, today: date) -> list[VocabCard]:
        """Cards due on or before the given day, most overdue first"""
        today = as_day(today)
        due_cards = [card for card in self._cards.values() if card.due <= today]
        return sorted(due_cards, key=lambda card: card.due)

    def as_dict(self) -> dict[str, VocabCard]:
        """Copy of the id -> card mapping"""
        return dict(self._cards)

    def replace_all(self, cards: Iterable[VocabCard]) -> None:
        """Replace every card at once; nothing changes if ids collide"""
        replacement: dict[str, VocabCard] = {}
        for card in cards:
            if card.id in replacement:
                raise InvalidInputError(f"Duplicate card id: {card.id}")
            replacement[card.id] = card
        self._cards = replacement
