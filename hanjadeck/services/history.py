"""
Session history helpers.

The study session keeps two bounded histories:

- ``RecentHistory``: recently shown ids and literal words, handed to the
  related-word lookup as exclusion lists.
- ``CardHistory``: swiped cards with their direction, used to step back to
  the previous card.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Union

from ..config import Config
from ..models import SwipeDirection, WordCard


class RecentHistory:
    """Sliding window of recently shown cards, newest first."""

    def __init__(self, max_size: int = Config.RECENT_HISTORY_SIZE):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._ids: Deque[str] = deque(maxlen=max_size)
        self._words: Deque[str] = deque(maxlen=max_size)

    def push(self, card: WordCard) -> None:
        self._ids.appendleft(card.id)
        self._words.appendleft(card.word)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    @property
    def words(self) -> List[str]:
        return list(self._words)

    def clear(self) -> None:
        self._ids.clear()
        self._words.clear()

    def __len__(self) -> int:
        return len(self._ids)


@dataclass
class CardHistoryItem:
    card: WordCard
    direction: SwipeDirection


@dataclass
class GoBackResult:
    """Outcome of stepping back to the previous card."""

    success: bool
    message: str
    previous_card: Optional[WordCard] = None
    new_card_stack: Optional[List[WordCard]] = None
    new_card_index: Optional[int] = None
    direction: Optional[SwipeDirection] = None
    history: List[CardHistoryItem] = field(default_factory=list)


class CardHistory:
    """Bounded stack of swiped cards."""

    def __init__(self, max_size: int = Config.RECENT_HISTORY_SIZE):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._items: List[CardHistoryItem] = []

    @property
    def items(self) -> List[CardHistoryItem]:
        return list(self._items)

    @property
    def can_go_back(self) -> bool:
        return bool(self._items)

    def push(self, card: WordCard, direction: Union[SwipeDirection, str]) -> None:
        self._items.append(CardHistoryItem(card, SwipeDirection.parse(direction)))
        # Keep only the newest entries
        del self._items[:-self.max_size]

    def pop(self) -> Optional[CardHistoryItem]:
        return self._items.pop() if self._items else None

    def go_back(self, card_stack: List[WordCard]) -> GoBackResult:
        """
        Return to the most recently swiped card.

        If that card is still in ``card_stack`` the result points at its
        index; otherwise a new stack is built with it on top, capped at
        ``max_size`` cards.
        """
        previous = self.pop()
        if previous is None:
            return GoBackResult(success=False, message="No card to go back to",
                                history=self.items)

        for index, card in enumerate(card_stack):
            if card.id == previous.card.id:
                return GoBackResult(
                    success=True,
                    message=f"Returned to stack index {index}",
                    previous_card=previous.card,
                    new_card_index=index,
                    direction=previous.direction,
                    history=self.items,
                )

        new_stack = [previous.card, *card_stack[:self.max_size - 1]]
        return GoBackResult(
            success=True,
            message=f"Rebuilt stack starting from {previous.card.word}",
            previous_card=previous.card,
            new_card_stack=new_stack,
            new_card_index=0,
            direction=previous.direction,
            history=self.items,
        )
