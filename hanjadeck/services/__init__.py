"""Services layer for the word/character data and study logic."""

from .repository import BaseWordRepository, WordRepository
from .ordering import reconcile_card, reconcile_character_order
from .bookmarks import BookmarkStore
from .multi_grade_service import MultiGradeService, fisher_yates_shuffle
from .related_word_service import RelatedWordService
from .history import CardHistory, GoBackResult, RecentHistory
from .hanja_service import HanjaService

__all__ = [
    "BaseWordRepository",
    "WordRepository",
    "reconcile_card",
    "reconcile_character_order",
    "BookmarkStore",
    "MultiGradeService",
    "fisher_yates_shuffle",
    "RelatedWordService",
    "CardHistory",
    "GoBackResult",
    "RecentHistory",
    "HanjaService",
]
