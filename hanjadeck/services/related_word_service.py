"""
Related-word resolution for swipe chaining.

Given the current card and a swipe direction, finds the next card sharing
the boundary character:

1. Words containing the same character
2. Words containing a character with the same radical
3. None (the caller advances the stack normally)
"""

import logging
import random
from typing import Dict, List, Optional, Sequence, Union

from ..config import Config
from ..config.grades import GradeLike, parse_grades
from ..models import SwipeDirection, WordCard
from .repository import BaseWordRepository

logger = logging.getLogger(__name__)


class RelatedWordService:
    """
    Single-shot related-word resolution.

    Holds no session state; the caller owns the recent-history window and
    passes it in as opaque exclusion lists.
    """

    def __init__(
        self,
        repository: BaseWordRepository,
        rng: Optional[random.Random] = None,
        candidate_limit: int = Config.RELATED_CANDIDATE_LIMIT,
    ):
        self.repository = repository
        self.rng = rng or random.Random()
        self.candidate_limit = candidate_limit

    def find_related_word(
        self,
        current_card: WordCard,
        direction: Union[SwipeDirection, str],
        grades: Sequence[GradeLike],
        exclude_recent_ids: Sequence[str] = (),
        recent_words: Sequence[str] = (),
    ) -> Optional[WordCard]:
        """
        Find the next card for a swipe.

        Args:
            current_card: Card being swiped away
            direction: LEFT anchors on the first character, RIGHT on the last
            grades: Grades to search within
            exclude_recent_ids: Recently shown word ids
            recent_words: Recently shown literal words

        Returns:
            A related card, or None when nothing qualifies or a query fails
        """
        try:
            target = current_card.boundary_character(SwipeDirection.parse(direction))
            if target is None:
                return None

            if not parse_grades(grades):
                return None

            candidates = self._find_candidates(
                "character", target.character, current_card, grades,
                exclude_recent_ids, recent_words,
            )
            if candidates:
                return self._select_random_word(candidates)

            candidates = self._find_candidates(
                "radical", target.radical, current_card, grades,
                exclude_recent_ids, recent_words,
            )
            if candidates:
                return self._select_random_word(candidates)

            return None
        except Exception:
            logger.exception("Related word lookup failed for %s", current_card.id)
            return None

    def _find_candidates(
        self,
        field: str,
        value: str,
        current_card: WordCard,
        grades: Sequence[GradeLike],
        exclude_recent_ids: Sequence[str],
        recent_words: Sequence[str],
    ) -> List[WordCard]:
        if not value:
            return []

        exclude_ids = [current_card.id, *exclude_recent_ids]
        exclude_words = [current_card.word, *recent_words]
        word_ids = self.repository.sample_word_ids_sharing(
            field, value, grades, exclude_ids,
            limit=self.candidate_limit, exclude_words=exclude_words,
        )
        if not word_ids:
            return []

        cards = self.repository.get_words_by_ids(word_ids)
        return self._filter_results(cards, current_card, exclude_recent_ids, recent_words)

    @staticmethod
    def _filter_results(
        cards: Sequence[WordCard],
        current_card: WordCard,
        exclude_recent_ids: Sequence[str],
        recent_words: Sequence[str],
    ) -> List[WordCard]:
        # Second pass on literal words: homographs can carry different ids
        excluded_ids = set(exclude_recent_ids) | {current_card.id}
        excluded_words = set(recent_words) | {current_card.word}
        return [
            card for card in cards
            if card.id not in excluded_ids and card.word not in excluded_words
        ]

    def _select_random_word(self, words: Sequence[WordCard]) -> WordCard:
        return self.rng.choice(list(words))

    def get_related_words_stats(
        self, glyph: str, grades: Sequence[GradeLike]
    ) -> Dict[str, int]:
        """
        Count how many candidates each tier would offer for ``glyph``.

        Counts are capped by the candidate limit, as in a real lookup.
        """
        try:
            same_character = self.repository.sample_word_ids_sharing(
                "character", glyph, grades, limit=self.candidate_limit
            )

            same_radical: List[str] = []
            character = self.repository.get_character_by_glyph(glyph)
            if character is not None and character.radical:
                same_radical = self.repository.sample_word_ids_sharing(
                    "radical", character.radical, grades, limit=self.candidate_limit
                )

            return {
                "same_character_count": len(same_character),
                "same_radical_count": len(same_radical),
                "total_available": self.repository.count_words(grades),
            }
        except Exception:
            logger.exception("Related word statistics failed for %s", glyph)
            return {"same_character_count": 0, "same_radical_count": 0, "total_available": 0}
