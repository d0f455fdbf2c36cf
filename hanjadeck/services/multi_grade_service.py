"""
Multi-grade aggregation - word pools spanning several grades.

Builds the deduplicated pool the initial card stack is drawn from and
samples it without bias.
"""

import logging
import random
from threading import Lock
from typing import Dict, List, Optional, Sequence, TypeVar

from ..config import HanjaGrade
from ..config.grades import GradeLike, grades_cache_key, parse_grades
from ..models import WordCard
from .bookmarks import BookmarkStore
from .repository import BaseWordRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def fisher_yates_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly shuffled copy of ``items``.

    Walks from the end, swapping each slot with a uniformly chosen slot at
    or before it.
    """
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def remove_duplicate_words(words: Sequence[WordCard]) -> List[WordCard]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for word in words:
        if word.id in seen:
            continue
        seen.add(word.id)
        unique.append(word)
    return unique


class MultiGradeService:
    """
    Word pools across several grades.

    The merged pool for a grade set is cached for the lifetime of the
    instance and only dropped by ``clear_cache()``. Cache reads and the
    populate-on-miss sequence are guarded by a lock.
    """

    def __init__(
        self,
        repository: BaseWordRepository,
        bookmarks: BookmarkStore,
        rng: Optional[random.Random] = None,
    ):
        self.repository = repository
        self.bookmarks = bookmarks
        self.rng = rng or random.Random()
        self._lock = Lock()
        self._pool_cache: Dict[str, List[WordCard]] = {}

    def get_words_by_multiple_grades(self, grades: Sequence[GradeLike]) -> List[WordCard]:
        """
        Get every word of the given grades, deduplicated by id.

        Args:
            grades: Grade set in any accepted representation

        Returns:
            Cards in grade order as given, first occurrence of each id
        """
        parsed = parse_grades(grades)
        if not parsed:
            return []

        cache_key = grades_cache_key(parsed)

        with self._lock:
            cached = self._pool_cache.get(cache_key)
            if cached is not None:
                return [word.copy() for word in cached]

            all_words: List[WordCard] = []
            for grade in parsed:
                all_words.extend(self.repository.get_words_by_grade(grade))

            unique_words = remove_duplicate_words(all_words)
            self._pool_cache[cache_key] = unique_words
            logger.debug("Cached %d words for grades %s", len(unique_words), cache_key)
            return [word.copy() for word in unique_words]

    def get_random_word_from_multiple_grades(
        self, grades: Sequence[GradeLike], exclude_ids: Sequence[str] = ()
    ) -> Optional[WordCard]:
        """Pick one word uniformly from the pool, or None if nothing is left."""
        excluded = set(exclude_ids)
        available = [w for w in self.get_words_by_multiple_grades(grades) if w.id not in excluded]
        if not available:
            return None
        return self.rng.choice(available)

    def get_random_words_from_multiple_grades(
        self,
        grades: Sequence[GradeLike],
        count: int,
        exclude_ids: Sequence[str] = (),
    ) -> List[WordCard]:
        """
        Draw up to ``count`` random words for a study stack.

        Bookmarked words and ``exclude_ids`` are removed from the pool first.
        Returns fewer words (or none) when the pool is smaller than ``count``.
        """
        if count <= 0:
            return []

        all_words = self.get_words_by_multiple_grades(grades)
        bookmarked_ids = self.bookmarks.get_bookmarked_ids()

        excluded = set(exclude_ids) | set(bookmarked_ids)
        available = [w for w in all_words if w.id not in excluded]

        if bookmarked_ids:
            logger.info("Excluded %d bookmarked words; %d/%d available",
                        len(bookmarked_ids), len(available), len(all_words))

        if not available:
            logger.warning("No words available for grades %s", grades_cache_key(grades))
            return []

        return fisher_yates_shuffle(available, self.rng)[:count]

    def get_multi_grade_statistics(self, grades: Sequence[GradeLike]) -> Dict[str, object]:
        """Pool size and per-grade word counts for a grade set."""
        parsed = parse_grades(grades)
        all_words = self.get_words_by_multiple_grades(parsed)

        breakdown: Dict[HanjaGrade, int] = {grade: 0 for grade in parsed}
        for word in all_words:
            if word.grade in breakdown:
                breakdown[word.grade] += 1

        return {
            "total_words": len(all_words),
            "grade_breakdown": breakdown,
        }

    def clear_cache(self) -> None:
        """Drop every cached pool."""
        with self._lock:
            self._pool_cache.clear()
        logger.debug("Multi-grade cache cleared")
