"""
Hanja Service - entry point for the study session layer.

Owns one storage connection and the services built on it, so every caller
works against an explicit context object instead of module globals. A
fresh instance (e.g. over ":memory:") gives a fully isolated store.
"""

import asyncio
import functools
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..config import Config, HanjaGrade
from ..config.grades import GradeLike
from ..database import DataSeeder, HanjaStorage, SeedReport
from ..models import GradeStats, SwipeDirection, WordCard
from .bookmarks import BookmarkStore
from .multi_grade_service import MultiGradeService
from .related_word_service import RelatedWordService
from .repository import WordRepository

logger = logging.getLogger(__name__)


class HanjaService:
    """
    Facade over storage, repository, bookmarks and the study services.

    Every operation has a synchronous form and an ``*_async`` form that runs
    it on a small thread pool.

    Usage:
        service = HanjaService()
        service.initialize_storage()
        service.ensure_seeded()
        stack = service.get_random_words_from_multiple_grades([8, 7], 10)
        nxt = service.find_related_word(stack[0], "left", grades=[8, 7])
    """

    def __init__(self, db_path: Optional[str] = None, rng: Optional[random.Random] = None):
        """
        Args:
            db_path: SQLite file or ":memory:" (defaults to Config.DB_PATH)
            rng: Random source shared by sampling and related-word picks
        """
        self.rng = rng or random.Random()
        self.storage = HanjaStorage(db_path)
        self.repository = WordRepository(self.storage)
        self.bookmarks = BookmarkStore(self.storage)
        self.seeder = DataSeeder(self.storage)
        self.multi_grade = MultiGradeService(self.repository, self.bookmarks, self.rng)
        self.related_words = RelatedWordService(self.repository, self.rng)

        self._executor: Optional[ThreadPoolExecutor] = None
        self._change_callbacks: List[Callable[[str], None]] = []

    # ==================== Change notification ====================

    def on_change(self, callback: Callable[[str], None]) -> None:
        """
        Register a callback for learner-state changes.

        Args:
            callback: Called with the changed word id, or "*" after a reseed
        """
        self._change_callbacks.append(callback)

    def _notify_change(self, word_id: str) -> None:
        for callback in self._change_callbacks:
            try:
                callback(word_id)
            except Exception:
                logger.exception("Change callback failed for %s", word_id)

    # ==================== Lifecycle ====================

    def initialize_storage(self) -> HanjaStorage:
        """
        Open the database and ensure the schema.

        Raises:
            StorageInitializationError: the store cannot be used at all
        """
        self.storage.initialize()
        return self.storage

    def ensure_seeded(self) -> Optional[SeedReport]:
        """Seed from the bundled dataset on first launch only."""
        self.initialize_storage()
        if self.seeder.is_seeded():
            return None
        return self.seed_from_static_dataset()

    def seed_from_static_dataset(
        self,
        characters_csv: Optional[str] = None,
        words_csv: Optional[str] = None,
    ) -> SeedReport:
        """
        Replace all words and characters with the static dataset.

        Destructive; bookmarks are kept. Cached pools are dropped.
        """
        self.initialize_storage()
        report = self.seeder.seed_from_files(characters_csv, words_csv)
        self.multi_grade.clear_cache()
        self._notify_change("*")
        return report

    def clear_all_data(self) -> None:
        """Full reset including bookmarks."""
        self.initialize_storage()
        self.seeder.clear_all_data()
        self.multi_grade.clear_cache()
        self._notify_change("*")

    def clear_cache(self) -> None:
        self.multi_grade.clear_cache()

    def close(self) -> None:
        """Close the database and stop the worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.storage.close()

    # ==================== Queries ====================

    def get_words_by_grade(self, grade: GradeLike) -> List[WordCard]:
        return self.repository.get_words_by_grade(grade)

    def get_words_by_multiple_grades(self, grades: Sequence[GradeLike]) -> List[WordCard]:
        return self.multi_grade.get_words_by_multiple_grades(grades)

    def get_random_words_from_multiple_grades(
        self,
        grades: Sequence[GradeLike],
        count: int,
        exclude_ids: Sequence[str] = (),
    ) -> List[WordCard]:
        return self.multi_grade.get_random_words_from_multiple_grades(grades, count, exclude_ids)

    def find_related_word(
        self,
        current_card: WordCard,
        direction: Union[SwipeDirection, str],
        grades: Sequence[GradeLike] = (Config.DEFAULT_GRADE,),
        exclude_recent_ids: Sequence[str] = (),
        recent_words: Sequence[str] = (),
    ) -> Optional[WordCard]:
        return self.related_words.find_related_word(
            current_card, direction, grades, exclude_recent_ids, recent_words
        )

    def get_grade_statistics(self) -> Dict[HanjaGrade, GradeStats]:
        return self.repository.get_grade_statistics()

    # ==================== Mutations ====================

    def set_word_memorized(self, word_id: str, is_memorized: bool) -> bool:
        """Returns False when ``word_id`` does not exist."""
        changed = self.repository.update_word_memorized(word_id, is_memorized)
        if changed:
            self._notify_change(word_id)
        return changed

    def toggle_bookmark(self, word_id: str) -> bool:
        """Returns the new bookmark state."""
        state = self.bookmarks.toggle(word_id)
        self._notify_change(word_id)
        return state

    def is_bookmarked(self, word_id: str) -> bool:
        return self.bookmarks.is_bookmarked(word_id)

    def get_bookmarked_ids(self) -> List[str]:
        return self.bookmarks.get_bookmarked_ids()

    # ==================== Async wrappers ====================

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=Config.ASYNC_WORKERS, thread_name_prefix="hanjadeck"
            )
        return self._executor

    async def _run_async(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            self._get_executor(), functools.partial(func, *args, **kwargs)
        )

    async def initialize_storage_async(self) -> HanjaStorage:
        return await self._run_async(self.initialize_storage)

    async def seed_from_static_dataset_async(
        self,
        characters_csv: Optional[str] = None,
        words_csv: Optional[str] = None,
    ) -> SeedReport:
        return await self._run_async(self.seed_from_static_dataset, characters_csv, words_csv)

    async def get_words_by_grade_async(self, grade: GradeLike) -> List[WordCard]:
        return await self._run_async(self.get_words_by_grade, grade)

    async def get_random_words_from_multiple_grades_async(
        self,
        grades: Sequence[GradeLike],
        count: int,
        exclude_ids: Sequence[str] = (),
    ) -> List[WordCard]:
        return await self._run_async(
            self.get_random_words_from_multiple_grades, grades, count, exclude_ids
        )

    async def find_related_word_async(
        self,
        current_card: WordCard,
        direction: Union[SwipeDirection, str],
        grades: Sequence[GradeLike] = (Config.DEFAULT_GRADE,),
        exclude_recent_ids: Sequence[str] = (),
        recent_words: Sequence[str] = (),
    ) -> Optional[WordCard]:
        return await self._run_async(
            self.find_related_word, current_card, direction, grades,
            exclude_recent_ids, recent_words,
        )

    async def set_word_memorized_async(self, word_id: str, is_memorized: bool) -> bool:
        return await self._run_async(self.set_word_memorized, word_id, is_memorized)

    async def toggle_bookmark_async(self, word_id: str) -> bool:
        return await self._run_async(self.toggle_bookmark, word_id)

    async def get_grade_statistics_async(self) -> Dict[HanjaGrade, GradeStats]:
        return await self._run_async(self.get_grade_statistics)
