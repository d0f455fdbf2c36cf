"""Bookmark store - per-word saved state, kept apart from words.isMemorized."""

import logging
from datetime import datetime
from typing import List

from ..database.storage import HanjaStorage

logger = logging.getLogger(__name__)


class BookmarkStore:
    """
    Persisted bookmark flags keyed by word id.

    A row is created on the first toggle and flipped afterwards. Rows are
    only removed by ``clear()`` (full data reset), so bookmarks survive a
    reseed of the word tables.
    """

    def __init__(self, storage: HanjaStorage):
        self.storage = storage

    def is_bookmarked(self, word_id: str) -> bool:
        row = self.storage.query_one(
            "SELECT isBookmarked FROM bookmarks WHERE wordId = ?", (word_id,)
        )
        return bool(row["isBookmarked"]) if row else False

    def set(self, word_id: str, is_bookmarked: bool) -> bool:
        """Set the flag explicitly. Returns the stored state."""
        self.storage.execute(
            """
            INSERT INTO bookmarks (wordId, isBookmarked, updatedAt) VALUES (?, ?, ?)
            ON CONFLICT(wordId) DO UPDATE SET
                isBookmarked = excluded.isBookmarked,
                updatedAt = excluded.updatedAt
            """,
            (word_id, 1 if is_bookmarked else 0, datetime.now().isoformat()),
        )
        return is_bookmarked

    def toggle(self, word_id: str) -> bool:
        """
        Flip the bookmark flag.

        Returns:
            The new state (True when the word is now bookmarked)
        """
        with self.storage.transaction():
            new_state = not self.is_bookmarked(word_id)
            self.set(word_id, new_state)
        logger.info("Word %s bookmarked=%s", word_id, new_state)
        return new_state

    def get_bookmarked_ids(self) -> List[str]:
        """Ids of all bookmarked words, most recently changed first."""
        rows = self.storage.query(
            "SELECT wordId FROM bookmarks WHERE isBookmarked = 1 ORDER BY updatedAt DESC, wordId"
        )
        return [row["wordId"] for row in rows]

    def clear(self) -> int:
        """Delete every bookmark row. Returns the number removed."""
        removed = self.storage.execute("DELETE FROM bookmarks")
        logger.info("Cleared %d bookmarks", removed)
        return removed
