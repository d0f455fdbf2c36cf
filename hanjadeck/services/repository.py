"""
Repository Pattern - word/character data access layer.

Translates the normalized schema (characters, words, word_characters,
bookmarks) into denormalized WordCard objects. Characters come back as
genuine joined rows and are assembled into nested cards in Python, then
re-ordered against the literal word string.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import Config, HanjaGrade
from ..config.grades import GradeLike, parse_grades
from ..database.storage import HanjaStorage
from ..exceptions import InvalidGradeError
from ..models import GradeStats, HanjaCharacter, RelatedWords, WordCard
from ..utils.parsing import TextParser
from .ordering import reconcile_card

logger = logging.getLogger(__name__)

_CARD_SELECT = """
    SELECT w.id, w.word, w.pronunciation, w.meaning, w.grade, w.isMemorized,
           w.leftSwipeWords, w.rightSwipeWords,
           COALESCE(b.isBookmarked, 0) AS isBookmarked,
           wc.position,
           c.id AS characterId,
           c.character,
           c.pronunciation AS characterPronunciation,
           c.meaning AS characterMeaning,
           c.strokeCount, c.radical, c.radicalName, c.radicalStrokes
    FROM words w
    LEFT JOIN bookmarks b ON b.wordId = w.id
    LEFT JOIN word_characters wc ON wc.wordId = w.id
    LEFT JOIN characters c ON c.id = wc.characterId
"""

_CARD_ORDER = "ORDER BY w.createdAt, w.rowid, wc.position"

# Columns a related-word search may match on
SHARED_FIELDS = {
    "character": "c.character",
    "radical": "c.radical",
}


def _placeholders(values: Sequence) -> str:
    return ",".join("?" for _ in values)


class BaseWordRepository(ABC):
    """
    Abstract contract for word-card data access.

    The study services only depend on this interface.
    """

    @abstractmethod
    def get_words_by_grade(self, grade: GradeLike) -> List[WordCard]:
        """All word cards of one grade, in seeding order."""

    @abstractmethod
    def get_words_by_ids(self, word_ids: Sequence[str]) -> List[WordCard]:
        """Word cards for the given ids, in the given order."""

    @abstractmethod
    def sample_word_ids_sharing(
        self,
        field: str,
        value: str,
        grades: Sequence[GradeLike],
        exclude_ids: Sequence[str] = (),
        limit: int = Config.RELATED_CANDIDATE_LIMIT,
        exclude_words: Sequence[str] = (),
    ) -> List[str]:
        """Random sample of word ids containing a character matching ``field``."""

    @abstractmethod
    def get_character_by_glyph(self, glyph: str) -> Optional[HanjaCharacter]:
        """Character row for a glyph, if seeded."""

    @abstractmethod
    def count_words(self, grades: Sequence[GradeLike]) -> int:
        """Number of words in the given grades."""

    @abstractmethod
    def update_word_memorized(self, word_id: str, is_memorized: bool) -> bool:
        """Set the memorized flag. Returns True if a row changed."""

    @abstractmethod
    def get_grade_statistics(self) -> Dict[HanjaGrade, GradeStats]:
        """Total and memorized counts for every grade."""


class WordRepository(BaseWordRepository):
    """
    SQLite-backed word repository.

    Provides:
    - Word card assembly from joined rows
    - Order reconciliation on every returned card
    - Memorized-flag updates and per-grade statistics
    """

    def __init__(self, storage: HanjaStorage):
        """
        Args:
            storage: Initialized storage engine shared with the other services
        """
        self.storage = storage

    # ==================== Card assembly ====================

    def _fetch_cards(self, where: str, params: Sequence = ()) -> List[WordCard]:
        rows = self.storage.query(f"{_CARD_SELECT} WHERE {where} {_CARD_ORDER}", params)
        return self._assemble_cards(rows)

    def _assemble_cards(self, rows: Iterable[sqlite3.Row]) -> List[WordCard]:
        cards: "OrderedDict[str, WordCard]" = OrderedDict()
        skipped_words = set()

        for row in rows:
            word_id = row["id"]
            if word_id in skipped_words:
                continue

            card = cards.get(word_id)
            if card is None:
                card = self._card_from_row(row)
                if card is None:
                    skipped_words.add(word_id)
                    continue
                cards[word_id] = card

            character = self._character_from_row(row)
            if character is not None:
                card.characters.append(character)

        return [reconcile_card(card) for card in cards.values()]

    @staticmethod
    def _card_from_row(row: sqlite3.Row) -> Optional[WordCard]:
        try:
            grade = HanjaGrade.parse(row["grade"])
        except InvalidGradeError:
            logger.warning("Skipping word %s with invalid grade %r", row["id"], row["grade"])
            return None

        return WordCard(
            id=row["id"],
            word=TextParser.normalize_unicode(row["word"]),
            pronunciation=row["pronunciation"] or "",
            meaning=row["meaning"] or "",
            grade=grade,
            is_memorized=bool(row["isMemorized"]),
            is_bookmarked=bool(row["isBookmarked"]),
            related_words=RelatedWords(
                left_swipe=TextParser.parse_json_list(row["leftSwipeWords"]),
                right_swipe=TextParser.parse_json_list(row["rightSwipeWords"]),
            ),
        )

    @staticmethod
    def _character_from_row(row: sqlite3.Row) -> Optional[HanjaCharacter]:
        if row["position"] is None:
            return None

        if row["characterId"] is None:
            logger.debug("Word %s references a missing character at position %s",
                         row["id"], row["position"])
            return None

        glyph = TextParser.normalize_unicode(row["character"])
        pronunciation = row["characterPronunciation"] or ""
        meaning = row["characterMeaning"] or ""
        if not glyph or not pronunciation or not meaning:
            logger.debug("Word %s has an incomplete character row %s",
                         row["id"], row["characterId"])
            return None

        return HanjaCharacter(
            id=row["characterId"],
            character=glyph,
            pronunciation=pronunciation,
            meaning=meaning,
            stroke_count=TextParser.to_int(row["strokeCount"]),
            radical=row["radical"] or "",
            radical_name=row["radicalName"] or "",
            radical_strokes=TextParser.to_int(row["radicalStrokes"]),
        )

    # ==================== Queries ====================

    def get_words_by_grade(self, grade: GradeLike) -> List[WordCard]:
        """
        Get all word cards of a grade.

        Args:
            grade: Any accepted grade representation (8, "8", "8급")

        Returns:
            Cards in seeding order with reconciled character lists
        """
        grade = HanjaGrade.parse(grade)
        return self._fetch_cards("w.grade = ?", (int(grade),))

    def get_words_by_memorized(self, is_memorized: bool) -> List[WordCard]:
        """Get all word cards with the given memorized flag."""
        return self._fetch_cards("w.isMemorized = ?", (1 if is_memorized else 0,))

    def get_words_by_character(self, glyph: str) -> List[WordCard]:
        """Get all word cards containing ``glyph``."""
        return self._fetch_cards(
            """w.id IN (
                SELECT wc2.wordId
                FROM word_characters wc2
                JOIN characters c2 ON c2.id = wc2.characterId
                WHERE c2.character = ?
            )""",
            (TextParser.normalize_unicode(glyph),),
        )

    def get_word_by_id(self, word_id: str) -> Optional[WordCard]:
        cards = self._fetch_cards("w.id = ?", (word_id,))
        return cards[0] if cards else None

    def get_words_by_ids(self, word_ids: Sequence[str]) -> List[WordCard]:
        """Get word cards for ``word_ids``, preserving the given order."""
        word_ids = list(dict.fromkeys(word_ids))
        if not word_ids:
            return []

        cards = self._fetch_cards(f"w.id IN ({_placeholders(word_ids)})", word_ids)
        by_id = {card.id: card for card in cards}
        return [by_id[word_id] for word_id in word_ids if word_id in by_id]

    def get_character_by_glyph(self, glyph: str) -> Optional[HanjaCharacter]:
        row = self.storage.query_one(
            "SELECT * FROM characters WHERE character = ? LIMIT 1",
            (TextParser.normalize_unicode(glyph),),
        )
        if row is None:
            return None
        return HanjaCharacter(
            id=row["id"],
            character=row["character"],
            pronunciation=row["pronunciation"],
            meaning=row["meaning"],
            stroke_count=TextParser.to_int(row["strokeCount"]),
            radical=row["radical"],
            radical_name=row["radicalName"],
            radical_strokes=TextParser.to_int(row["radicalStrokes"]),
        )

    def sample_word_ids_sharing(
        self,
        field: str,
        value: str,
        grades: Sequence[GradeLike],
        exclude_ids: Sequence[str] = (),
        limit: int = Config.RELATED_CANDIDATE_LIMIT,
        exclude_words: Sequence[str] = (),
    ) -> List[str]:
        """
        Randomly sample word ids that contain a character matching ``value``.

        Exclusions are applied before sampling, so ``limit`` only counts
        eligible words.

        Args:
            field: "character" (same glyph) or "radical" (same radical)
            value: Glyph or radical to match
            grades: Grades to search within
            exclude_ids: Word ids never to return
            limit: Maximum number of ids to sample
            exclude_words: Literal words never to return (homographs included)

        Returns:
            Up to ``limit`` distinct word ids in random order
        """
        column = SHARED_FIELDS.get(field)
        if column is None:
            raise ValueError(f"Unknown shared field: {field!r}")

        grade_values = [int(g) for g in parse_grades(grades)]
        if not grade_values or not value:
            return []

        exclude_ids = list(dict.fromkeys(exclude_ids))
        exclude_clause = (
            f"AND w.id NOT IN ({_placeholders(exclude_ids)})" if exclude_ids else ""
        )
        exclude_words = list(dict.fromkeys(
            w for w in (TextParser.normalize_unicode(w) for w in exclude_words) if w
        ))
        exclude_word_clause = (
            f"AND w.word NOT IN ({_placeholders(exclude_words)})" if exclude_words else ""
        )

        rows = self.storage.query(
            f"""
            SELECT w.id
            FROM words w
            JOIN word_characters wc ON wc.wordId = w.id
            JOIN characters c ON c.id = wc.characterId
            WHERE {column} = ?
              AND w.grade IN ({_placeholders(grade_values)})
              {exclude_clause}
              {exclude_word_clause}
            GROUP BY w.id
            ORDER BY RANDOM()
            LIMIT ?
            """,
            [TextParser.normalize_unicode(value), *grade_values, *exclude_ids,
             *exclude_words, limit],
        )
        return [row["id"] for row in rows]

    def count_words(self, grades: Sequence[GradeLike]) -> int:
        grade_values = [int(g) for g in parse_grades(grades)]
        if not grade_values:
            return 0
        row = self.storage.query_one(
            f"SELECT COUNT(*) AS total FROM words WHERE grade IN ({_placeholders(grade_values)})",
            grade_values,
        )
        return row["total"] if row else 0

    # ==================== Progress ====================

    def update_word_memorized(self, word_id: str, is_memorized: bool) -> bool:
        """
        Set a word's memorized flag.

        Returns:
            True if a row was updated, False if ``word_id`` does not exist
        """
        changed = self.storage.execute(
            "UPDATE words SET isMemorized = ? WHERE id = ?",
            (1 if is_memorized else 0, word_id),
        )
        if changed > 0:
            logger.info("Word %s memorized=%s", word_id, is_memorized)
            return True

        logger.warning("Word %s not found; memorized flag unchanged", word_id)
        return False

    def get_grade_statistics(self) -> Dict[HanjaGrade, GradeStats]:
        """
        Get total and memorized counts per grade.

        Every grade is present; grades without words report zeros.
        """
        stats = {grade: GradeStats() for grade in HanjaGrade.ordered()}

        rows = self.storage.query(
            """
            SELECT grade,
                   COUNT(*) AS total,
                   SUM(CASE WHEN isMemorized = 1 THEN 1 ELSE 0 END) AS memorized
            FROM words
            GROUP BY grade
            """
        )
        for row in rows:
            try:
                grade = HanjaGrade.parse(row["grade"])
            except InvalidGradeError:
                logger.warning("Ignoring statistics for invalid grade %r", row["grade"])
                continue
            stats[grade] = GradeStats(total=row["total"] or 0, memorized=row["memorized"] or 0)

        return stats
