"""
Static dataset seeding.

Loads the bundled character and word CSV files and bulk-inserts them into a
fresh set of tables. Seeding is destructive and atomic: the old rows are
cleared and the new ones inserted inside a single transaction, so a failure
leaves the previous data untouched.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..config import Config, HanjaGrade
from ..exceptions import InvalidGradeError, SeedError
from ..utils.parsing import TextParser
from .storage import HanjaStorage

logger = logging.getLogger(__name__)

CHARACTER_COLUMNS = [
    "id", "character", "pronunciation", "meaning",
    "strokeCount", "radical", "radicalName", "radicalStrokes",
]
WORD_COLUMNS = ["id", "word", "pronunciation", "meaning", "grade", "characterIds"]


@dataclass
class SeedReport:
    """Counts produced by one seeding run."""

    characters: int = 0
    words: int = 0
    relations: int = 0
    skipped_relations: int = 0
    grade_counts: Dict[HanjaGrade, int] = field(default_factory=dict)

    def summary(self) -> str:
        grades = ", ".join(f"{g.label}: {n}" for g, n in sorted(self.grade_counts.items(), reverse=True))
        return (
            f"{self.characters} characters, {self.words} words, "
            f"{self.relations} relations ({self.skipped_relations} skipped) [{grades}]"
        )


def _read_csv(path: str) -> pd.DataFrame:
    return pd.read_csv(
        path,
        dtype=str,
        encoding="utf-8-sig",
        keep_default_na=False,
    ).rename(columns=lambda c: c.strip())


def load_dataset(
    characters_csv: Optional[str] = None,
    words_csv: Optional[str] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Read the static dataset.

    Args:
        characters_csv: Character table CSV (defaults to the bundled file)
        words_csv: Word table CSV (defaults to the bundled file)

    Returns:
        (characters, words) DataFrames with every column as text
    """
    characters_csv = characters_csv or Config.CHARACTERS_CSV
    words_csv = words_csv or Config.WORDS_CSV

    try:
        characters = _read_csv(characters_csv)
        words = _read_csv(words_csv)
    except (OSError, ValueError) as e:
        raise SeedError(f"Cannot read seed dataset: {e}") from e

    logger.info("Loaded dataset: %d characters, %d words", len(characters), len(words))
    return characters, words


class DataSeeder:
    """
    Bulk loader for characters, words and their relations.

    Usage:
        seeder = DataSeeder(storage)
        report = seeder.seed(*load_dataset())
    """

    def __init__(self, storage: HanjaStorage):
        self.storage = storage

    @staticmethod
    def _require_columns(df: pd.DataFrame, columns: List[str], name: str) -> None:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise SeedError(f"{name} dataset is missing columns: {', '.join(missing)}")

    def _character_rows(self, characters: pd.DataFrame) -> List[tuple]:
        rows = []
        for record in characters.to_dict("records"):
            rows.append((
                TextParser.normalize_unicode(record["id"]),
                TextParser.normalize_unicode(record["character"]),
                TextParser.normalize_unicode(record["pronunciation"]),
                TextParser.parse_meaning(record["meaning"]),
                TextParser.to_int(record["strokeCount"]),
                TextParser.normalize_unicode(record["radical"]),
                TextParser.normalize_unicode(record["radicalName"]),
                TextParser.to_int(record["radicalStrokes"]),
            ))
        return rows

    def _word_rows(self, words: pd.DataFrame) -> Tuple[List[tuple], List[Tuple[str, List[str]]]]:
        word_rows = []
        relations = []
        has_memorized = "isMemorized" in words.columns

        for record in words.to_dict("records"):
            word_id = TextParser.normalize_unicode(record["id"])
            try:
                grade = HanjaGrade.parse(TextParser.normalize_unicode(record["grade"]))
            except InvalidGradeError as e:
                raise SeedError(f"Word {word_id}: {e}") from e

            is_memorized = has_memorized and str(record["isMemorized"]).strip().lower() in ("1", "true", "yes")

            word_rows.append((
                word_id,
                TextParser.normalize_unicode(record["word"]),
                TextParser.normalize_unicode(record["pronunciation"]),
                TextParser.parse_meaning(record["meaning"]),
                int(grade),
                1 if is_memorized else 0,
                json.dumps(TextParser.split_ids(record.get("leftSwipe", "")), ensure_ascii=False),
                json.dumps(TextParser.split_ids(record.get("rightSwipe", "")), ensure_ascii=False),
            ))
            relations.append((word_id, TextParser.split_ids(record["characterIds"])))

        return word_rows, relations

    def seed(self, characters: pd.DataFrame, words: pd.DataFrame) -> SeedReport:
        """
        Replace all characters, words and relations with the given dataset.

        Bookmarks are kept. Relations pointing at unknown character ids are
        skipped and counted.

        Raises:
            SeedError: if the dataset is invalid or an insert fails; nothing
                is changed in that case
        """
        self._require_columns(characters, CHARACTER_COLUMNS, "Character")
        self._require_columns(words, WORD_COLUMNS, "Word")

        character_rows = self._character_rows(characters)
        word_rows, word_relations = self._word_rows(words)
        known_characters = {row[0] for row in character_rows}

        relation_rows = []
        report = SeedReport()
        for word_id, character_ids in word_relations:
            for position, character_id in enumerate(character_ids):
                if character_id not in known_characters:
                    logger.warning("Skipping relation %s[%d] -> unknown character %s",
                                   word_id, position, character_id)
                    report.skipped_relations += 1
                    continue
                relation_rows.append((word_id, character_id, position))

        logger.info("Seeding %d characters, %d words, %d relations",
                    len(character_rows), len(word_rows), len(relation_rows))

        try:
            with self.storage.transaction():
                self._clear_word_tables()
                self.storage.executemany(
                    """INSERT INTO characters
                       (id, character, pronunciation, meaning, strokeCount, radical, radicalName, radicalStrokes)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    character_rows,
                )
                self.storage.executemany(
                    """INSERT INTO words
                       (id, word, pronunciation, meaning, grade, isMemorized, leftSwipeWords, rightSwipeWords)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    word_rows,
                )
                self.storage.executemany(
                    "INSERT INTO word_characters (wordId, characterId, position) VALUES (?, ?, ?)",
                    relation_rows,
                )
        except sqlite3.Error as e:
            logger.error("Seeding failed and was rolled back: %s", e)
            raise SeedError(f"Seeding failed: {e}") from e

        report.characters = len(character_rows)
        report.words = len(word_rows)
        report.relations = len(relation_rows)
        report.grade_counts = self._grade_counts()
        logger.info("Seeding complete: %s", report.summary())
        return report

    def seed_from_files(
        self,
        characters_csv: Optional[str] = None,
        words_csv: Optional[str] = None,
    ) -> SeedReport:
        """Load the dataset files and seed them."""
        return self.seed(*load_dataset(characters_csv, words_csv))

    def is_seeded(self) -> bool:
        row = self.storage.query_one("SELECT COUNT(*) AS count FROM words")
        return bool(row and row["count"])

    def _clear_word_tables(self) -> None:
        self.storage.execute("DELETE FROM word_characters")
        self.storage.execute("DELETE FROM words")
        self.storage.execute("DELETE FROM characters")

    def clear_all_data(self) -> None:
        """Full reset: words, characters, relations and bookmarks."""
        with self.storage.transaction():
            self._clear_word_tables()
            self.storage.execute("DELETE FROM bookmarks")
        logger.warning("All hanja data cleared, including bookmarks")

    def _grade_counts(self) -> Dict[HanjaGrade, int]:
        counts = {}
        for row in self.storage.query("SELECT grade, COUNT(*) AS count FROM words GROUP BY grade"):
            try:
                counts[HanjaGrade.parse(row["grade"])] = row["count"]
            except InvalidGradeError:
                continue
        return counts
