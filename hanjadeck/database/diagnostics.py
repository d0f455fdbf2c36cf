"""Read-only diagnostics for inspecting a seeded database."""

from typing import Any, Dict, Optional

import pandas as pd

from .storage import HanjaStorage


def database_status(storage: HanjaStorage) -> Dict[str, Any]:
    """
    Table counts plus per-grade progress.

    Returns:
        {"counts": {...}, "grades": DataFrame[grade, total, memorized, percentage]}
    """
    grades = storage.read_frame(
        """
        SELECT grade,
               COUNT(*) AS total,
               SUM(CASE WHEN isMemorized = 1 THEN 1 ELSE 0 END) AS memorized
        FROM words
        GROUP BY grade
        ORDER BY grade DESC
        """
    )
    if grades.empty:
        grades["percentage"] = pd.Series(dtype=int)
    else:
        grades["percentage"] = (grades["memorized"] * 100 // grades["total"]).astype(int)

    return {"counts": storage.table_counts(), "grades": grades}


def inspect_word(storage: HanjaStorage, word_id: str) -> Optional[Dict[str, Any]]:
    """
    Raw rows behind one word: the word itself, its relations and characters.

    Returns None when the word does not exist.
    """
    word = storage.query_one("SELECT * FROM words WHERE id = ?", (word_id,))
    if word is None:
        return None

    relations = storage.read_frame(
        "SELECT * FROM word_characters WHERE wordId = ? ORDER BY position", (word_id,)
    )
    characters = storage.read_frame(
        """
        SELECT c.*, wc.position
        FROM word_characters wc
        LEFT JOIN characters c ON c.id = wc.characterId
        WHERE wc.wordId = ?
        ORDER BY wc.position
        """,
        (word_id,),
    )
    return {"word": dict(word), "relations": relations, "characters": characters}


def diagnose_relations(storage: HanjaStorage, sample_size: int = 10) -> Dict[str, pd.DataFrame]:
    """
    Compare word and relation counts per grade and list orphaned words.

    Returns:
        {"grades": DataFrame[grade, word_count, relation_count],
         "words_without_relations": DataFrame[id, word, grade],
         "dangling_relations": DataFrame[wordId, characterId, position]}
    """
    grades = storage.read_frame(
        """
        SELECT w.grade,
               COUNT(DISTINCT w.id) AS word_count,
               COUNT(wc.wordId) AS relation_count
        FROM words w
        LEFT JOIN word_characters wc ON wc.wordId = w.id
        GROUP BY w.grade
        ORDER BY w.grade DESC
        """
    )
    orphans = storage.read_frame(
        """
        SELECT w.id, w.word, w.grade
        FROM words w
        LEFT JOIN word_characters wc ON wc.wordId = w.id
        WHERE wc.wordId IS NULL
        LIMIT ?
        """,
        (sample_size,),
    )
    dangling = storage.read_frame(
        """
        SELECT wc.wordId, wc.characterId, wc.position
        FROM word_characters wc
        LEFT JOIN characters c ON c.id = wc.characterId
        WHERE c.id IS NULL
        LIMIT ?
        """,
        (sample_size,),
    )
    return {
        "grades": grades,
        "words_without_relations": orphans,
        "dangling_relations": dangling,
    }
