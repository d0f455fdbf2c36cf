"""
Storage engine - owns the embedded SQLite connection and schema.

One connection per storage instance, opened lazily by ``initialize()`` and
reused until ``close()``. All primitives are serialized through a
re-entrant lock so the connection can be shared with the facade's worker
threads.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generator, Iterable, List, Optional, Sequence

import pandas as pd

from ..config import Config
from ..exceptions import StorageInitializationError, StorageNotInitializedError

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS characters (
        id TEXT PRIMARY KEY,
        character TEXT NOT NULL,
        pronunciation TEXT NOT NULL,
        meaning TEXT NOT NULL,
        strokeCount INTEGER NOT NULL,
        radical TEXT NOT NULL,
        radicalName TEXT NOT NULL,
        radicalStrokes INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS words (
        id TEXT PRIMARY KEY,
        word TEXT NOT NULL,
        pronunciation TEXT NOT NULL,
        meaning TEXT NOT NULL,
        grade INTEGER NOT NULL,
        isMemorized BOOLEAN DEFAULT 0,
        leftSwipeWords TEXT,
        rightSwipeWords TEXT,
        createdAt DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS word_characters (
        wordId TEXT,
        characterId TEXT,
        position INTEGER,
        FOREIGN KEY (wordId) REFERENCES words(id),
        FOREIGN KEY (characterId) REFERENCES characters(id),
        PRIMARY KEY (wordId, characterId, position)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS bookmarks (
        wordId TEXT PRIMARY KEY,
        isBookmarked INTEGER NOT NULL DEFAULT 0,
        updatedAt TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_words_grade ON words(grade)",
    "CREATE INDEX IF NOT EXISTS idx_words_memorized ON words(isMemorized)",
    "CREATE INDEX IF NOT EXISTS idx_characters_character ON characters(character)",
    "CREATE INDEX IF NOT EXISTS idx_characters_radical ON characters(radical)",
    "CREATE INDEX IF NOT EXISTS idx_word_characters_word ON word_characters(wordId)",
    "CREATE INDEX IF NOT EXISTS idx_word_characters_character ON word_characters(characterId)",
)


class HanjaStorage:
    """
    Embedded relational store for characters, words and their relations.

    Usage:
        storage = HanjaStorage("hanja.db")
        storage.initialize()
        rows = storage.query("SELECT * FROM words WHERE grade = ?", (8,))
        storage.close()
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: Path to the SQLite file, or ":memory:" (defaults to Config.DB_PATH)
        """
        self.db_path = str(db_path or Config.DB_PATH)
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._in_transaction = False

    @property
    def is_initialized(self) -> bool:
        return self._connection is not None

    def initialize(self) -> sqlite3.Connection:
        """
        Open the connection (once) and ensure the schema exists.

        Safe to call repeatedly; returns the same connection handle.

        Raises:
            StorageInitializationError: if the file cannot be opened or the
                schema cannot be created
        """
        with self._lock:
            if self._connection is not None:
                return self._connection

            try:
                if self.db_path != MEMORY_PATH:
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                connection = sqlite3.connect(self.db_path, check_same_thread=False)
                connection.row_factory = sqlite3.Row
            except (sqlite3.Error, OSError) as e:
                raise StorageInitializationError(
                    f"Cannot open database {self.db_path}: {e}"
                ) from e

            try:
                self._create_schema(connection)
            except sqlite3.Error as e:
                connection.close()
                raise StorageInitializationError(f"Schema creation failed: {e}") from e

            self._connection = connection
            logger.info("Hanja database ready: %s", self.db_path)
            return connection

    def _create_schema(self, connection: sqlite3.Connection) -> None:
        cursor = connection.cursor()
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)
        cursor.execute(
            "INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, ?)",
            (self.SCHEMA_VERSION, datetime.now().isoformat()),
        )
        connection.commit()

    def close(self) -> None:
        """Release the connection. Later operations need initialize() again."""
        with self._lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None
            logger.info("Hanja database closed: %s", self.db_path)

    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StorageNotInitializedError("Database not initialized")
        return self._connection

    def _commit(self, connection: sqlite3.Connection) -> None:
        if not self._in_transaction:
            connection.commit()

    # ==================== Primitives ====================

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement. Returns the affected row count."""
        with self._lock:
            connection = self._require_connection()
            cursor = connection.execute(sql, tuple(params))
            self._commit(connection)
            return cursor.rowcount

    def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> int:
        """Run a write statement for every row. Returns the affected row count."""
        with self._lock:
            connection = self._require_connection()
            cursor = connection.executemany(sql, [tuple(r) for r in rows])
            self._commit(connection)
            return cursor.rowcount

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Run a read statement and fetch every row."""
        with self._lock:
            connection = self._require_connection()
            return connection.execute(sql, tuple(params)).fetchall()

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Run a read statement and fetch the first row, if any."""
        with self._lock:
            connection = self._require_connection()
            return connection.execute(sql, tuple(params)).fetchone()

    def read_frame(self, sql: str, params: Sequence[Any] = ()) -> pd.DataFrame:
        """Run a read statement into a DataFrame."""
        with self._lock:
            connection = self._require_connection()
            return pd.read_sql_query(sql, connection, params=list(params))

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Group writes into one atomic unit.

        Commits when the block exits normally, rolls back and re-raises on
        any exception. Primitives called inside the block do not commit.
        """
        with self._lock:
            connection = self._require_connection()
            if self._in_transaction:
                # Nested blocks join the outer transaction
                yield connection
                return

            self._in_transaction = True
            try:
                yield connection
                connection.commit()
            except BaseException:
                connection.rollback()
                raise
            finally:
                self._in_transaction = False

    def table_counts(self) -> dict:
        """Row counts for every data table."""
        counts = {}
        for table in ("characters", "words", "word_characters", "bookmarks"):
            row = self.query_one(f"SELECT COUNT(*) AS count FROM {table}")
            counts[table] = row["count"] if row else 0
        return counts
