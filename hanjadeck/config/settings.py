"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root; real environment variables win
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    # Cross-platform paths using pathlib
    # BASE_DIR is the project root (parent of hanjadeck/)
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()
    PACKAGE_DIR: Path = Path(__file__).parent.parent.resolve()

    # Database file; ":memory:" is accepted for throwaway stores
    DB_PATH: str = os.environ.get("HANJA_DB_PATH", str(BASE_DIR / "data" / "hanja.db"))

    # Bundled seed dataset
    CHARACTERS_CSV: str = str(PACKAGE_DIR / "data" / "characters.csv")
    WORDS_CSV: str = str(PACKAGE_DIR / "data" / "words.csv")

    LOG_LEVEL: str = os.environ.get("HANJA_LOG_LEVEL", "INFO")
    LOG_DIR: str = str(BASE_DIR / "logs")

    # Study session defaults
    DEFAULT_GRADE: int = 8
    RECENT_HISTORY_SIZE: int = 10

    # Related-word search samples at most this many candidates per tier
    RELATED_CANDIDATE_LIMIT: int = 15

    # Worker threads backing the *_async facade methods
    ASYNC_WORKERS: int = 2
