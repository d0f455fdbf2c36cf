"""hanjadeck - Hanja word/character data layer and related-word engine"""

__version__ = "1.0.0"
__author__ = "hanjadeck Team"

from .config import Config, HanjaGrade
from .database import DataSeeder, HanjaStorage, SeedReport
from .exceptions import (
    HanjaDeckError,
    InvalidGradeError,
    SeedError,
    StorageError,
    StorageInitializationError,
    StorageNotInitializedError,
)
from .models import GradeStats, HanjaCharacter, RelatedWords, SwipeDirection, WordCard
from .services import HanjaService
from .utils import setup_logger

__all__ = [
    'Config',
    'HanjaGrade',
    'DataSeeder',
    'HanjaStorage',
    'SeedReport',
    'HanjaDeckError',
    'InvalidGradeError',
    'SeedError',
    'StorageError',
    'StorageInitializationError',
    'StorageNotInitializedError',
    'GradeStats',
    'HanjaCharacter',
    'RelatedWords',
    'SwipeDirection',
    'WordCard',
    'HanjaService',
    'setup_logger',
]
