"""Configuration module for hanjadeck."""

from .settings import Config
from .grades import (
    GRADE_LABEL_SUFFIX,
    HanjaGrade,
    grades_cache_key,
    parse_grades,
)

__all__ = [
    'Config',
    'GRADE_LABEL_SUFFIX',
    'HanjaGrade',
    'grades_cache_key',
    'parse_grades',
]
