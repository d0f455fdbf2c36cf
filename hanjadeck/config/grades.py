"""
Grade Configuration
-------------------

Hanja proficiency grades (급수). Grade 1 is the hardest tier and grade 8 the
easiest. The integer value is the canonical representation and is what the
``words.grade`` column stores; the Korean label ("8급") only appears at the
system edge via ``HanjaGrade.parse`` and ``HanjaGrade.label``.
"""

import re
from enum import IntEnum
from typing import Iterable, List, Union

from ..exceptions import InvalidGradeError

GRADE_LABEL_SUFFIX = "급"

_LABEL_PATTERN = re.compile(r"^\s*(\d)\s*급?\s*$")

GradeLike = Union["HanjaGrade", int, str]


class HanjaGrade(IntEnum):
    """Closed set of proficiency tiers."""

    GRADE_1 = 1
    GRADE_2 = 2
    GRADE_3 = 3
    GRADE_4 = 4
    GRADE_5 = 5
    GRADE_6 = 6
    GRADE_7 = 7
    GRADE_8 = 8

    @property
    def label(self) -> str:
        """Korean display label, e.g. ``"8급"``."""
        return f"{self.value}{GRADE_LABEL_SUFFIX}"

    @classmethod
    def parse(cls, value: GradeLike) -> "HanjaGrade":
        """
        Normalize any accepted grade representation.

        Accepts a HanjaGrade, an int 1..8, or a string such as ``"8"`` or
        ``"8급"``. Booleans and anything else raise InvalidGradeError.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, bool):
            raise InvalidGradeError(f"Invalid grade: {value!r}")

        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidGradeError(f"Grade out of range: {value!r}") from None

        if isinstance(value, str):
            match = _LABEL_PATTERN.match(value)
            if match:
                return cls.parse(int(match.group(1)))

        raise InvalidGradeError(f"Invalid grade: {value!r}")

    @classmethod
    def ordered(cls) -> List["HanjaGrade"]:
        """All grades, easiest first (8 down to 1)."""
        return sorted(cls, reverse=True)


def parse_grades(values: Iterable[GradeLike]) -> List[HanjaGrade]:
    """Parse a collection of grades, dropping duplicates but keeping order."""
    grades: List[HanjaGrade] = []
    for value in values:
        grade = HanjaGrade.parse(value)
        if grade not in grades:
            grades.append(grade)
    return grades


def grades_cache_key(grades: Iterable[GradeLike]) -> str:
    """Stable key for a grade set: sorted numeric values joined by commas."""
    return ",".join(str(int(g)) for g in sorted(parse_grades(grades)))
