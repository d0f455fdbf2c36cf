"""Data models for hanjadeck."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Union

from ..config.grades import HanjaGrade


class SwipeDirection(Enum):
    """Swipe gesture direction reported by the session layer."""

    LEFT = "left"    # studied; chain from the first character
    RIGHT = "right"  # saved; chain from the last character

    @classmethod
    def parse(cls, value: Union["SwipeDirection", str]) -> "SwipeDirection":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class HanjaCharacter:
    """A single ideograph as seeded into the characters table."""

    id: str
    character: str
    pronunciation: str
    meaning: str
    stroke_count: int = 0
    radical: str = ""
    radical_name: str = ""
    radical_strokes: int = 0


@dataclass
class RelatedWords:
    """Legacy pre-computed related-word ids per swipe direction."""

    left_swipe: List[str] = field(default_factory=list)
    right_swipe: List[str] = field(default_factory=list)


@dataclass
class WordCard:
    """
    Denormalized unit of study.

    A word plus its resolved, ordered constituent characters and the
    learner-state flags.
    """

    id: str
    word: str
    pronunciation: str
    meaning: str
    grade: HanjaGrade
    is_memorized: bool = False
    is_bookmarked: bool = False
    characters: List[HanjaCharacter] = field(default_factory=list)
    related_words: RelatedWords = field(default_factory=RelatedWords)

    @property
    def glyphs(self) -> str:
        """Concatenated glyphs of the resolved characters."""
        return "".join(c.character for c in self.characters)

    def boundary_character(self, direction: SwipeDirection):
        """First character for a left swipe, last for a right swipe."""
        if not self.characters:
            return None
        if SwipeDirection.parse(direction) is SwipeDirection.LEFT:
            return self.characters[0]
        return self.characters[-1]

    def with_characters(self, characters: List[HanjaCharacter]) -> "WordCard":
        return replace(self, characters=list(characters))

    def copy(self) -> "WordCard":
        """Independent copy; mutating it never touches the original's lists."""
        return replace(
            self,
            characters=list(self.characters),
            related_words=RelatedWords(
                left_swipe=list(self.related_words.left_swipe),
                right_swipe=list(self.related_words.right_swipe),
            ),
        )


@dataclass(frozen=True)
class GradeStats:
    """Per-grade word counts."""

    total: int = 0
    memorized: int = 0

    @property
    def progress(self) -> float:
        """Memorized share of the grade, 0.0 for an empty grade."""
        if self.total <= 0:
            return 0.0
        return self.memorized / self.total
