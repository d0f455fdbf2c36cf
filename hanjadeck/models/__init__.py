"""Data models."""

from .card import GradeStats, HanjaCharacter, RelatedWords, SwipeDirection, WordCard

__all__ = [
    'GradeStats',
    'HanjaCharacter',
    'RelatedWords',
    'SwipeDirection',
    'WordCard',
]
