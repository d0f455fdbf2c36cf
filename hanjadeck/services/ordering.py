"""
Character order reconciliation.

The relation table's ``position`` is the authoring-time order, which is not
trustworthy as presentation order. The literal word string is: characters are
re-laid out following it, and anything the relation resolved that the string
does not contain is kept at the end so nothing is lost.
"""

from typing import List, Sequence

from ..models import HanjaCharacter, WordCard


def reconcile_character_order(
    word: str, characters: Sequence[HanjaCharacter]
) -> List[HanjaCharacter]:
    """
    Order ``characters`` to follow the glyphs of ``word`` left to right.

    Repeated glyphs (e.g. 人人) consume distinct entries in their resolved
    order. Entries whose glyph does not occur in ``word`` are appended in
    their original order. Single-character words are returned as-is.
    """
    if len(word) <= 1:
        return list(characters)

    remaining = list(characters)
    ordered: List[HanjaCharacter] = []

    for glyph in word:
        for index, character in enumerate(remaining):
            if character.character == glyph:
                ordered.append(remaining.pop(index))
                break

    ordered.extend(remaining)
    return ordered


def reconcile_card(card: WordCard) -> WordCard:
    """Return ``card`` with its characters in literal-string order."""
    ordered = reconcile_character_order(card.word, card.characters)
    if ordered == card.characters:
        return card
    return card.with_characters(ordered)
