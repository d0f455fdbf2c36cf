"""
Tests for character order reconciliation.

Tests cover:
- Re-ordering to the literal word
- Repeated glyphs and anomalies
- Idempotence and the length bound
"""

from hanjadeck.config import HanjaGrade
from hanjadeck.models import HanjaCharacter, WordCard
from hanjadeck.services.ordering import reconcile_card, reconcile_character_order


def char(char_id, glyph):
    return HanjaCharacter(id=char_id, character=glyph, pronunciation="음", meaning="뜻")


SKY = char("c1", "天")
EARTH = char("c2", "地")
PERSON = char("c3", "人")
WATER = char("c4", "水")


class TestReconcileOrder:
    """reconcile_character_order()"""

    def test_follows_literal_string(self):
        assert reconcile_character_order("天地", [EARTH, SKY]) == [SKY, EARTH]

    def test_already_ordered_unchanged(self):
        assert reconcile_character_order("天地", [SKY, EARTH]) == [SKY, EARTH]

    def test_repeated_glyph_uses_distinct_entries(self):
        first = char("p1", "人")
        second = char("p2", "人")
        result = reconcile_character_order("人人", [first, second])
        assert [c.id for c in result] == ["p1", "p2"]

    def test_anomalous_character_appended(self):
        result = reconcile_character_order("天地", [WATER, EARTH, SKY])
        assert result == [SKY, EARTH, WATER]

    def test_missing_character_tolerated(self):
        assert reconcile_character_order("天地人", [PERSON, SKY]) == [SKY, PERSON]

    def test_single_character_word_is_noop(self):
        assert reconcile_character_order("天", [EARTH, SKY]) == [EARTH, SKY]

    def test_empty_input(self):
        assert reconcile_character_order("天地", []) == []

    def test_idempotent(self):
        once = reconcile_character_order("天地人", [PERSON, WATER, EARTH, SKY])
        twice = reconcile_character_order("天地人", once)
        assert once == twice

    def test_length_bound(self):
        inputs = [WATER, PERSON, EARTH, SKY]
        result = reconcile_character_order("天地", inputs)
        assert len(result) <= len(inputs) + len("天地")
        assert sorted(c.id for c in result) == sorted(c.id for c in inputs)


class TestReconcileCard:
    """reconcile_card()"""

    def test_returns_reordered_copy(self):
        card = WordCard(id="w1", word="天地", pronunciation="천지", meaning="하늘과 땅",
                        grade=HanjaGrade.GRADE_8, characters=[EARTH, SKY])
        result = reconcile_card(card)

        assert result.characters == [SKY, EARTH]
        assert card.characters == [EARTH, SKY]

    def test_ordered_card_returned_as_is(self):
        card = WordCard(id="w1", word="天地", pronunciation="천지", meaning="하늘과 땅",
                        grade=HanjaGrade.GRADE_8, characters=[SKY, EARTH])
        assert reconcile_card(card) is card
