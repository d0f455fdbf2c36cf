"""
Tests for static dataset seeding.

Tests cover:
- Loading the bundled CSV dataset
- Destructive, atomic reseeding
- Skipped relations and rejected datasets
- Bookmark retention vs full reset
"""

import pytest

from hanjadeck.config import HanjaGrade
from hanjadeck.database import DataSeeder, load_dataset
from hanjadeck.exceptions import SeedError
from hanjadeck.services import BookmarkStore, WordRepository

from .conftest import WORDS, make_frames


class TestBundledDataset:

    def test_counts(self, storage):
        report = DataSeeder(storage).seed(*load_dataset())

        assert report.characters == 26
        assert report.words == 19
        assert report.relations == 39
        assert report.skipped_relations == 0
        assert report.grade_counts == {
            HanjaGrade.GRADE_8: 13,
            HanjaGrade.GRADE_7: 5,
            HanjaGrade.GRADE_6: 1,
        }
        assert "19 words" in report.summary()

    def test_nested_meaning_flattened(self, storage):
        DataSeeder(storage).seed_from_files()
        character = WordRepository(storage).get_character_by_glyph("天")
        assert character.meaning == "하늘"

    def test_every_card_round_trips(self, storage):
        DataSeeder(storage).seed_from_files()
        repository = WordRepository(storage)

        for grade in (8, 7, 6):
            for card in repository.get_words_by_grade(grade):
                assert card.glyphs == card.word

    def test_swipe_lists_stored_as_json(self, storage):
        DataSeeder(storage).seed_from_files()
        card = WordRepository(storage).get_word_by_id("grade8_word_02")
        assert card.related_words.left_swipe == ["grade8_word_03"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SeedError):
            load_dataset(str(tmp_path / "none.csv"), str(tmp_path / "none.csv"))


class TestSeed:

    def test_reseed_replaces_data(self, seeded_storage):
        seeder = DataSeeder(seeded_storage)
        report = seeder.seed(*make_frames(words=WORDS[:2]))

        assert report.words == 2
        assert seeded_storage.table_counts()["words"] == 2
        assert seeded_storage.table_counts()["word_characters"] == 4

    def test_unknown_character_relation_skipped(self, storage):
        words = [("w1", "天龍", "천룡", "하늘의 용", "8", "c1;c99", "", "")]
        report = DataSeeder(storage).seed(*make_frames(words=words))

        assert report.relations == 1
        assert report.skipped_relations == 1
        card = WordRepository(storage).get_word_by_id("w1")
        assert [c.character for c in card.characters] == ["天"]

    def test_invalid_grade_rejected_without_changes(self, seeded_storage):
        words = [("w1", "天地", "천지", "하늘과 땅", "9급", "c1;c2", "", "")]
        with pytest.raises(SeedError):
            DataSeeder(seeded_storage).seed(*make_frames(words=words))
        assert seeded_storage.table_counts()["words"] == 5

    def test_duplicate_id_rolls_back(self, seeded_storage):
        words = [
            ("w1", "天地", "천지", "하늘과 땅", "8", "c1;c2", "", ""),
            ("w1", "天國", "천국", "하늘 나라", "8", "c1;c3", "", ""),
        ]
        with pytest.raises(SeedError):
            DataSeeder(seeded_storage).seed(*make_frames(words=words))

        counts = seeded_storage.table_counts()
        assert counts["words"] == 5
        assert counts["characters"] == 7

    def test_missing_column(self, storage):
        characters, words = make_frames()
        with pytest.raises(SeedError, match="characterIds"):
            DataSeeder(storage).seed(characters, words.drop(columns=["characterIds"]))

    def test_is_seeded(self, storage):
        seeder = DataSeeder(storage)
        assert seeder.is_seeded() is False
        seeder.seed(*make_frames())
        assert seeder.is_seeded() is True


class TestBookmarkRetention:

    def test_reseed_keeps_bookmarks(self, seeded_storage):
        bookmarks = BookmarkStore(seeded_storage)
        bookmarks.toggle("w1")

        DataSeeder(seeded_storage).seed(*make_frames())

        assert bookmarks.is_bookmarked("w1") is True
        assert WordRepository(seeded_storage).get_word_by_id("w1").is_bookmarked is True

    def test_clear_all_data_removes_bookmarks(self, seeded_storage):
        BookmarkStore(seeded_storage).toggle("w1")

        DataSeeder(seeded_storage).clear_all_data()

        assert seeded_storage.table_counts() == {
            "characters": 0,
            "words": 0,
            "word_characters": 0,
            "bookmarks": 0,
        }
